"""Reliable Keen.IO event delivery with a durable retry cache."""

__version__ = "0.1.0"

__all__ = ["__version__"]
