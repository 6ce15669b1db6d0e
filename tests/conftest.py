from __future__ import annotations

import pytest

from fakes import ScriptedTransport


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()
