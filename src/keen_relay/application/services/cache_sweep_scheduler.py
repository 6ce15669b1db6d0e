"""Background loop resubmitting cached events."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from keen_relay.application.services.event_dispatcher import EventDispatcher
from keen_relay.domain.client_config import MIN_SWEEP_INTERVAL_SECONDS
from keen_relay.domain.events import CallbackData, EventOrigin, EventStatus
from keen_relay.domain.monitoring_models import SweepState
from keen_relay.domain.ports import EventCache

logger = logging.getLogger(__name__)


class CacheSweepScheduler:
    """Periodically resubmit a bounded batch of cached events.

    Each sweep waits for its whole batch to settle before the next interval
    starts, so at most `batch_size` resubmissions are in flight at once.
    """

    def __init__(
        self,
        dispatcher: EventDispatcher,
        cache: EventCache | None,
        *,
        interval_seconds: float = 15.0,
        batch_size: int = 10,
    ) -> None:
        self._dispatcher = dispatcher
        self._cache = cache
        self._interval_seconds = max(interval_seconds, MIN_SWEEP_INTERVAL_SECONDS)
        self._batch_size = max(batch_size, 1)

        self._state = SweepState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._sweep_lock = asyncio.Lock()

    @property
    def state(self) -> SweepState:
        return self._state

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def start(self) -> None:
        """Start the sweep loop once; later calls are no-ops."""

        if self._state is not SweepState.IDLE:
            return
        loop_coroutine = self._run_loop()
        try:
            self._task = asyncio.create_task(loop_coroutine, name="keen-cache-sweep")
        except RuntimeError:
            loop_coroutine.close()
            logger.error("No running event loop; cache sweep not started.")
            return
        self._state = SweepState.RUNNING
        logger.info("Cache sweep started (every %.1fs).", self._interval_seconds)

    async def stop(self) -> None:
        """Stop the sweep loop for good."""

        self._state = SweepState.STOPPED
        self._stopping.set()
        task = self._task
        if task is None:
            return
        self._task = None
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    async def sweep_once(self) -> int:
        """Resubmit one batch and wait for it to settle; return its size.

        Overlapping calls run one after another.
        """

        async with self._sweep_lock:
            cache = self._cache
            if cache is None or not cache.ready():
                return 0

            tasks: list[asyncio.Task[None]] = []
            for event in cache.read(self._batch_size):
                task = self._dispatcher.submit(event, self._on_resubmitted, EventOrigin.FROM_CACHE)
                if task is not None:
                    tasks.append(task)
            if not tasks:
                return 0

            logger.debug("Cache sweep resubmitting %s events.", len(tasks))
            await asyncio.wait(tasks)
            return len(tasks)

    async def _run_loop(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.sweep_once()
            except Exception:
                logger.exception("Cache sweep failed.")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval_seconds)
            except TimeoutError:
                pass

    def _on_resubmitted(self, result: CallbackData) -> None:
        if result.status is EventStatus.SUBMITTED:
            return
        logger.warning(
            "Cached event '%s' failed to be sent and remains %s.",
            result.name,
            "queued" if result.status is EventStatus.CACHED else "unsaved",
        )


__all__ = ["CacheSweepScheduler"]
