"""
Periodic feed checker.

A single asyncio task ticks at a fixed period and runs one ingestion per tick
in a worker thread. Runs never overlap each other: a tick that falls due while
the previous run is still going is executed right after it finishes. Errors are
logged and the loop waits for the next tick, since there is no caller to
report them to.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from feedkeeper.exceptions import FeedKeeperError
from feedkeeper.services.ingestion import IngestRunResult

logger = logging.getLogger(__name__)


class FeedScheduler:
    """
    Drive an ingestion callable on a fixed interval.

    Usage:
        scheduler = FeedScheduler(service.ingest_once, interval_seconds=1800)
        scheduler.start()      # inside a running event loop
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        ingest: Callable[[], IngestRunResult],
        interval_seconds: float = 1800,
        run_on_start: bool = True,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self._ingest = ingest
        self.interval_seconds = interval_seconds
        self.run_on_start = run_on_start
        self._task: asyncio.Task | None = None
        # Worker-thread run of the current tick; outlives a cancelled loop task
        self._current_run: asyncio.Future | None = None

        # Last tick outcome, for the status endpoint
        self.last_run_at: datetime | None = None
        self.last_result: IngestRunResult | None = None
        self.last_error: str | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_run_status(self) -> str | None:
        if self.last_run_at is None:
            return None
        return "failed" if self.last_error else "completed"

    def start(self) -> None:
        """Start the background loop. Must be called from a running event loop."""
        if self.running:
            raise RuntimeError("Feed scheduler is already running")
        self._task = asyncio.create_task(self.run_forever(), name="feed-scheduler")
        logger.info(
            f"Periodic feed checker started (every {self.interval_seconds}s)",
            extra={"event": "scheduler_started"},
        )

    async def stop(self) -> None:
        """
        Cancel the background loop and wait for it to exit.

        A run already executing in the worker thread cannot be interrupted, so
        this also waits for it to finish. Callers may then release resources
        the run uses, such as the feed client.
        """
        task = self._task
        self._task = None
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        run = self._current_run
        self._current_run = None
        if run is not None and not run.done():
            logger.info("Waiting for the in-flight feed check to finish")
            await asyncio.wait({run})
            if run.exception() is not None:
                logger.error(f"Feed check running at shutdown failed: {run.exception()}")
        logger.info("Periodic feed checker stopped", extra={"event": "scheduler_stopped"})

    async def run_forever(self) -> None:
        """Tick at a fixed period until cancelled."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        if not self.run_on_start:
            next_tick += self.interval_seconds

        while True:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            await self.run_tick()
            next_tick += self.interval_seconds

    async def run_tick(self) -> IngestRunResult | None:
        """Run one ingestion, swallowing and recording any error."""
        logger.info("Running periodic check for feed updates...", extra={"event": "scheduler_tick"})
        self.last_run_at = datetime.utcnow()

        try:
            self._current_run = asyncio.ensure_future(asyncio.to_thread(self._ingest))
            result = await asyncio.shield(self._current_run)
        except FeedKeeperError as e:
            self.last_error = str(e)
            logger.error(
                f"An error occurred during the periodic feed check: {e}",
                extra={"event": "scheduler_tick_failed"},
            )
            return None
        except Exception as e:
            self.last_error = str(e)
            logger.exception(f"Unexpected error during the periodic feed check: {e}")
            return None

        self.last_result = result
        self.last_error = None
        return result
