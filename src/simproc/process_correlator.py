"""
Correlate predicates with live processes.

Two modes are offered over a :class:`~simproc.predicates.Predicate`:

* immediate lookup (:meth:`ProcessCorrelator.lookup`), one snapshot, returning
  :class:`ProcessMatch` or :class:`NotFound`;
* bounded wait (:meth:`ProcessCorrelator.wait_for`), polling fresh snapshots
  until a match appears or the deadline passes, returning
  :class:`ProcessMatch` or :class:`Timeout`.

A launch request can return before the OS has registered the new process, so
a lookup straight after launching is expected to miss; the bounded wait covers
that window. When several processes match, the first in snapshot order wins.
That tie-break is best-effort; :class:`ProcessMatch` keeps every candidate for
callers that need to narrow further by parent pid or recency.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from .config import CorrelatorSettings
from .predicates import Predicate, filter_processes
from .process_correlator_helpers import WaitDeadline, run_in_background
from .process_models import (
    LookupOutcome,
    NotFound,
    ProcessDescriptor,
    ProcessMatch,
    Timeout,
    WaitOutcome,
)
from .process_snapshot import ProcessSnapshotProvider

logger = logging.getLogger(__name__)

_POLL_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="process-correlator")


class SnapshotSource(Protocol):
    def snapshot(self) -> Sequence[ProcessDescriptor]: ...


class ProcessCorrelator:
    """Answers "which processes match" now, or within a deadline."""

    def __init__(
        self,
        provider: Optional[SnapshotSource] = None,
        *,
        poll_interval_seconds: Optional[float] = None,
        default_timeout_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        settings = None
        if poll_interval_seconds is None or default_timeout_seconds is None:
            settings = CorrelatorSettings.from_env()
        if poll_interval_seconds is None:
            poll_interval_seconds = settings.poll_interval_seconds
        if default_timeout_seconds is None:
            default_timeout_seconds = settings.wait_timeout_seconds
        _validate_interval(poll_interval_seconds)

        self.provider = provider if provider is not None else ProcessSnapshotProvider()
        self.poll_interval_seconds = poll_interval_seconds
        self.default_timeout_seconds = default_timeout_seconds
        self._clock = clock
        self._sleep = sleep

    def matching(self, predicate: Predicate) -> List[ProcessDescriptor]:
        """Every process in one fresh snapshot that satisfies *predicate*."""
        return filter_processes(self.provider.snapshot(), predicate)

    def lookup(self, predicate: Predicate) -> LookupOutcome:
        """Immediate lookup; zero matches is a normal outcome."""
        matches = self.matching(predicate)
        if not matches:
            logger.debug("No process currently matches %s", predicate)
            return NotFound(description=predicate.description)
        if len(matches) > 1:
            logger.debug(
                "%d processes match %s; using pid %s (first in snapshot order)",
                len(matches),
                predicate,
                matches[0].pid,
            )
        return ProcessMatch.from_candidates(matches)

    async def wait_for(
        self,
        predicate: Predicate,
        timeout_seconds: Optional[float] = None,
        *,
        poll_interval_seconds: Optional[float] = None,
    ) -> WaitOutcome:
        """
        Poll fresh snapshots until *predicate* matches or the deadline passes.

        Polls immediately, then after each interval, with a final poll at the
        deadline. Snapshots run on a worker thread so the event loop stays free.
        Cancel the awaiting task to abandon the wait early.

        Raises:
            EnumerationError: If any poll cannot list processes.
            ValueError: If the timeout is negative or the interval not positive.
        """
        timeout = self.default_timeout_seconds if timeout_seconds is None else timeout_seconds
        interval = self.poll_interval_seconds if poll_interval_seconds is None else poll_interval_seconds
        _validate_interval(interval)
        deadline = WaitDeadline(timeout, self._clock)
        loop = asyncio.get_running_loop()

        while True:
            snapshot = await loop.run_in_executor(_POLL_EXECUTOR, self.provider.snapshot)
            deadline.record_poll()
            matches = filter_processes(snapshot, predicate)
            if matches:
                logger.info(
                    "Process %s matched %s after %.2fs (%d polls)",
                    matches[0].pid,
                    predicate,
                    deadline.elapsed,
                    deadline.polls,
                )
                return ProcessMatch.from_candidates(matches)

            if deadline.expired:
                logger.debug(
                    "Timed out after %.2fs (%d polls) waiting for %s",
                    deadline.elapsed,
                    deadline.polls,
                    predicate,
                )
                return Timeout(
                    description=predicate.description,
                    elapsed_seconds=deadline.elapsed,
                    polls=deadline.polls,
                )
            await self._sleep(deadline.next_sleep(interval))

    def wait_for_sync(
        self,
        predicate: Predicate,
        timeout_seconds: Optional[float] = None,
        *,
        poll_interval_seconds: Optional[float] = None,
    ) -> WaitOutcome:
        """Blocking variant of :meth:`wait_for` for synchronous callers.

        Raises:
            RuntimeError: If called while an event loop is already running.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.wait_for(predicate, timeout_seconds, poll_interval_seconds=poll_interval_seconds))

        raise RuntimeError("wait_for_sync cannot run inside an active event loop. Use the async wait_for API instead.")

    def wait_in_background(
        self,
        predicate: Predicate,
        timeout_seconds: Optional[float] = None,
        *,
        poll_interval_seconds: Optional[float] = None,
    ) -> "Future[WaitOutcome]":
        """Start the wait on a dedicated thread and return a future for its outcome."""
        return run_in_background(
            lambda: self.wait_for(predicate, timeout_seconds, poll_interval_seconds=poll_interval_seconds),
            name=f"process-wait-{predicate.description[:40]}",
        )


def _validate_interval(poll_interval_seconds: float) -> None:
    if poll_interval_seconds <= 0:
        raise ValueError(f"poll_interval_seconds must be positive (got {poll_interval_seconds})")


__all__ = [
    "ProcessCorrelator",
    "SnapshotSource",
]
