"""Per-wait deadline bookkeeping."""

from __future__ import annotations

from typing import Callable


class WaitDeadline:
    """Tracks the elapsed budget of one bounded wait.

    Owned by a single wait operation; nothing here is shared between waits.
    """

    def __init__(self, timeout_seconds: float, clock: Callable[[], float]):
        if timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must be non-negative (got {timeout_seconds})")
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._started_at = clock()
        self.polls = 0

    def record_poll(self) -> None:
        self.polls += 1

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started_at

    @property
    def remaining(self) -> float:
        return max(0.0, self.timeout_seconds - self.elapsed)

    @property
    def expired(self) -> bool:
        return self.elapsed >= self.timeout_seconds

    def next_sleep(self, poll_interval_seconds: float) -> float:
        """Sleep no longer than the interval, and never past the deadline."""
        return min(poll_interval_seconds, self.remaining)
