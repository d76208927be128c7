from __future__ import annotations

import time
from typing import Callable

__all__ = ["Timer"]


class Timer:
    """
    Pausable stopwatch with an optional soft timeout.

    - `start()` starts the stopwatch, or resumes it after `pause()`.
    - Paused intervals are not counted in `elapsed()`.
    - The timeout is advisory: callers poll `has_timeout()` between units of work.
    """

    def __init__(
        self,
        timeout: float | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._clock = clock
        self._timeout = timeout if timeout else None
        self._accumulated = 0.0
        self._started_at: float | None = None

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def set_timeout(self, timeout: float | None) -> None:
        self._timeout = timeout if timeout else None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()

    def pause(self) -> None:
        if self._started_at is not None:
            self._accumulated += self._clock() - self._started_at
            self._started_at = None

    def reset(self) -> None:
        self._accumulated = 0.0
        self._started_at = None

    def elapsed(self) -> float:
        """Seconds counted so far, excluding paused intervals."""
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + (self._clock() - self._started_at)

    def remaining(self) -> float:
        """Seconds left before the timeout; `inf` without a timeout."""
        if self._timeout is None:
            return float("inf")
        return max(0.0, self._timeout - self.elapsed())

    def has_timeout(self) -> bool:
        return self._timeout is not None and self.elapsed() >= self._timeout
