"""Circuit breaker for failing lookup providers."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class CircuitBreaker:
    """Sliding-window failure counter with a timed open state.

    The breaker opens once ``max_failures`` failures fall inside the
    trailing ``failure_window`` seconds. Opening clears the failure log;
    the breaker closes again once ``failure_window`` seconds have passed
    since it opened, which is evaluated lazily on the next ``is_open``.
    """

    def __init__(
        self,
        max_failures: int = 3,
        failure_window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "lookup",
    ) -> None:
        if max_failures < 1:
            raise ValueError("max_failures must be at least 1")
        self.max_failures = max_failures
        self.failure_window = failure_window
        self.name = name
        self._clock = clock
        self._failures: List[float] = []
        self._state = CircuitState.CLOSED
        self._opened_at: Optional[float] = None

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        """Failures inside the trailing window; does not change state."""
        now = self._clock()
        return sum(1 for f in self._failures if now - f < self.failure_window)

    @property
    def opened_at(self) -> Optional[float]:
        return self._opened_at

    def is_open(self) -> bool:
        """Check whether calls should be short-circuited."""
        now = self._clock()

        if self._state is CircuitState.OPEN:
            if self._opened_at is not None and now - self._opened_at >= self.failure_window:
                self._close()
                logger.info(f"Circuit breaker reset for {self.name} lookups")
                return False
            return True

        self._prune(now)
        if len(self._failures) >= self.max_failures:
            self._open(now)
            return True
        return False

    def record_failure(self) -> None:
        """Record a qualifying upstream failure."""
        now = self._clock()
        self._prune(now)
        self._failures.append(now)
        if self._state is CircuitState.CLOSED and len(self._failures) >= self.max_failures:
            self._open(now)

    def record_success(self) -> None:
        """Clear failures and force the breaker closed."""
        self._failures.clear()
        self._state = CircuitState.CLOSED
        self._opened_at = None

    def _prune(self, now: float) -> None:
        self._failures = [f for f in self._failures if now - f < self.failure_window]

    def _open(self, now: float) -> None:
        logger.warning(
            f"Circuit breaker opened for {self.name} lookups after "
            f"{len(self._failures)} failures in {self.failure_window:.0f}s"
        )
        self._state = CircuitState.OPEN
        self._opened_at = now
        self._failures.clear()

    def _close(self) -> None:
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._failures.clear()
