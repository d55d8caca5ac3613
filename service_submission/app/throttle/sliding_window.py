"""
Sliding window throttle gate for outbound registry calls.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, NoReturn, Optional, Tuple

from shared.errors import ThrottleCancelled
from shared.logging import get_logger
from shared.metrics import MetricsCollector


class TimeUnit(Enum):
    """Units a rate limit window can be expressed in, valued in milliseconds."""

    MILLISECONDS = 1
    SECONDS = 1_000
    MINUTES = 60_000
    HOURS = 3_600_000
    DAYS = 86_400_000

    @classmethod
    def from_name(cls, name: str) -> "TimeUnit":
        return cls[name.upper()]

    def to_millis(self, amount: float = 1) -> float:
        return amount * self.value


@dataclass(frozen=True)
class RateLimit:
    """At most ``request_limit`` admissions in any trailing ``window_ms``."""

    request_limit: int
    window_ms: float

    def __post_init__(self) -> None:
        if self.request_limit < 0:
            raise ValueError(f"request_limit must be >= 0, got {self.request_limit}")
        if self.window_ms < 0:
            raise ValueError(f"window_ms must be >= 0, got {self.window_ms}")

    @classmethod
    def per(cls, time_unit: TimeUnit, request_limit: int) -> "RateLimit":
        """Limit of ``request_limit`` calls per one ``time_unit``."""
        return cls(request_limit=request_limit, window_ms=time_unit.to_millis(1))


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class CancellationToken:
    """Thread-safe flag that aborts pending admission waits."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: Optional[float]) -> bool:
        """Sleep up to ``seconds``; return True if cancelled meanwhile."""
        return self._event.wait(seconds)


class ThrottleGate:
    """
    Rolling window rate limiter shared by concurrent callers.

    The grant window keeps the timestamps of the last ``request_limit``
    admissions. A caller is admitted when the window has a free slot or its
    oldest entry has aged out of ``window_ms``. Otherwise the caller computes
    how long until the oldest entry expires, sleeps outside the lock, and
    re-evaluates from a fresh clock reading. The window is only touched at the
    moment of admission, so a cancelled wait leaves it unchanged.

    Admission is not FIFO: a sleeping caller can be overtaken by a later one
    that reaches the lock first once a slot frees up.

    A limit of zero never admits; ``acquire`` waits until cancelled or timed
    out. A zero-length window admits unconditionally.
    """

    def __init__(
        self,
        rate_limit: RateLimit,
        *,
        clock: Optional[Callable[[], float]] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._rate_limit = rate_limit
        self._clock = clock or monotonic_ms
        self._metrics = metrics
        self._lock = threading.Lock()
        self._grants: Deque[float] = deque(maxlen=rate_limit.request_limit)
        self.logger = get_logger("throttle.sliding_window")

    @property
    def rate_limit(self) -> RateLimit:
        return self._rate_limit

    def window(self) -> Tuple[float, ...]:
        """Snapshot of the grant window, oldest first."""
        with self._lock:
            return tuple(self._grants)

    def _admit_or_delay(self) -> Tuple[Optional[float], float]:
        """Admit now if possible. Returns (granted_at, 0) or (None, wait_ms)."""
        limit = self._rate_limit.request_limit
        window_ms = self._rate_limit.window_ms

        with self._lock:
            now = self._clock()
            if limit == 0:
                return None, float("inf")
            if len(self._grants) < limit:
                self._grants.append(now)
                return now, 0.0

            elapsed = now - self._grants[0]
            if elapsed >= window_ms:
                # maxlen evicts the oldest entry
                self._grants.append(now)
                return now, 0.0
            return None, window_ms - elapsed

    def try_acquire(self) -> bool:
        """Admit without waiting; False leaves the window unchanged."""
        granted_at, _ = self._admit_or_delay()
        if granted_at is None:
            return False
        if self._metrics:
            self._metrics.record_admission(0.0)
        return True

    def acquire(
        self,
        cancel_token: Optional[CancellationToken] = None,
        timeout: Optional[float] = None,
    ) -> float:
        """
        Block until admitted and return the recorded grant timestamp (ms).

        Raises ThrottleCancelled if ``cancel_token`` fires or ``timeout``
        seconds pass first.
        """
        started = time.monotonic()
        deadline = started + timeout if timeout is not None else None
        token = cancel_token or CancellationToken()

        while True:
            if token.cancelled:
                self._cancelled("cancelled", started)

            granted_at, wait_ms = self._admit_or_delay()
            if granted_at is not None:
                waited = time.monotonic() - started
                if self._metrics:
                    self._metrics.record_admission(waited)
                self.logger.debug("Throttle admission granted", granted_at=granted_at, waited_seconds=waited)
                return granted_at

            wait_s: Optional[float] = None if wait_ms == float("inf") else wait_ms / 1000.0
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    self._cancelled("timeout", started)
                wait_s = remaining if wait_s is None else min(wait_s, remaining)

            self.logger.debug("Throttle window full, waiting", wait_seconds=wait_s)
            if token.wait(wait_s):
                self._cancelled("cancelled", started)

    def _cancelled(self, reason: str, started: float) -> NoReturn:
        waited = time.monotonic() - started
        if self._metrics:
            self._metrics.record_cancellation(reason)
        self.logger.info("Throttle wait aborted", reason=reason, waited_seconds=waited)
        raise ThrottleCancelled(reason, details={"waited_seconds": waited})
