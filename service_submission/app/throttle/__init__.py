"""
Throttling package for the Submission client.

Holds the sliding window gate that bounds outbound registry calls to a
fixed number per rolling time window, shared across threads.
"""

from .sliding_window import CancellationToken, RateLimit, ThrottleGate, TimeUnit, monotonic_ms

__all__ = [
    "CancellationToken",
    "RateLimit",
    "ThrottleGate",
    "TimeUnit",
    "monotonic_ms",
]
