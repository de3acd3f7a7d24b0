"""
Rate calculation between two readings of a monotonically increasing counter.
"""

from __future__ import annotations

from diskrate.errors import CounterReset, InvalidValue, StaleWindow

# Snapshots further apart than this aren't comparable (agent down, clock jump).
MAX_WINDOW_SECONDS = 600


def rate(current: float, previous: float, elapsed_seconds: int, per_second: bool) -> float:
    """Normalize (current - previous) to per-second, or per-minute when per_second is False.

    Raises StaleWindow if the window exceeds MAX_WINDOW_SECONDS, InvalidValue
    if it isn't positive, and CounterReset if the counter went backwards.
    """
    if elapsed_seconds > MAX_WINDOW_SECONDS:
        raise StaleWindow(f"too long duration: {elapsed_seconds}s")
    if elapsed_seconds <= 0:
        raise InvalidValue(f"non-positive duration: {elapsed_seconds}s")

    delta = current - previous
    if delta < 0:
        raise CounterReset(f"counter seems to be reset ({previous} -> {current})")

    if per_second:
        return delta / elapsed_seconds
    return delta * 60 / elapsed_seconds
