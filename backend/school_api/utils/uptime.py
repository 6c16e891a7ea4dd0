"""Uptime bookkeeping for the health endpoint."""

from __future__ import annotations

import time


class Uptime:
    """Seconds elapsed since the application was built."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._started = clock()

    def seconds(self) -> float:
        return max(0.0, self._clock() - self._started)

    def __str__(self) -> str:
        return format_uptime(self.seconds())


def format_uptime(seconds: float) -> str:
    """Render `seconds` as `"D days, H hours, M minutes, S seconds"`."""
    total = max(0, int(seconds))
    days, rest = divmod(total, 24 * 3600)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days} days, {hours} hours, {minutes} minutes, {secs} seconds"
