"""Time sources used for price staleness checks."""
from __future__ import annotations

import time


def wall_clock() -> int:
    """Current UNIX time in whole seconds."""
    return int(time.time())


class ManualClock:
    """Deterministic clock for tests and scenario replay."""

    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def set(self, now: int) -> None:
        self.now = now

    def advance(self, seconds: int) -> None:
        self.now += seconds
