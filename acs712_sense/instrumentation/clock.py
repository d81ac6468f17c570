"""Monotonic microsecond time sources."""

from __future__ import annotations

import time
from typing import Protocol

TICKS_BITS = 32


def ticks_diff(new: int, old: int, bits: int = TICKS_BITS) -> int:
    """Return ``new - old`` on a wrapping unsigned counter of ``bits`` width."""
    return (new - old) & ((1 << bits) - 1)


class Clock(Protocol):
    """Time capability consumed by the sensor core."""

    def now_us(self) -> int:
        ...

    def sleep_ms(self, duration_ms: float) -> None:
        ...


class MonotonicClock:
    """Host clock backed by ``time.monotonic_ns``, wrapped like a hardware counter."""

    def __init__(self, bits: int = TICKS_BITS) -> None:
        self.bits = bits
        self._mask = (1 << bits) - 1

    def now_us(self) -> int:
        return (time.monotonic_ns() // 1000) & self._mask

    def sleep_ms(self, duration_ms: float) -> None:
        if duration_ms > 0:
            time.sleep(duration_ms / 1000.0)
