"""Simulated ADC and clock for dry runs and tests."""

from __future__ import annotations

import itertools
import math
from typing import Any, Iterable, Iterator, List, Optional

from acs712_sense.instrumentation.clock import TICKS_BITS


class ScriptedAnalogInput:
    """Plays back a fixed sequence of ADC codes.

    With ``repeat=True`` the sequence cycles forever; otherwise the last code is
    held once the script runs out.
    """

    def __init__(self, codes: Iterable[int], repeat: bool = False) -> None:
        self._codes: List[int] = [int(code) for code in codes]
        if not self._codes:
            raise ValueError("ScriptedAnalogInput needs at least one code")
        self._source: Iterator[int] = itertools.cycle(self._codes) if repeat else iter(self._codes)
        self._last = self._codes[-1]
        self.configured_pins: List[Any] = []
        self.reads = 0

    @classmethod
    def constant(cls, code: int) -> "ScriptedAnalogInput":
        return cls([code], repeat=True)

    @classmethod
    def sine(
        cls,
        zero_code: float,
        peak_codes: float,
        samples_per_period: int,
        adc_resolution: int = 1023,
    ) -> "ScriptedAnalogInput":
        """Quantized sinusoid centred on ``zero_code``, clamped to the ADC range."""
        codes = []
        for idx in range(samples_per_period):
            value = zero_code + peak_codes * math.sin(2.0 * math.pi * idx / samples_per_period)
            codes.append(min(max(int(round(value)), 0), adc_resolution))
        return cls(codes, repeat=True)

    def configure_pin(self, pin: Any) -> None:
        self.configured_pins.append(pin)

    def read_raw(self, pin: Any) -> int:
        self.reads += 1
        self._last = next(self._source, self._last)
        return self._last


class SimulatedClock:
    """Wrapping microsecond counter that only moves when told to.

    ``tick_us`` advances the counter after every ``now_us()`` call, which models
    the time a tight sampling loop spends per iteration.
    """

    def __init__(self, start_us: int = 0, tick_us: int = 0, bits: int = TICKS_BITS) -> None:
        self._mask = (1 << bits) - 1
        self._now = start_us & self._mask
        self.tick_us = tick_us
        self.sleeps: List[float] = []

    def now_us(self) -> int:
        value = self._now
        self.advance(self.tick_us)
        return value

    def advance(self, delta_us: int) -> None:
        self._now = (self._now + int(delta_us)) & self._mask

    def sleep_ms(self, duration_ms: float) -> None:
        self.sleeps.append(duration_ms)
        self.advance(int(duration_ms * 1000))

    def peek(self, offset_us: Optional[int] = None) -> int:
        return (self._now + (offset_us or 0)) & self._mask
