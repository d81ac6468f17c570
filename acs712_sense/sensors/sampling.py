"""Oversampling strategies: fixed sample count, time window, and incremental."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Tuple

from acs712_sense.instrumentation.clock import TICKS_BITS, Clock, ticks_diff
from acs712_sense.sensors.calibration import SensorConfigError, require_positive

ReadCode = Callable[[], int]
CodeToAmps = Callable[[float], float]

# Longest span ticks_diff can measure on the wrapping counter.
MAX_SPAN_US = (1 << TICKS_BITS) - 1


def _require_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SensorConfigError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class FixedCountOversampling:
    """Average ``samples`` blocking reads, sleeping ``delay_ms`` after each one."""

    samples: int = 100
    delay_ms: float = 0.0

    def __post_init__(self) -> None:
        _require_count("samples", self.samples)
        if self.delay_ms < 0:
            raise SensorConfigError(f"delay_ms must not be negative, got {self.delay_ms!r}")

    def average(self, read_code: ReadCode, clock: Clock) -> float:
        total = 0
        for _ in range(self.samples):
            total += read_code()
            if self.delay_ms:
                clock.sleep_ms(self.delay_ms)
        return total / float(self.samples)


# Back-to-back reads; the loop overhead is the only settling time.
FAST_OVERSAMPLING = FixedCountOversampling(samples=100, delay_ms=0.0)
# Fewer reads with a 1 ms pause so the sample-and-hold can settle.
SETTLED_OVERSAMPLING = FixedCountOversampling(samples=10, delay_ms=1.0)
DEFAULT_CALIBRATION = FixedCountOversampling(samples=100, delay_ms=2.0)


@dataclass(frozen=True)
class TimeWindowRms:
    """RMS of single-read currents collected over whole periods of the signal."""

    periods: int = 1

    def __post_init__(self) -> None:
        _require_count("periods", self.periods)

    def window_us(self, frequency_hz: float) -> float:
        require_positive("frequency_hz", frequency_hz)
        window = self.periods * 1_000_000 / frequency_hz
        if window > MAX_SPAN_US:
            raise SensorConfigError(
                f"AC window of {window:.0f} us exceeds the {TICKS_BITS}-bit clock span; "
                f"raise frequency_hz or lower periods"
            )
        return window

    def measure(self, read_code: ReadCode, to_amps: CodeToAmps, clock: Clock, frequency_hz: float) -> Tuple[float, int]:
        """Return ``(rms_amps, sample_count)``; an empty window yields ``(0.0, 0)``."""
        window = self.window_us(frequency_hz)
        start = clock.now_us()
        sum_of_squares = 0.0
        count = 0
        while ticks_diff(clock.now_us(), start) < window:
            current = to_amps(read_code())
            sum_of_squares += current * current
            count += 1
        if count == 0:
            return 0.0, 0
        return math.sqrt(sum_of_squares / count), count


@dataclass(frozen=True)
class IncrementalOversampling:
    """Take one sample per ``interval_us`` and publish every ``threshold`` samples."""

    interval_us: int = 500
    threshold: int = 100

    def __post_init__(self) -> None:
        _require_count("interval_us", self.interval_us)
        if self.interval_us > MAX_SPAN_US:
            raise SensorConfigError(f"interval_us must not exceed {MAX_SPAN_US}, got {self.interval_us!r}")
        _require_count("threshold", self.threshold)

    @property
    def window_us(self) -> int:
        return self.interval_us * self.threshold


@dataclass
class SamplerState:
    """Mutable accumulation state owned by exactly one :class:`IncrementalSampler`."""

    last_sample_us: int = 0
    accumulator: int = 0
    sample_count: int = 0
    last_amps: float = 0.0


class IncrementalSampler:
    """Non-blocking oversampler driven from the caller's polling loop.

    Each :meth:`update` performs at most one ADC read and never sleeps, so it is
    safe to call as often as the loop spins. Call it from a single place only.
    """

    def __init__(
        self,
        read_code: ReadCode,
        to_amps: CodeToAmps,
        clock: Clock,
        settings: IncrementalOversampling = IncrementalOversampling(),
    ) -> None:
        self._read_code = read_code
        self._to_amps = to_amps
        self.clock = clock
        self.settings = settings
        self.state = SamplerState()

    @property
    def last_amps(self) -> float:
        return self.state.last_amps

    def update(self) -> bool:
        """Sample if the interval has elapsed; return True when a new value was published."""
        state = self.state
        now = self.clock.now_us()
        if ticks_diff(now, state.last_sample_us) < self.settings.interval_us:
            return False

        state.last_sample_us = now
        state.accumulator += self._read_code()
        state.sample_count += 1
        if state.sample_count < self.settings.threshold:
            return False

        amps = self._to_amps(state.accumulator / float(state.sample_count))
        state.last_amps, state.accumulator, state.sample_count = amps, 0, 0
        return True
