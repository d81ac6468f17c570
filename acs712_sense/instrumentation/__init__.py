"""Hardware capabilities (ADC access, time sources, simulators)."""

from .adc import AnalogInput, AnalogReadError, SerialAnalogInput
from .clock import TICKS_BITS, Clock, MonotonicClock, ticks_diff
from .mock import ScriptedAnalogInput, SimulatedClock

__all__ = [
    "AnalogInput",
    "AnalogReadError",
    "SerialAnalogInput",
    "TICKS_BITS",
    "Clock",
    "MonotonicClock",
    "ticks_diff",
    "ScriptedAnalogInput",
    "SimulatedClock",
]
