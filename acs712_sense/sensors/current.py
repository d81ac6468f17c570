"""Hall-effect current sensor driver (ACS712 family)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

from acs712_sense.instrumentation import AnalogInput, Clock
from acs712_sense.sensors.calibration import (
    DEFAULT_ADC_RESOLUTION,
    DEFAULT_SENSITIVITY,
    DEFAULT_VOLTAGE_REFERENCE,
    Calibration,
    SensorConfig,
)
from acs712_sense.sensors.conversion import adc_to_voltage, code_to_amps
from acs712_sense.sensors.sampling import (
    DEFAULT_CALIBRATION,
    FAST_OVERSAMPLING,
    FixedCountOversampling,
    IncrementalOversampling,
    IncrementalSampler,
    TimeWindowRms,
)

logger = logging.getLogger(__name__)


@dataclass
class CurrentReading:
    """Container for a single current measurement."""

    timestamp: float
    amperes: float


class CurrentSensor(Protocol):
    """Interface for current sensors that can provide instantaneous readings."""

    def read(self) -> CurrentReading:
        """Return the most recent current reading."""
        raise NotImplementedError


class ACS712:
    """Converts raw ADC codes from an ACS712 output pin into amperes.

    Two ways to use it:

    * blocking: :meth:`calibrate`, :meth:`read_current_dc` and
      :meth:`read_current_ac` own the caller until they finish;
    * polling: call :meth:`update` from the main loop and read :attr:`amps`.

    The two share only the calibration. Nothing is locked, so calls on one
    instance must come from one thread.
    """

    def __init__(
        self,
        pin: Any,
        analog: AnalogInput,
        clock: Clock,
        voltage_reference: float = DEFAULT_VOLTAGE_REFERENCE,
        adc_resolution: int = DEFAULT_ADC_RESOLUTION,
        sensitivity: float = DEFAULT_SENSITIVITY,
        dc_oversampling: FixedCountOversampling = FAST_OVERSAMPLING,
        calibration_sampling: FixedCountOversampling = DEFAULT_CALIBRATION,
        ac_window: TimeWindowRms = TimeWindowRms(),
        incremental: IncrementalOversampling = IncrementalOversampling(),
    ) -> None:
        self.config = SensorConfig(pin=pin, voltage_reference=voltage_reference, adc_resolution=adc_resolution)
        self.calibration = Calibration.for_config(self.config, sensitivity=sensitivity)
        self.analog = analog
        self.clock = clock
        self.dc_oversampling = dc_oversampling
        self.calibration_sampling = calibration_sampling
        self.ac_window = ac_window
        self.sampler = IncrementalSampler(self._read_code, self._code_to_amps, clock, incremental)

    def begin(self) -> None:
        """Configure the pin as an analog input."""
        self.analog.configure_pin(self.config.pin)

    # -- calibration -----------------------------------------------------
    @property
    def sensitivity(self) -> float:
        return self.calibration.sensitivity

    @sensitivity.setter
    def sensitivity(self, value: float) -> None:
        self.calibration.sensitivity = value
        logger.info("Sensitivity set to %.4f V/A", self.calibration.sensitivity)

    @property
    def zero_point(self) -> float:
        return self.calibration.zero_point

    @zero_point.setter
    def zero_point(self, value: float) -> None:
        self.calibration.zero_point = value
        logger.info("Zero point set to %.3f", self.calibration.zero_point)

    def calibrate(self) -> float:
        """Measure the zero-current ADC code and store it as the zero point.

        No current may flow through the sensor while this runs; a loaded sensor
        produces a wrong zero point without any warning. Blocks for roughly
        ``samples * delay_ms`` milliseconds.
        """
        zero_point = self.calibration_sampling.average(self._read_code, self.clock)
        self.calibration.zero_point = zero_point
        logger.info(
            "Calibrated zero point %.3f from %d samples", zero_point, self.calibration_sampling.samples
        )
        return zero_point

    # -- blocking reads --------------------------------------------------
    def to_voltage(self, code: float) -> float:
        return adc_to_voltage(code, self.config)

    def read_current_dc(self) -> float:
        """Oversampled DC current in amperes (negative for reverse current)."""
        average = self.dc_oversampling.average(self._read_code, self.clock)
        return self._code_to_amps(average)

    def read_current_ac(self, frequency_hz: float = 60) -> float:
        """RMS current over one period of a ``frequency_hz`` signal.

        Returns 0.0 if the ADC was too slow to take a single sample in the window.
        """
        rms, samples = self.ac_window.measure(self._read_code, self._code_to_amps, self.clock, frequency_hz)
        logger.debug("AC window at %.1f Hz: %d samples, %.4f A RMS", frequency_hz, samples, rms)
        return rms

    def read(self) -> CurrentReading:
        return CurrentReading(timestamp=time.time(), amperes=self.read_current_dc())

    # -- non-blocking ----------------------------------------------------
    def update(self) -> bool:
        """Advance the incremental sampler; True when :attr:`amps` has a new value."""
        return self.sampler.update()

    @property
    def amps(self) -> float:
        """Last value published by :meth:`update` (0.0 until the first window completes)."""
        return self.sampler.last_amps

    # ------------------------------------------------------------------
    def _read_code(self) -> int:
        return self.analog.read_raw(self.config.pin)

    def _code_to_amps(self, code: float) -> float:
        return code_to_amps(code, self.config, self.calibration)

    def __repr__(self) -> str:
        return f"ACS712(pin={self.config.pin!r}, {self.calibration!r})"
