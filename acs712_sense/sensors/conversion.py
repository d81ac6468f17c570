"""ADC code to voltage and current conversion."""

from __future__ import annotations

from acs712_sense.sensors.calibration import Calibration, SensorConfig


def adc_to_voltage(code: float, config: SensorConfig) -> float:
    """Map an ADC code (raw or averaged) to volts at the converter input."""
    return (code / config.adc_resolution) * config.voltage_reference


def code_to_amps(code: float, config: SensorConfig, calibration: Calibration) -> float:
    """Current for ``code`` relative to the calibrated zero point.

    Positive values mean current in the sensor's forward direction.
    """
    voltage = adc_to_voltage(code, config)
    zero_voltage = adc_to_voltage(calibration.zero_point, config)
    return (voltage - zero_voltage) / calibration.sensitivity
