"""Sensor configuration and calibration state."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_VOLTAGE_REFERENCE = 5.0
DEFAULT_ADC_RESOLUTION = 1023

# Output swing in V/A for the common ACS712 variants.
SENSITIVITY_BY_MODEL: Dict[str, float] = {
    "ACS712-05B": 0.185,
    "ACS712-20A": 0.100,
    "ACS712-30A": 0.066,
}
DEFAULT_MODEL = "ACS712-05B"
DEFAULT_SENSITIVITY = SENSITIVITY_BY_MODEL[DEFAULT_MODEL]


class SensorConfigError(ValueError):
    """Raised when a sensor parameter is rejected."""


def sensitivity_for_model(model: str) -> float:
    """Look up the sensitivity for a model name such as ``ACS712-20A``."""
    key = model.strip().upper()
    if key not in SENSITIVITY_BY_MODEL:
        known = ", ".join(sorted(SENSITIVITY_BY_MODEL))
        raise SensorConfigError(f"Unknown sensor model '{model}' (known: {known})")
    return SENSITIVITY_BY_MODEL[key]


def require_finite(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SensorConfigError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise SensorConfigError(f"{name} must be finite, got {value!r}")


def require_positive(name: str, value: Any) -> None:
    require_finite(name, value)
    if value <= 0:
        raise SensorConfigError(f"{name} must be a positive finite number, got {value!r}")


@dataclass(frozen=True)
class SensorConfig:
    """Per-instance wiring parameters, fixed at construction."""

    pin: Any
    voltage_reference: float = DEFAULT_VOLTAGE_REFERENCE
    adc_resolution: int = DEFAULT_ADC_RESOLUTION

    def __post_init__(self) -> None:
        require_positive("voltage_reference", self.voltage_reference)
        if isinstance(self.adc_resolution, bool) or not isinstance(self.adc_resolution, int):
            raise SensorConfigError(f"adc_resolution must be an integer, got {self.adc_resolution!r}")
        require_positive("adc_resolution", self.adc_resolution)

    @property
    def midpoint(self) -> float:
        return self.adc_resolution / 2


class Calibration:
    """Sensitivity and zero point shared by every measurement path.

    ``zero_point`` is on the raw ADC-code scale. It should be measured with no
    current flowing; nothing here can tell whether that was the case.
    """

    def __init__(self, sensitivity: float = DEFAULT_SENSITIVITY, zero_point: float = 0.0) -> None:
        require_positive("sensitivity", sensitivity)
        self._sensitivity = float(sensitivity)
        self.zero_point = zero_point

    @classmethod
    def for_config(
        cls,
        config: SensorConfig,
        sensitivity: float = DEFAULT_SENSITIVITY,
        zero_point: Optional[float] = None,
    ) -> "Calibration":
        """Start from ``sensitivity`` and the ADC midpoint unless a zero point is given."""
        return cls(
            sensitivity=sensitivity,
            zero_point=config.midpoint if zero_point is None else zero_point,
        )

    @property
    def sensitivity(self) -> float:
        return self._sensitivity

    @sensitivity.setter
    def sensitivity(self, value: float) -> None:
        require_positive("sensitivity", value)
        self._sensitivity = float(value)

    @property
    def zero_point(self) -> float:
        return self._zero_point

    @zero_point.setter
    def zero_point(self, value: float) -> None:
        require_finite("zero_point", value)
        self._zero_point = float(value)

    def __repr__(self) -> str:
        return f"Calibration(sensitivity={self._sensitivity!r}, zero_point={self._zero_point!r})"
