"""Build sensors from the ``sensor:`` section of the settings file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from acs712_sense.instrumentation import AnalogInput, Clock
from acs712_sense.io import PathLike, load_settings
from acs712_sense.sensors.calibration import (
    DEFAULT_ADC_RESOLUTION,
    DEFAULT_SENSITIVITY,
    DEFAULT_VOLTAGE_REFERENCE,
    SensorConfigError,
    sensitivity_for_model,
)
from acs712_sense.sensors.current import ACS712
from acs712_sense.sensors.sampling import (
    DEFAULT_CALIBRATION,
    FAST_OVERSAMPLING,
    FixedCountOversampling,
    IncrementalOversampling,
    TimeWindowRms,
)


@dataclass
class SensorProfile:
    pin: Any
    voltage_reference: float = DEFAULT_VOLTAGE_REFERENCE
    adc_resolution: int = DEFAULT_ADC_RESOLUTION
    sensitivity: float = DEFAULT_SENSITIVITY
    zero_point: Optional[float] = None  # restored value, skips calibration
    ac_frequency_hz: float = 60.0
    dc_oversampling: FixedCountOversampling = FAST_OVERSAMPLING
    calibration_sampling: FixedCountOversampling = DEFAULT_CALIBRATION
    ac_window: TimeWindowRms = field(default_factory=TimeWindowRms)
    incremental: IncrementalOversampling = field(default_factory=IncrementalOversampling)


def _mapping(data: Any, context: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SensorConfigError(f"{context} must be a mapping")
    return data


def _number(data: Dict[str, Any], key: str, default: Any, context: str, kind=float) -> Any:
    value = data.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise SensorConfigError(f"Invalid value for '{key}' in {context}: {value!r}") from exc
    if kind is int:
        if isinstance(value, bool) or not number.is_integer():
            raise SensorConfigError(f"'{key}' in {context} must be a whole number, got {value!r}")
        return value if isinstance(value, int) else int(number)
    return number


def _fixed_count(data: Any, default: FixedCountOversampling, context: str) -> FixedCountOversampling:
    raw = _mapping(data, context)
    return FixedCountOversampling(
        samples=_number(raw, "samples", default.samples, context, int),
        delay_ms=_number(raw, "delay_ms", default.delay_ms, context),
    )


def _sensitivity(data: Dict[str, Any]) -> float:
    if "sensitivity" in data and "model" in data:
        raise SensorConfigError("Specify either 'model' or 'sensitivity' in sensor, not both")
    if "model" in data:
        return sensitivity_for_model(str(data["model"]))
    return _number(data, "sensitivity", DEFAULT_SENSITIVITY, "sensor")


def parse_sensor_profile(data: Dict[str, Any]) -> SensorProfile:
    """Turn the ``sensor`` mapping into a :class:`SensorProfile`."""
    sensor = _mapping(data.get("sensor"), "sensor")
    if "pin" not in sensor:
        raise SensorConfigError("Missing required key 'pin' in sensor")

    oversampling = _mapping(sensor.get("oversampling"), "sensor.oversampling")
    incremental_raw = _mapping(oversampling.get("incremental"), "sensor.oversampling.incremental")
    ac_raw = _mapping(oversampling.get("ac"), "sensor.oversampling.ac")
    defaults = IncrementalOversampling()
    zero_point = sensor.get("zero_point")

    return SensorProfile(
        pin=sensor["pin"],
        voltage_reference=_number(sensor, "voltage_reference", DEFAULT_VOLTAGE_REFERENCE, "sensor"),
        adc_resolution=_number(sensor, "adc_resolution", DEFAULT_ADC_RESOLUTION, "sensor", int),
        sensitivity=_sensitivity(sensor),
        zero_point=None if zero_point is None else _number(sensor, "zero_point", None, "sensor"),
        ac_frequency_hz=_number(sensor, "ac_frequency_hz", 60.0, "sensor"),
        dc_oversampling=_fixed_count(oversampling.get("dc"), FAST_OVERSAMPLING, "sensor.oversampling.dc"),
        calibration_sampling=_fixed_count(
            oversampling.get("calibration"), DEFAULT_CALIBRATION, "sensor.oversampling.calibration"
        ),
        ac_window=TimeWindowRms(periods=_number(ac_raw, "periods", 1, "sensor.oversampling.ac", int)),
        incremental=IncrementalOversampling(
            interval_us=_number(incremental_raw, "interval_us", defaults.interval_us, "sensor.oversampling.incremental", int),
            threshold=_number(incremental_raw, "threshold", defaults.threshold, "sensor.oversampling.incremental", int),
        ),
    )


def load_sensor_profile(path: Optional[PathLike] = None) -> SensorProfile:
    return parse_sensor_profile(load_settings(path))


def build_sensor(profile: SensorProfile, analog: AnalogInput, clock: Clock) -> ACS712:
    """Create an :class:`ACS712` from ``profile``; a stored zero point replaces the midpoint default."""
    sensor = ACS712(
        pin=profile.pin,
        analog=analog,
        clock=clock,
        voltage_reference=profile.voltage_reference,
        adc_resolution=profile.adc_resolution,
        sensitivity=profile.sensitivity,
        dc_oversampling=profile.dc_oversampling,
        calibration_sampling=profile.calibration_sampling,
        ac_window=profile.ac_window,
        incremental=profile.incremental,
    )
    if profile.zero_point is not None:
        sensor.zero_point = profile.zero_point
    return sensor
