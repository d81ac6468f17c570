"""Current-sensor drivers and the measurement pipeline behind them."""

from .calibration import (
    SENSITIVITY_BY_MODEL,
    Calibration,
    SensorConfig,
    SensorConfigError,
    sensitivity_for_model,
)
from .conversion import adc_to_voltage, code_to_amps
from .current import ACS712, CurrentReading, CurrentSensor
from .profile import SensorProfile, build_sensor, load_sensor_profile, parse_sensor_profile
from .sampling import (
    DEFAULT_CALIBRATION,
    FAST_OVERSAMPLING,
    SETTLED_OVERSAMPLING,
    FixedCountOversampling,
    IncrementalOversampling,
    IncrementalSampler,
    SamplerState,
    TimeWindowRms,
)

__all__ = [
    "SENSITIVITY_BY_MODEL",
    "Calibration",
    "SensorConfig",
    "SensorConfigError",
    "sensitivity_for_model",
    "adc_to_voltage",
    "code_to_amps",
    "ACS712",
    "CurrentReading",
    "CurrentSensor",
    "SensorProfile",
    "build_sensor",
    "load_sensor_profile",
    "parse_sensor_profile",
    "DEFAULT_CALIBRATION",
    "FAST_OVERSAMPLING",
    "SETTLED_OVERSAMPLING",
    "FixedCountOversampling",
    "IncrementalOversampling",
    "IncrementalSampler",
    "SamplerState",
    "TimeWindowRms",
]
