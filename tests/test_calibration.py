import math

import pytest

from acs712_sense.instrumentation import ScriptedAnalogInput, SimulatedClock
from acs712_sense.sensors import (
    ACS712,
    SENSITIVITY_BY_MODEL,
    Calibration,
    SensorConfig,
    SensorConfigError,
    sensitivity_for_model,
)


def make_sensor(codes, **kwargs):
    clock = SimulatedClock(start_us=1_000)
    return ACS712(pin=0, analog=ScriptedAnalogInput(codes), clock=clock, **kwargs), clock


def test_defaults_use_midpoint_and_5a_variant():
    sensor, _ = make_sensor([512])
    assert sensor.zero_point == pytest.approx(511.5)
    assert sensor.sensitivity == pytest.approx(0.185)


@pytest.mark.parametrize("value", [0, 0.0, -0.1, math.nan, math.inf])
def test_invalid_sensitivity_is_rejected(value):
    sensor, _ = make_sensor([512])
    with pytest.raises(SensorConfigError):
        sensor.sensitivity = value
    assert sensor.sensitivity == pytest.approx(0.185)
    with pytest.raises(SensorConfigError):
        Calibration(sensitivity=value)


def test_constructor_rejects_zero_sensitivity():
    with pytest.raises(SensorConfigError):
        make_sensor([512], sensitivity=0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"voltage_reference": 0},
        {"voltage_reference": -3.3},
        {"adc_resolution": 0},
        {"adc_resolution": 1023.5},
        {"adc_resolution": True},
    ],
)
def test_sensor_config_rejects_bad_wiring(kwargs):
    with pytest.raises(SensorConfigError):
        SensorConfig(pin=0, **kwargs)


def test_model_lookup():
    assert sensitivity_for_model("acs712-20a") == SENSITIVITY_BY_MODEL["ACS712-20A"] == 0.100
    assert sensitivity_for_model("ACS712-30A") == pytest.approx(0.066)
    with pytest.raises(SensorConfigError):
        sensitivity_for_model("ACS758")


def test_calibrate_averages_with_settling_delay():
    sensor, clock = make_sensor([510, 512] * 50)
    zero = sensor.calibrate()
    assert zero == pytest.approx(511.0)
    assert sensor.zero_point == zero
    assert len(clock.sleeps) == 100
    assert set(clock.sleeps) == {2.0}


def test_calibration_is_repeatable_for_identical_input():
    codes = [505 + (i * 3) % 11 for i in range(100)]
    first, _ = make_sensor(codes)
    second, _ = make_sensor(codes)
    assert first.calibrate() == second.calibrate()


def test_zero_point_can_be_restored():
    sensor, _ = make_sensor([512])
    sensor.zero_point = 508.25
    assert sensor.zero_point == 508.25
    assert sensor.calibration.zero_point == 508.25


def test_begin_configures_pin():
    analog = ScriptedAnalogInput([512])
    sensor = ACS712(pin="A3", analog=analog, clock=SimulatedClock())
    sensor.begin()
    assert analog.configured_pins == ["A3"]


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "511"])
def test_invalid_zero_point_is_rejected(value):
    sensor, _ = make_sensor([512])
    sensor.zero_point = 509.0
    with pytest.raises(SensorConfigError):
        sensor.zero_point = value
    assert sensor.zero_point == 509.0
    with pytest.raises(SensorConfigError):
        Calibration(zero_point=value)
