import math

import pytest

from acs712_sense.instrumentation import ScriptedAnalogInput, SimulatedClock
from acs712_sense.sensors import (
    ACS712,
    SETTLED_OVERSAMPLING,
    CurrentReading,
    CurrentSensor,
    SensorConfigError,
)


def make_sensor(analog, clock=None, **kwargs):
    clock = clock or SimulatedClock(start_us=1_000)
    return ACS712(pin=0, analog=analog, clock=clock, **kwargs)


# -- DC ------------------------------------------------------------------

def test_read_current_dc_constant_code():
    sensor = make_sensor(ScriptedAnalogInput.constant(602))
    sensor.sensitivity = 0.185
    sensor.zero_point = 511.5
    expected = ((602 / 1023 * 5.0) - (511.5 / 1023 * 5.0)) / 0.185
    assert sensor.read_current_dc() == pytest.approx(expected)
    assert sensor.analog.reads == 100


@pytest.mark.parametrize("code, sign", [(540, 1), (480, -1)])
def test_read_current_dc_sign(code, sign):
    sensor = make_sensor(ScriptedAnalogInput.constant(code))
    sensor.zero_point = 511
    assert math.copysign(1, sensor.read_current_dc()) == sign


def test_read_current_dc_at_zero_point_is_zero():
    sensor = make_sensor(ScriptedAnalogInput.constant(511))
    sensor.zero_point = 511
    assert sensor.read_current_dc() == pytest.approx(0.0, abs=1e-12)


def test_settled_oversampling_sleeps_between_reads():
    clock = SimulatedClock(start_us=1_000)
    sensor = make_sensor(ScriptedAnalogInput.constant(520), clock=clock, dc_oversampling=SETTLED_OVERSAMPLING)
    sensor.read_current_dc()
    assert sensor.analog.reads == 10
    assert clock.sleeps == [1.0] * 10


def test_read_satisfies_current_sensor_protocol():
    sensor: CurrentSensor = make_sensor(ScriptedAnalogInput.constant(511))
    reading = sensor.read()
    assert isinstance(reading, CurrentReading)
    assert reading.amperes == pytest.approx(0.0, abs=0.02)


# -- AC ------------------------------------------------------------------

def sine_sensor(peak_amps, start_us=0):
    # 100 us per loop pass -> 199 reads inside a 20 ms window
    peak_codes = peak_amps * 0.185 * 1023 / 5.0
    analog = ScriptedAnalogInput.sine(zero_code=512, peak_codes=peak_codes, samples_per_period=200)
    sensor = make_sensor(analog, clock=SimulatedClock(start_us=start_us, tick_us=100))
    sensor.zero_point = 512
    return sensor


def test_read_current_ac_of_sine_is_peak_over_root_two():
    sensor = sine_sensor(peak_amps=2.0)
    rms = sensor.read_current_ac(50)
    assert rms == pytest.approx(2.0 / math.sqrt(2), rel=0.02)
    assert sensor.analog.reads == 199


def test_read_current_ac_survives_counter_wraparound():
    sensor = sine_sensor(peak_amps=1.0, start_us=2**32 - 5_000)
    rms = sensor.read_current_ac(50)
    assert rms == pytest.approx(1.0 / math.sqrt(2), rel=0.02)
    assert sensor.analog.reads == 199


def test_read_current_ac_without_samples_returns_zero():
    analog = ScriptedAnalogInput.constant(700)
    sensor = make_sensor(analog, clock=SimulatedClock(start_us=0, tick_us=1_000_000))
    rms = sensor.read_current_ac(60)
    assert rms == 0.0
    assert not math.isnan(rms)
    assert analog.reads == 0


def test_read_current_ac_keeps_small_currents():
    # one code off zero is ~26 mA; squared it must not be truncated away
    sensor = make_sensor(ScriptedAnalogInput.constant(513), clock=SimulatedClock(tick_us=1_000))
    sensor.zero_point = 512
    expected = (5.0 / 1023) / 0.185
    assert sensor.read_current_ac(60) == pytest.approx(expected)


@pytest.mark.parametrize("frequency", [0, -50, math.nan])
def test_read_current_ac_rejects_bad_frequency(frequency):
    sensor = make_sensor(ScriptedAnalogInput.constant(512))
    with pytest.raises(SensorConfigError):
        sensor.read_current_ac(frequency)


# -- non-blocking --------------------------------------------------------

def test_update_publishes_once_per_window():
    clock = SimulatedClock(start_us=1_000)
    sensor = make_sensor(ScriptedAnalogInput.constant(511), clock=clock)
    sensor.zero_point = 511

    results = []
    for _ in range(100):
        results.append(sensor.update())
        clock.advance(500)

    assert results.count(True) == 1
    assert results[-1] is True
    assert sensor.amps == pytest.approx(0.0, abs=1e-12)
    assert sensor.sampler.state.accumulator == 0
    assert sensor.sampler.state.sample_count == 0


def test_update_matches_blocking_estimate():
    codes = [495 + (i * 7) % 40 for i in range(100)]
    blocking = make_sensor(ScriptedAnalogInput(codes))
    clock = SimulatedClock(start_us=1_000)
    polling = make_sensor(ScriptedAnalogInput(codes), clock=clock)

    published = []
    for _ in range(100):
        published.append(polling.update())
        clock.advance(600)

    assert published.count(True) == 1
    assert polling.amps == pytest.approx(blocking.read_current_dc(), abs=1e-9)


def test_amps_is_stale_until_next_window():
    clock = SimulatedClock(start_us=1_000)
    sensor = make_sensor(ScriptedAnalogInput([600] * 100 + [400] * 100), clock=clock)
    assert sensor.amps == 0.0
    for _ in range(100):
        sensor.update()
        clock.advance(500)
    first = sensor.amps
    assert first > 0
    for _ in range(50):
        sensor.update()
        clock.advance(500)
    assert sensor.amps == first


def test_blocking_reads_leave_sampler_state_alone():
    clock = SimulatedClock(start_us=1_000)
    sensor = make_sensor(ScriptedAnalogInput.constant(530), clock=clock)
    for _ in range(10):
        sensor.update()
        clock.advance(500)
    sensor.read_current_dc()
    assert sensor.sampler.state.sample_count == 10
    assert sensor.sampler.state.accumulator == 5300


def test_publication_uses_current_zero_point():
    clock = SimulatedClock(start_us=1_000)
    sensor = make_sensor(ScriptedAnalogInput.constant(530), clock=clock)
    sensor.zero_point = 530
    for _ in range(100):
        sensor.update()
        clock.advance(500)
    assert sensor.amps == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("frequency", [1e-4, 2.0e-4])
def test_read_current_ac_rejects_window_longer_than_clock_span(frequency):
    analog = ScriptedAnalogInput.constant(512)
    sensor = make_sensor(analog, clock=SimulatedClock(tick_us=1_000_000))
    with pytest.raises(SensorConfigError):
        sensor.read_current_ac(frequency)
    assert analog.reads == 0
