#!/usr/bin/env python3
"""Read current from an ACS712 via a serial ADC bridge (or a simulated one)."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from acs712_sense.instrumentation import (
    MonotonicClock,
    ScriptedAnalogInput,
    SerialAnalogInput,
    SimulatedClock,
)
from acs712_sense.sensors import ACS712, build_sensor, load_sensor_profile
from acs712_sense.telemetry import CurrentRecord, TelemetryLogger, TelemetrySeries

logger = logging.getLogger("monitor_current")


def positive_float(value: str) -> float:
    try:
        val = float(value)
    except ValueError as exc:  # pragma: no cover - argparse handles message
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if val <= 0:
        raise argparse.ArgumentTypeError("value must be positive")
    return val


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--port", help="Serial port of the ADC bridge.")
    source.add_argument("--simulate", action="store_true", help="Use a simulated 50 Hz, 1.5 A peak signal.")
    parser.add_argument("--baud", type=int, default=115200, help="Baud rate for the ADC bridge.")
    parser.add_argument("--settings", help="Optional path to a sensor settings YAML file.")
    parser.add_argument("--mode", choices=("dc", "ac", "poll"), default="dc", help="Measurement style.")
    parser.add_argument("--frequency", type=positive_float, help="AC frequency in Hz (overrides settings).")
    parser.add_argument("--count", type=int, default=10, help="Number of readings to take.")
    parser.add_argument("--interval", type=float, default=0.5, help="Pause between blocking readings (s).")
    parser.add_argument("--calibrate", action="store_true", help="Calibrate the zero point first (no load!).")
    parser.add_argument("--log", type=Path, help="CSV file to append readings to.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def _take_reading(sensor: ACS712, mode: str, frequency: float) -> float:
    if mode == "ac":
        return sensor.read_current_ac(frequency)
    if mode == "poll":
        while not sensor.update():
            pass
        return sensor.amps
    return sensor.read_current_dc()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    profile = load_sensor_profile(args.settings)
    frequency = args.frequency or (50.0 if args.simulate else profile.ac_frequency_hz)

    bridge: Optional[SerialAnalogInput] = None
    if args.simulate:
        amps_per_code = profile.voltage_reference / profile.adc_resolution / profile.sensitivity
        analog = ScriptedAnalogInput.sine(
            zero_code=profile.adc_resolution / 2,
            peak_codes=1.5 / amps_per_code,
            samples_per_period=200,
            adc_resolution=profile.adc_resolution,
        )
        # 100 us per loop pass gives 200 samples per 50 Hz period
        clock = SimulatedClock(start_us=1_000, tick_us=100)
    else:
        bridge = SerialAnalogInput.from_port(args.port, baudrate=args.baud)
        analog = bridge
        clock = MonotonicClock()

    sensor = build_sensor(profile, analog, clock)
    series = TelemetrySeries(max_points=max(args.count, 1))
    log_path = args.log
    if log_path is None:
        log_path = Path("output/current") / f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"

    try:
        sensor.begin()
        if args.calibrate:
            sensor.calibrate()
        with TelemetryLogger(log_path) as telemetry:
            for _ in range(args.count):
                amps = _take_reading(sensor, args.mode, frequency)
                record = CurrentRecord(timestamp=time.time(), amperes=amps, mode=args.mode)
                series.append(record)
                telemetry.log(record)
                print(f"{record.mode.upper():>4} {amps:+.4f} A")
                if args.mode != "poll" and not args.simulate:
                    time.sleep(args.interval)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        if bridge is not None:
            bridge.close()

    if len(series):
        print(f"Mean over {len(series)} readings: {series.mean():+.4f} A (zero point {sensor.zero_point:.2f})")
    logger.info("Readings appended to %s", log_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
