"""ADC access for the current sensor (local boards or a serial bridge)."""

from __future__ import annotations

from typing import Any, Optional, Protocol

try:  # pragma: no cover - import guard for optional dependency
    from serial import Serial  # type: ignore
except ImportError:  # pragma: no cover
    Serial = None  # type: ignore


class AnalogReadError(RuntimeError):
    """Raised when an ADC bridge returns something that is not a code."""


class AnalogInput(Protocol):
    """ADC capability consumed by the sensor core."""

    def configure_pin(self, pin: Any) -> None:
        ...

    def read_raw(self, pin: Any) -> int:
        ...


class SerialAnalogInput:
    """Reads ADC codes from a microcontroller that answers ``A<pin>?`` queries.

    The firmware on the other end replies with one integer per line. ``P<pin>``
    configures the pin as an analog input and expects no reply.
    """

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 0.5, serial: Any = None) -> None:
        if serial is None:
            if Serial is None:
                raise RuntimeError("pyserial is required for SerialAnalogInput. Install pyserial and retry.")
            serial = Serial(port=port, baudrate=baudrate, timeout=timeout)
        self._serial = serial

    @classmethod
    def from_port(cls, port: str, baudrate: int = 115200, timeout: float = 0.5) -> "SerialAnalogInput":
        return cls(port, baudrate=baudrate, timeout=timeout)

    def _write(self, command: str) -> None:
        self._serial.write(f"{command}\n".encode("ascii"))

    def _readline(self) -> str:
        return self._serial.readline().decode("ascii", errors="ignore").strip()

    def configure_pin(self, pin: Any) -> None:
        self._write(f"P{pin}")

    def read_raw(self, pin: Any) -> int:
        self._write(f"A{pin}?")
        return _to_code(self._readline())

    def close(self) -> None:
        self._serial.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def _to_code(value: Optional[str]) -> int:
    if not value:
        raise AnalogReadError("Empty response from ADC bridge (timeout?)")
    try:
        return int(value)
    except ValueError as exc:
        raise AnalogReadError(f"Failed to parse ADC code from bridge response: {value!r}") from exc
