"""Current measurement history and CSV logging."""

from .logger import TelemetryLogger
from .series import CurrentRecord, TelemetrySeries

__all__ = ["TelemetryLogger", "CurrentRecord", "TelemetrySeries"]
