"""Current measurement for ACS712-style Hall-effect sensors read through an ADC."""

__all__ = ["instrumentation", "io", "sensors", "telemetry"]
__version__ = "0.1.0"
