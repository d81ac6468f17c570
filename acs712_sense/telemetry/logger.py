"""Simple CSV telemetry logger."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from acs712_sense.telemetry.series import CurrentRecord


class TelemetryLogger:
    """Append-only CSV logger for current measurements."""

    def __init__(self, path: Path, write_header: bool = True) -> None:
        self.path = path
        self._file = None
        self._writer = None
        self._write_header = write_header

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        exists = self.path.exists()
        self._file = self.path.open("a", newline="")
        self._writer = csv.writer(self._file)
        if self._write_header and not exists:
            self._writer.writerow(["timestamp", "mode", "amperes"])

    def close(self) -> None:
        if self._file:
            self._file.close()
        self._file = None
        self._writer = None

    def log(self, record: CurrentRecord) -> None:
        if not self._writer:
            self.open()
        self._writer.writerow([f"{record.timestamp:.3f}", record.mode, f"{record.amperes:.6f}"])
        self._file.flush()

    def log_many(self, records: Iterable[CurrentRecord]) -> None:
        for record in records:
            self.log(record)
