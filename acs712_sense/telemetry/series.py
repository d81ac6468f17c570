"""In-memory history of current measurements."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, Iterator, List, Optional


@dataclass
class CurrentRecord:
    """Single current measurement tagged with how it was taken (dc, ac, poll)."""

    timestamp: float
    amperes: float
    mode: str = "dc"


@dataclass
class TelemetrySeries:
    """Maintains a rolling window of current measurements."""

    max_points: int = 500
    _records: Deque[CurrentRecord] = field(default_factory=deque)

    def append(self, record: CurrentRecord) -> None:
        self._records.append(record)
        while len(self._records) > self.max_points:
            self._records.popleft()

    def extend(self, records: Iterable[CurrentRecord]) -> None:
        for record in records:
            self.append(record)

    def __iter__(self) -> Iterator[CurrentRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def to_dict_of_lists(self) -> Dict[str, List]:
        return {
            "timestamp": [rec.timestamp for rec in self._records],
            "amperes": [rec.amperes for rec in self._records],
            "mode": [rec.mode for rec in self._records],
        }

    def mean(self, mode: Optional[str] = None) -> float:
        values = [rec.amperes for rec in self._records if mode is None or rec.mode == mode]
        if not values:
            return math.nan
        return sum(values) / len(values)

    def latest(self) -> Optional[CurrentRecord]:
        return self._records[-1] if self._records else None
