import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from telemetry_viewer.codec import Sample


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: float     # Unix seconds
    sample: Sample


class HistoryLog:
    """Unbounded table-mode log, newest entry first."""

    def __init__(self):
        self._entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, sample: Sample, timestamp: Optional[float] = None) -> HistoryEntry:
        entry = HistoryEntry(time.time() if timestamp is None else timestamp, sample)
        self._entries.insert(0, entry)
        return entry

    def snapshot(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def clear(self):
        self._entries.clear()
