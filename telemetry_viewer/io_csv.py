from __future__ import annotations

import csv
import datetime
from typing import Iterable

from telemetry_viewer.codec import FIELDS
from telemetry_viewer.history import HistoryEntry


def _cell(v):
    return "" if v is None else f"{float(v):g}"


def write_history_csv(path: str, entries: Iterable[HistoryEntry]) -> int:
    """
    Writes header: timestamp, temp_lm35..sound; rows in chronological order
    (the history log itself is newest-first). Absent readings stay empty.
    Returns the number of rows written.
    """
    rows = sorted(reversed(list(entries)), key=lambda e: e.timestamp)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["timestamp", *FIELDS])
        for e in rows:
            ts = datetime.datetime.fromtimestamp(e.timestamp).isoformat(timespec="seconds")
            w.writerow([ts] + [_cell(v) for v in e.sample.as_row()])
    return len(rows)
