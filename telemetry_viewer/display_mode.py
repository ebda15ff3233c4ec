from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from telemetry_viewer.codec import Sample
from telemetry_viewer.config import MISSING_VALUE, TABLE_MODE_THRESHOLD
from telemetry_viewer.history import HistoryLog
from telemetry_viewer.ring import SeriesStore


class DisplayMode(enum.Enum):
    CHART = "chart"
    TABLE = "table"


@dataclass(frozen=True)
class RouteResult:
    mode: DisplayMode
    readings: Dict[str, float]
    tertiary_unit: Optional[str] = None


def chart_readings(sample: Sample, missing: float = MISSING_VALUE) -> Dict[str, float]:
    """Pick one value per chart channel from a sample."""
    if sample.temp_dht is not None:
        temperature = sample.temp_dht
    elif sample.temp_lm35 is not None:
        temperature = sample.temp_lm35
    else:
        temperature = missing
    return {
        "temperature": temperature,
        "humidity": missing if sample.humidity is None else sample.humidity,
        "tertiary": missing if sample.light is None else sample.light,
    }


class DisplayModeController:
    """
    Sends field-rich samples to the history table and everything else to
    the rolling chart. Rendering is left to whoever watches `mode`.
    """
    def __init__(self, store: SeriesStore, history: HistoryLog,
                 threshold: int = TABLE_MODE_THRESHOLD):
        self.store = store
        self.history = history
        self.threshold = threshold
        self._mode = DisplayMode.CHART

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    def route(self, sample: Sample, timestamp: Optional[float] = None) -> RouteResult:
        readings = chart_readings(sample, self.store.missing)
        unit = "lx" if sample.light is not None else None

        if sample.active_count >= self.threshold:
            self.history.add(sample, timestamp)
            self._mode = DisplayMode.TABLE
        else:
            self.store.append_row(readings)
            self._mode = DisplayMode.CHART
        return RouteResult(self._mode, readings, unit)
