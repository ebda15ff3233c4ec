from __future__ import annotations

import json
import math
from dataclasses import astuple, dataclass
from typing import Optional, Tuple

# wire names, in the order the device sends them
FIELDS = ("temp_lm35", "temp_dht", "humidity", "light", "co2", "water", "sound")


class _Malformed(Exception):
    pass


@dataclass(frozen=True)
class Sample:
    """One decoded telemetry line; every reading is optional."""
    temp_lm35: Optional[float] = None
    temp_dht: Optional[float] = None
    humidity: Optional[float] = None
    light: Optional[float] = None
    co2: Optional[float] = None
    water: Optional[float] = None
    sound: Optional[float] = None

    @property
    def active_count(self) -> int:
        return sum(v is not None for v in astuple(self))

    def as_row(self) -> Tuple[Optional[float], ...]:
        return astuple(self)


def _number(value) -> Optional[float]:
    if value is None:
        return None
    # bool is an int subclass; the device never sends it for a reading
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _Malformed(value)
    value = float(value)
    if not math.isfinite(value):
        raise _Malformed(value)
    return value


def decode(line) -> Optional[Sample]:
    """
    Parse one line of JSON telemetry. Returns None for blank lines, broken
    JSON, non-object payloads and known fields holding non-numeric values.
    Keys match case-insensitively; unknown keys are ignored.
    """
    if isinstance(line, (bytes, bytearray)):
        line = line.decode("utf-8", errors="replace")
    if not isinstance(line, str) or not line.strip():
        return None

    try:
        payload = json.loads(line)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    values = {}
    try:
        for key, value in payload.items():
            name = key.lower()
            if name in FIELDS:
                values[name] = _number(value)
    except (_Malformed, OverflowError):
        return None
    return Sample(**values)
