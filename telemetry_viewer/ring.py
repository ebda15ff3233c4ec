# ring.py
from typing import Dict, Iterable, Mapping, Optional, Sequence

import numpy as np

from telemetry_viewer.config import MISSING_VALUE, WINDOW_SIZE


class SeriesChannel:
    """
    Fixed-size ring of float samples for one named quantity.
    Appending at capacity evicts the oldest value.
    """
    def __init__(self, name: str, capacity: int = WINDOW_SIZE, dtype=np.float64):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.name = name
        self.N = capacity
        self.data = np.empty(capacity, dtype=dtype)
        self.i = 0              # next write index
        self.n = 0              # number of valid samples (<= N)

    def __len__(self) -> int:
        return self.n

    def append(self, value: float):
        self.data[self.i] = value
        self.i = (self.i + 1) % self.N
        if self.n < self.N:
            self.n += 1

    def reset(self, seed: Iterable[float] = ()):
        self.i = 0
        self.n = 0
        for v in seed:
            self.append(v)

    def last(self) -> Optional[float]:
        if self.n == 0:
            return None
        return float(self.data[(self.i - 1) % self.N])

    def snapshot(self) -> np.ndarray:
        """Chronological copy (index 0 is oldest), marked read-only."""
        if self.n < self.N:
            out = self.data[:self.n].copy()
        else:
            i = self.i
            out = np.concatenate((self.data[i:], self.data[:i]))
        out.flags.writeable = False
        return out


class SeriesStore:
    """
    A fixed set of SeriesChannel instances sharing one window size.
    The window size cannot change after construction.
    """
    def __init__(self, channels: Sequence[str], capacity: int = WINDOW_SIZE,
                 seeds: Optional[Mapping[str, Iterable[float]]] = None,
                 missing: float = MISSING_VALUE):
        self._capacity = capacity
        self._seeds = {name: tuple((seeds or {}).get(name, ())) for name in channels}
        self.missing = missing
        self._channels: Dict[str, SeriesChannel] = {
            name: SeriesChannel(name, capacity) for name in channels
        }
        self.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def channels(self):
        return tuple(self._channels)

    def _channel(self, name: str) -> SeriesChannel:
        try:
            return self._channels[name]
        except KeyError:
            raise KeyError(f"unknown channel: {name!r}") from None

    def append(self, channel: str, value: float):
        self._channel(channel).append(value)

    def append_row(self, values: Mapping[str, Optional[float]]):
        """Advance every channel by one point; absent values become `missing`."""
        unknown = set(values) - set(self._channels)
        if unknown:
            raise KeyError(f"unknown channel(s): {sorted(unknown)}")
        for name, ch in self._channels.items():
            v = values.get(name)
            ch.append(self.missing if v is None else v)

    def snapshot(self, channel: str) -> np.ndarray:
        return self._channel(channel).snapshot()

    def snapshots(self) -> Dict[str, np.ndarray]:
        return {name: ch.snapshot() for name, ch in self._channels.items()}

    def last(self, channel: str) -> Optional[float]:
        return self._channel(channel).last()

    def clear(self):
        """Reset every channel to its seed values."""
        for name, ch in self._channels.items():
            ch.reset(self._seeds[name])
