from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from telemetry_viewer.config import DEFAULT_BAUD


class SettingsError(Exception):
    """Raised when the settings file cannot be written."""


@dataclass(frozen=True)
class PersistedSettings:
    port: Optional[str] = None
    baud_rate: int = DEFAULT_BAUD
    simulate: bool = False

    def __post_init__(self):
        # ports are stored trimmed; blank means "no preference"
        port = self.port.strip() if isinstance(self.port, str) else self.port
        object.__setattr__(self, "port", port or None)


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def load_settings(path) -> PersistedSettings:
    """
    Read {"Port": str|null, "BaudRate": int, "Simulate": bool}.
    Missing or broken entries fall back to the defaults, never raises.
    """
    payload = _read_json(Path(path))
    defaults = PersistedSettings()

    port = payload.get("Port")
    if not isinstance(port, str) or not port.strip():
        port = defaults.port
    else:
        port = port.strip()

    baud = payload.get("BaudRate")
    if isinstance(baud, bool) or not isinstance(baud, int) or baud <= 0:
        baud = defaults.baud_rate

    simulate = payload.get("Simulate")
    if not isinstance(simulate, bool):
        simulate = defaults.simulate

    return PersistedSettings(port=port, baud_rate=baud, simulate=simulate)


def save_settings(path, settings: PersistedSettings) -> None:
    payload = {
        "Port": settings.port,
        "BaudRate": int(settings.baud_rate),
        "Simulate": bool(settings.simulate),
    }
    try:
        Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as e:
        raise SettingsError(f"Failed to write {path}: {e}") from e
