from __future__ import annotations

import enum
import queue
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import serial
from PySide6.QtCore import QObject, QTimer, Signal

from telemetry_viewer.codec import Sample, decode
from telemetry_viewer.config import (
    CHANNELS, DEFAULT_BAUD, DISPATCH_HZ, LINE_QUEUE_SIZE, SEED_VALUES,
    SETTINGS_PATH, SIM_DRIFT, TICK_MS, WINDOW_SIZE,
)
from telemetry_viewer.display_mode import DisplayMode, DisplayModeController
from telemetry_viewer.history import HistoryEntry, HistoryLog
from telemetry_viewer.ports import PortSelector, list_port_names
from telemetry_viewer.ring import SeriesStore
from telemetry_viewer.serial_reader import LinkOpenError, SerialLink
from telemetry_viewer.settings import (
    PersistedSettings, SettingsError, load_settings, save_settings,
)


class ConnectionState(enum.Enum):
    DISCONNECTED = "disconnected"
    SIMULATING = "simulating"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ConnectionSupervisor(QObject):
    """
    Owns the link, the series store and the history log, and is the only
    thing that mutates them. Everything here runs on the Qt thread: the
    reader thread only fills `line_q`, which `pump()` drains in order.

    Commands for the UI: connect_port, disconnect_port, set_simulation,
    save_settings, clear_history.
    """

    status = Signal(str)
    state_changed = Signal(object)     # ConnectionState
    mode_changed = Signal(object)      # DisplayMode
    data_changed = Signal()
    readings_changed = Signal(object)  # dict: channel -> value, plus "unit"

    def __init__(self, settings_path=SETTINGS_PATH,
                 serial_factory: Callable[..., object] = serial.Serial,
                 enumerate_ports: Callable[[], Sequence[str]] = list_port_names,
                 diagnostics=None,
                 window_size: int = WINDOW_SIZE,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings_path = settings_path
        self.settings = PersistedSettings()
        self.diagnostics = diagnostics
        self._enumerate_ports = enumerate_ports

        self.line_q: "queue.Queue[str]" = queue.Queue(maxsize=LINE_QUEUE_SIZE)
        self.link = SerialLink(self.line_q, serial_factory=serial_factory)

        self.store = SeriesStore(CHANNELS, window_size, seeds=SEED_VALUES)
        self.history = HistoryLog()
        self.controller = DisplayModeController(self.store, self.history)

        self._state = ConnectionState.DISCONNECTED
        self._simulate = False
        self.dropped_frames = 0

        # --- Timers (started by start()) ---
        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_MS)
        self.tick_timer.timeout.connect(self.tick)

        self.dispatch_timer = QTimer(self)
        self.dispatch_timer.setInterval(int(1000 / DISPATCH_HZ))
        self.dispatch_timer.timeout.connect(self.pump)

    # ---------- Read-only accessors ----------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_simulating(self) -> bool:
        return self._state is ConnectionState.SIMULATING

    @property
    def current_port(self) -> Optional[str]:
        handle = self.link.handle
        return handle.port if handle else None

    @property
    def current_baud(self) -> Optional[int]:
        handle = self.link.handle
        return handle.baud if handle else None

    @property
    def mode(self) -> DisplayMode:
        return self.controller.mode

    def snapshot(self, channel: str) -> np.ndarray:
        return self.store.snapshot(channel)

    def history_snapshot(self) -> Tuple[HistoryEntry, ...]:
        return self.history.snapshot()

    # ---------- Lifecycle ----------
    def start(self):
        self.tick_timer.start()
        self.dispatch_timer.start()

    def shutdown(self):
        self.tick_timer.stop()
        self.dispatch_timer.stop()
        self._close_link()
        self._set_state(ConnectionState.DISCONNECTED)

    def startup(self) -> ConnectionState:
        """
        Load settings, then try the saved port followed by every other
        candidate. Ends Connected, or Simulating when nothing opens.
        """
        self.settings = load_settings(self.settings_path)
        self._simulate = self.settings.simulate
        if self._simulate:
            self._set_state(ConnectionState.SIMULATING)
            self.status.emit("Simulating")
            return self._state

        baud = self.settings.baud_rate
        tried = []
        preferred = self.settings.port
        if preferred:
            tried.append(preferred)
            if self._try_open(preferred, baud):
                return self._state

        selector = PortSelector(preferred, self._enumerate_ports)
        for port in selector.candidates():
            if port in tried:
                continue
            tried.append(port)
            if self._try_open(port, baud):
                return self._state

        self._log("No port opened" + (f" (tried {', '.join(tried)})" if tried else ""))
        self._set_state(ConnectionState.SIMULATING)
        self.status.emit("No port opened")
        return self._state

    # ---------- Commands ----------
    def connect_port(self, port: str, baud: int = DEFAULT_BAUD) -> bool:
        if not port:
            self.status.emit("Select port")
            return False
        try:
            baud = int(baud)
        except (TypeError, ValueError):
            baud = 0
        if baud <= 0:
            self.status.emit("Bad baud")
            return False

        previous = self._state
        self._close_link()
        if self._try_open(port, baud):
            return True

        # the old link is gone either way; fall back rather than pretend
        if previous in (ConnectionState.SIMULATING, ConnectionState.CONNECTED):
            self._set_state(ConnectionState.SIMULATING)
        else:
            self._set_state(ConnectionState.DISCONNECTED)
        self.status.emit(f"Connect failed: {port}")
        return False

    def disconnect_port(self):
        self._close_link()
        if self._simulate:
            self._set_state(ConnectionState.SIMULATING)
        else:
            self._set_state(ConnectionState.DISCONNECTED)
        self.status.emit("Disconnected")

    def set_simulation(self, enabled: bool):
        self._simulate = bool(enabled)
        if self._simulate:
            self._close_link()
            self._set_state(ConnectionState.SIMULATING)
        elif self._state is ConnectionState.SIMULATING:
            self._set_state(ConnectionState.DISCONNECTED)

    def save_settings(self, port: Optional[str], baud: int, simulate: bool) -> bool:
        try:
            baud = int(baud)
        except (TypeError, ValueError):
            baud = DEFAULT_BAUD
        if baud <= 0:
            baud = DEFAULT_BAUD
        settings = PersistedSettings(port=port, baud_rate=baud, simulate=bool(simulate))
        try:
            save_settings(self.settings_path, settings)
        except SettingsError as e:
            self._log(f"Save failed: {e}")
            self.status.emit("Save failed")
            return False
        self.settings = settings
        self.status.emit("Saved")
        return True

    def clear_history(self):
        self.store.clear()
        self.history.clear()
        self.data_changed.emit()
        self.status.emit("Cleared")

    # ---------- Dispatch ----------
    def pump(self) -> int:
        """Decode and route every queued line in arrival order."""
        routed = 0
        while True:
            try:
                line = self.line_q.get_nowait()
            except queue.Empty:
                break
            sample = decode(line)
            if sample is None:
                self.dropped_frames += 1
                continue
            self._route(sample)
            routed += 1

        if self._state is ConnectionState.CONNECTED and self.link.failed:
            port = self.current_port
            self._log(f"Link lost: {port}: {self.link.error}")
            self._close_link()
            self._set_state(ConnectionState.DISCONNECTED)
            self._set_state(ConnectionState.SIMULATING)
            self.status.emit(f"Link lost: {port}")
        return routed

    def tick(self):
        """While simulating, push one drifting sample through the normal path."""
        if self._state is not ConnectionState.SIMULATING:
            return

        def drifted(channel):
            last = self.store.last(channel)
            return (0.0 if last is None else last) + SIM_DRIFT[channel]

        sample = Sample(
            temp_dht=drifted("temperature"),
            humidity=drifted("humidity"),
            light=drifted("tertiary"),
        )
        self._route(sample)

    # ---------- Helpers ----------
    def _route(self, sample: Sample):
        before = self.controller.mode
        result = self.controller.route(sample)
        if result.mode is not before:
            self.mode_changed.emit(result.mode)
        self.readings_changed.emit(dict(result.readings, unit=result.tertiary_unit))
        self.data_changed.emit()

    def _try_open(self, port: str, baud: int) -> bool:
        self._set_state(ConnectionState.CONNECTING)
        try:
            self.link.open(port, baud)
        except LinkOpenError as e:
            self._log(f"Open failed: {port} @{baud}: {e.reason}")
            return False
        self.link.reader.status.connect(self.status)
        self._simulate = False
        self._set_state(ConnectionState.CONNECTED)
        self.status.emit(f"Connected: {port} @{baud}")
        return True

    def _close_link(self):
        self.link.close()
        # lines from a closed link are not replayed into the next session
        while True:
            try:
                self.line_q.get_nowait()
            except queue.Empty:
                break

    def _set_state(self, state: ConnectionState):
        if state is not self._state:
            self._state = state
            self.state_changed.emit(state)

    def _log(self, message: str):
        if self.diagnostics is not None:
            self.diagnostics.write(message)
