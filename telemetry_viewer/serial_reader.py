import queue
from dataclasses import dataclass
from typing import Callable, Optional

import serial
from PySide6.QtCore import QObject, QThread, Signal

from telemetry_viewer.config import READ_TIMEOUT_S


class LinkOpenError(Exception):
    """A port could not be opened (busy, absent, permission, bad settings)."""

    def __init__(self, port: str, reason: str):
        super().__init__(f"{port}: {reason}")
        self.port = port
        self.reason = reason


@dataclass(frozen=True)
class LinkHandle:
    port: str
    baud: int


class ReaderThread(QThread):
    """
    Reads newline-terminated frames from an open serial port and pushes the
    decoded text lines, in arrival order, into a bounded queue.

    - readline is bounded by the port timeout; an empty read is "no line yet".
    - Partial frames are kept until their newline arrives.
    - A full queue blocks the reader (never drops), re-checking stop().
    - A read error ends the loop, marks the thread as failed and emits status.
    """

    status = Signal(str)

    def __init__(self, ser, q: "queue.Queue", read_timeout: float = READ_TIMEOUT_S,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.ser = ser
        self.q = q
        self.read_timeout = read_timeout
        self._stop = False
        self.failed = False
        self.error: Optional[str] = None
        self._buf = bytearray()

    # ---------- thread ----------
    def run(self):
        while not self._stop:
            try:
                chunk = self.ser.read_until(b"\n")
            except (serial.SerialException, OSError) as e:
                self.error = str(e)
                self.failed = True
                self.status.emit(f"Serial read error: {e}")
                return
            if not chunk:
                continue
            self._buf.extend(chunk)
            if not self._buf.endswith(b"\n"):
                continue

            raw = bytes(self._buf)
            self._buf.clear()
            line = raw.decode("utf-8", errors="replace").strip()
            if line:
                self._put(line)

    def _put(self, line: str):
        # block rather than drop so ordering and occupancy stay intact
        while not self._stop:
            try:
                self.q.put(line, timeout=self.read_timeout)
                return
            except queue.Full:
                continue

    def stop(self):
        """Request the reader to finish; run() notices within one read timeout."""
        self._stop = True


class SerialLink:
    """Owns at most one open serial connection and its reader thread."""

    def __init__(self, line_queue: "queue.Queue",
                 serial_factory: Callable[..., object] = serial.Serial,
                 read_timeout: float = READ_TIMEOUT_S):
        self.line_queue = line_queue
        self.read_timeout = read_timeout
        self._serial_factory = serial_factory
        self._ser = None
        self._reader: Optional[ReaderThread] = None
        self._handle: Optional[LinkHandle] = None
        self._stale = []        # readers that outlived their join timeout

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Optional[LinkHandle]:
        return self._handle

    @property
    def reader(self) -> Optional[ReaderThread]:
        return self._reader

    @property
    def failed(self) -> bool:
        return bool(self._reader and self._reader.failed)

    @property
    def error(self) -> Optional[str]:
        return self._reader.error if self._reader else None

    def open(self, port: str, baud: int) -> LinkHandle:
        """Close whatever is open, then open `port`. Raises LinkOpenError."""
        self.close()
        try:
            ser = self._serial_factory(port=port, baudrate=int(baud), timeout=self.read_timeout)
        except (serial.SerialException, ValueError, OSError) as e:
            raise LinkOpenError(port, str(e)) from e

        self._ser = ser
        self._handle = LinkHandle(port, int(baud))
        self._reader = ReaderThread(ser, self.line_queue, self.read_timeout)
        self._reader.start()
        return self._handle

    def close(self):
        """Stop the reader and release the port. Safe to call repeatedly."""
        if self._reader is not None:
            self._reader.stop()
            if not self._reader.wait(int(self.read_timeout * 4000)):
                # a QThread must not be destroyed while still running
                self._stale.append(self._reader)
        self._stale = [r for r in self._stale if not r.isFinished()]
        if self._ser is not None:
            try:
                self._ser.close()
            except (serial.SerialException, OSError):
                pass
        self._ser = None
        self._reader = None
        self._handle = None
