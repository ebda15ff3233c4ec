import os
import threading
import time

import pytest
import serial

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class FakeSerial:
    """Stands in for serial.Serial; hands out queued chunks from read_until."""

    def __init__(self, port=None, baudrate=9600, timeout=None, chunks=()):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.is_open = True
        self.closed_count = 0
        self._chunks = list(chunks)
        self._lock = threading.Lock()
        self.fail_reads = False

    def feed(self, *chunks):
        with self._lock:
            self._chunks.extend(chunks)

    def read_until(self, expected=b"\n"):
        if self.fail_reads:
            raise serial.SerialException("device disconnected")
        with self._lock:
            if self._chunks:
                return self._chunks.pop(0)
        time.sleep(0.005)
        return b""

    def close(self):
        self.is_open = False
        self.closed_count += 1


class FakePorts:
    """
    serial_factory replacement: ports in `good` open, anything else raises
    like pyserial does. Every attempt is recorded in order.
    """

    def __init__(self, good=()):
        self.good = set(good)
        self.attempts = []
        self.opened = {}

    def __call__(self, port=None, baudrate=9600, timeout=None):
        self.attempts.append((port, baudrate))
        if port not in self.good:
            raise serial.SerialException(f"could not open port {port}")
        ser = FakeSerial(port, baudrate, timeout)
        self.opened[port] = ser
        return ser


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()

