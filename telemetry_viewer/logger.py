# logger.py
import datetime
import os
import queue
import threading

from telemetry_viewer.config import LOG_DIR, LOG_FILE


class DiagnosticLog(threading.Thread):
    """
    Append-only text log fed through a queue, one timestamped line per entry.
    Writing must never disturb the caller: a full queue drops the line and
    file errors are ignored.
    """
    def __init__(self, base_dir=LOG_DIR, filename=LOG_FILE, maxsize=1_000):
        super().__init__(daemon=True)
        self.q: "queue.Queue[str]" = queue.Queue(maxsize=maxsize)
        self.stop_flag = threading.Event()
        self.path = os.path.join(base_dir, filename)
        self.base_dir = base_dir
        self._f = None

    def write(self, message: str):
        ts = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            self.q.put_nowait(f"{ts} {message}")
        except queue.Full:
            pass

    def _open(self):
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            self._f = open(self.path, "a", encoding="utf-8", buffering=1)  # line buffered
        except OSError:
            self._f = None

    def _append(self, line: str):
        if self._f is None:
            self._open()
        if self._f is None:
            return
        try:
            self._f.write(line + "\n")
        except OSError:
            self._close()

    def _close(self):
        try:
            if self._f:
                self._f.close()
        except OSError:
            pass
        self._f = None

    def run(self):
        while not self.stop_flag.is_set():
            try:
                line = self.q.get(timeout=0.25)
            except queue.Empty:
                continue
            self._append(line)
        # flush whatever was queued before stop()
        while True:
            try:
                self._append(self.q.get_nowait())
            except queue.Empty:
                break
        self._close()

    def stop(self):
        self.stop_flag.set()
