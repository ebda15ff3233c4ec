# main_window.py
import datetime

import numpy as np
import pyqtgraph as pg
from PySide6 import QtWidgets, QtCore, QtGui

from telemetry_viewer.codec import FIELDS
from telemetry_viewer.config import CHANNEL_LABELS, CHANNELS, LINE_COLORS, LINE_WIDTH
from telemetry_viewer.connection_dialog import ConnectionDialog
from telemetry_viewer.display_mode import DisplayMode
from telemetry_viewer.io_csv import write_history_csv
from telemetry_viewer.supervisor import ConnectionState, ConnectionSupervisor


class SensorWindow(QtWidgets.QMainWindow):
    """
    Value cards on top, then either the rolling chart or the history table
    depending on the supervisor's current display mode.
    """
    def __init__(self, supervisor: ConnectionSupervisor):
        super().__init__()
        self.setWindowTitle("Sensor telemetry")
        pg.setConfigOptions(antialias=True, background='w')
        self.sup = supervisor

        central = QtWidgets.QWidget()
        vbox = QtWidgets.QVBoxLayout(central)
        vbox.setContentsMargins(8, 8, 8, 8)
        self.setCentralWidget(central)

        # --- Value cards ---
        cards = QtWidgets.QHBoxLayout()
        self.cards = {}
        for name in CHANNELS:
            title, _unit = CHANNEL_LABELS[name]
            box = QtWidgets.QGroupBox(title)
            lbl = QtWidgets.QLabel("--")
            font = lbl.font()
            font.setPointSize(18)
            font.setBold(True)
            lbl.setFont(font)
            QtWidgets.QVBoxLayout(box).addWidget(lbl)
            cards.addWidget(box)
            self.cards[name] = lbl
        vbox.addLayout(cards)

        # --- Chart / table stack ---
        self.stack = QtWidgets.QStackedWidget()
        vbox.addWidget(self.stack, 1)

        self.plot = pg.PlotWidget()
        self.plot.showGrid(x=True, y=True, alpha=0.25)
        self.plot.addLegend()
        self.plot.setLabel("bottom", "Sample")
        self.plot.setLabel("left", "Value")
        self.curves = {}
        for i, name in enumerate(CHANNELS):
            color = LINE_COLORS[i % len(LINE_COLORS)]
            self.curves[name] = self.plot.plot(
                pen=pg.mkPen(color=color, width=LINE_WIDTH), name=CHANNEL_LABELS[name][0])
        self.stack.addWidget(self.plot)

        self.table = QtWidgets.QTableWidget(0, 1 + len(FIELDS))
        self.table.setHorizontalHeaderLabels(["time", *FIELDS])
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.stack.addWidget(self.table)

        # --- Status bar ---
        self.sb = self.statusBar()
        self.state_lbl = QtWidgets.QLabel("")
        self.sb.addPermanentWidget(self.state_lbl)

        # --- Menus ---
        file_menu = self.menuBar().addMenu("&File")
        self.export_act = QtGui.QAction("Export history CSV…", self)
        self.export_act.triggered.connect(self._export_history)
        file_menu.addAction(self.export_act)

        settings_menu = self.menuBar().addMenu("&Settings")
        self.connection_act = QtGui.QAction("Connection…", self)
        self.connection_act.triggered.connect(self._open_connection_dialog)
        settings_menu.addAction(self.connection_act)
        self.dialog = None

        QtGui.QShortcut(QtGui.QKeySequence(QtCore.Qt.Key_C), self, activated=self.sup.clear_history)

        # --- Supervisor signals ---
        self.sup.status.connect(self._on_status)
        self.sup.state_changed.connect(self._on_state)
        self.sup.mode_changed.connect(self._on_mode)
        self.sup.readings_changed.connect(self._on_readings)
        self.sup.data_changed.connect(self._redraw)

        self._on_state(self.sup.state)
        self._on_mode(self.sup.mode)
        self._redraw()

    # ---------- Supervisor slots ----------
    def _on_status(self, msg: str):
        self.sb.showMessage(msg, 5000)

    def _on_state(self, state: ConnectionState):
        if state is ConnectionState.CONNECTED:
            text = f"Connected: {self.sup.current_port} @{self.sup.current_baud}"
        else:
            text = state.value.capitalize()
        self.state_lbl.setText(text)

    def _on_mode(self, mode: DisplayMode):
        self.stack.setCurrentWidget(self.table if mode is DisplayMode.TABLE else self.plot)

    def _on_readings(self, readings: dict):
        self.cards["temperature"].setText(f"{readings['temperature']:.1f} °C")
        self.cards["humidity"].setText(f"{readings['humidity']:.1f} %")
        unit = readings.get("unit")
        if unit:
            self.cards["tertiary"].setText(f"{readings['tertiary']:.0f} {unit}")
        else:
            self.cards["tertiary"].setText("--")

    # ---------- Drawing ----------
    def _redraw(self):
        for name, curve in self.curves.items():
            y = self.sup.snapshot(name)
            curve.setData(np.arange(len(y)), y)
        if self.sup.mode is DisplayMode.TABLE or self.table.rowCount():
            self._fill_table()

    def _fill_table(self):
        entries = self.sup.history_snapshot()
        self.table.setRowCount(len(entries))
        for r, e in enumerate(entries):
            ts = datetime.datetime.fromtimestamp(e.timestamp).strftime("%H:%M:%S")
            self.table.setItem(r, 0, QtWidgets.QTableWidgetItem(ts))
            for c, v in enumerate(e.sample.as_row(), start=1):
                text = "" if v is None else f"{v:g}"
                self.table.setItem(r, c, QtWidgets.QTableWidgetItem(text))

    # ---------- Menu actions ----------
    def _open_connection_dialog(self):
        if self.dialog is None:
            self.dialog = ConnectionDialog(self.sup, self)
        self.dialog.show()
        self.dialog.raise_()

    def _export_history(self):
        path, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Export history", "history.csv", "CSV files (*.csv)")
        if not path:
            return
        try:
            n = write_history_csv(path, self.sup.history_snapshot())
        except OSError as e:
            self.sb.showMessage(f"Export failed: {e}", 5000)
            return
        self.sb.showMessage(f"Exported {n} row(s) to {path}", 5000)

    def closeEvent(self, event):
        self.sup.shutdown()
        return super().closeEvent(event)
