from PySide6 import QtWidgets

from telemetry_viewer.config import BAUD_RATES
from telemetry_viewer.ports import list_port_names


class ConnectionDialog(QtWidgets.QDialog):
    """Port / baud / simulation page; every button calls into the supervisor."""

    def __init__(self, supervisor, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Connection")
        self.sup = supervisor

        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        layout.addLayout(form)

        # Port
        self.port_combo = QtWidgets.QComboBox()
        self.refresh_btn = QtWidgets.QPushButton("Refresh")
        port_box = QtWidgets.QHBoxLayout()
        port_box.addWidget(self.port_combo, 1)
        port_box.addWidget(self.refresh_btn)
        form.addRow("Port:", port_box)

        # Baud
        self.baud_cb = QtWidgets.QComboBox()
        self.baud_cb.setEditable(True)
        for b in BAUD_RATES:
            self.baud_cb.addItem(str(b))
        self.baud_cb.setCurrentText(str(self.sup.settings.baud_rate))
        form.addRow("Baud:", self.baud_cb)

        self.simulate_chk = QtWidgets.QCheckBox("Simulate when no device is connected")
        form.addRow("", self.simulate_chk)

        btns_line = QtWidgets.QHBoxLayout()
        self.connect_btn = QtWidgets.QPushButton("Connect")
        self.disconnect_btn = QtWidgets.QPushButton("Disconnect")
        self.save_btn = QtWidgets.QPushButton("Save")
        self.clear_btn = QtWidgets.QPushButton("Clear")
        for b in (self.connect_btn, self.disconnect_btn, self.save_btn, self.clear_btn):
            btns_line.addWidget(b)
        layout.addLayout(btns_line)

        self.status_lbl = QtWidgets.QLabel("")
        layout.addWidget(self.status_lbl)

        self.refresh_btn.clicked.connect(self.refresh_ports)
        self.connect_btn.clicked.connect(self._on_connect)
        self.disconnect_btn.clicked.connect(self._on_disconnect)
        self.save_btn.clicked.connect(self._on_save)
        self.clear_btn.clicked.connect(self._on_clear)

    def showEvent(self, event):
        self.refresh_ports()
        self.simulate_chk.setChecked(self.sup.is_simulating)
        current = self.sup.current_port or self.sup.settings.port
        if current:
            idx = self.port_combo.findText(current)
            if idx >= 0:
                self.port_combo.setCurrentIndex(idx)
        super().showEvent(event)

    def refresh_ports(self):
        current = self.port_combo.currentText()
        self.port_combo.clear()
        self.port_combo.addItems(list_port_names())
        idx = self.port_combo.findText(current)
        if idx >= 0:
            self.port_combo.setCurrentIndex(idx)

    def _baud(self):
        try:
            return int(self.baud_cb.currentText())
        except ValueError:
            return None

    # ---------- Buttons ----------
    def _on_connect(self):
        port = self.port_combo.currentText()
        if not port:
            self.status_lbl.setText("Select port")
            return
        baud = self._baud()
        if baud is None:
            self.status_lbl.setText("Bad baud")
            return
        ok = self.sup.connect_port(port, baud)
        self.status_lbl.setText("Connected" if ok else "Connect failed")

    def _on_disconnect(self):
        self.sup.disconnect_port()
        self.status_lbl.setText("Disconnected")

    def _on_save(self):
        simulate = self.simulate_chk.isChecked()
        ok = self.sup.save_settings(self.port_combo.currentText(), self._baud() or 0, simulate)
        self.sup.set_simulation(simulate)
        self.status_lbl.setText("Saved" if ok else "Save failed")

    def _on_clear(self):
        self.sup.clear_history()
        self.status_lbl.setText("Cleared")
