import sys

from PySide6 import QtWidgets

from telemetry_viewer.logger import DiagnosticLog
from telemetry_viewer.main_window import SensorWindow
from telemetry_viewer.supervisor import ConnectionSupervisor


def main():
    app = QtWidgets.QApplication(sys.argv)

    diagnostics = DiagnosticLog()
    diagnostics.start()

    sup = ConnectionSupervisor(diagnostics=diagnostics)
    win = SensorWindow(sup)
    win.resize(1000, 650)
    win.show()

    sup.startup()
    sup.start()
    try:
        code = app.exec()
    finally:
        sup.shutdown()
        diagnostics.stop()
        diagnostics.join(timeout=1.0)
    sys.exit(code)


if __name__ == "__main__":
    main()
