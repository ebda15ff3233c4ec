import csv

from telemetry_viewer.codec import FIELDS, Sample
from telemetry_viewer.history import HistoryLog
from telemetry_viewer.io_csv import write_history_csv


def test_history_export_is_chronological(tmp_path):
    log = HistoryLog()
    log.add(Sample(1, 2, 3, 4, 5), timestamp=1_700_000_000.0)
    log.add(Sample(temp_dht=22.5, humidity=40, light=10, co2=400, sound=3), timestamp=1_700_000_060.0)

    path = tmp_path / "history.csv"
    assert write_history_csv(str(path), log.snapshot()) == 2

    with open(path, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["timestamp", *FIELDS]
    assert rows[1][1:] == ["1", "2", "3", "4", "5", "", ""]
    assert rows[2][1:] == ["", "22.5", "40", "10", "400", "", "3"]
