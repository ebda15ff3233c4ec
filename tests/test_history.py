from telemetry_viewer.codec import Sample
from telemetry_viewer.history import HistoryLog


def test_newest_first_and_clear():
    log = HistoryLog()
    log.add(Sample(co2=1), timestamp=1.0)
    log.add(Sample(co2=2), timestamp=2.0)
    snap = log.snapshot()
    assert [e.sample.co2 for e in snap] == [2.0, 1.0]
    assert isinstance(snap, tuple)

    log.clear()
    assert len(log) == 0
    assert len(snap) == 2


def test_add_stamps_current_time():
    entry = HistoryLog().add(Sample())
    assert entry.timestamp > 0
