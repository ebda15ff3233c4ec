import json

from telemetry_viewer.config import DEFAULT_BAUD
from telemetry_viewer.settings import PersistedSettings, load_settings, save_settings


def test_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    s = PersistedSettings(port="COM4", baud_rate=115200, simulate=True)
    save_settings(path, s)
    assert load_settings(path) == s


def test_file_shape(tmp_path):
    path = tmp_path / "settings.json"
    save_settings(path, PersistedSettings(port=None, baud_rate=9600, simulate=False))
    assert json.loads(path.read_text()) == {"Port": None, "BaudRate": 9600, "Simulate": False}


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "nope.json") == PersistedSettings()


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{oops")
    assert load_settings(path) == PersistedSettings(None, DEFAULT_BAUD, False)


def test_bad_values_fall_back_per_key(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"Port": "", "BaudRate": "fast", "Simulate": True}))
    assert load_settings(path) == PersistedSettings(None, DEFAULT_BAUD, True)


def test_padded_port_round_trips(tmp_path):
    path = tmp_path / "settings.json"
    s = PersistedSettings(port=" COM4 ", baud_rate=9600, simulate=False)
    assert s.port == "COM4"
    save_settings(path, s)
    assert json.loads(path.read_text())["Port"] == "COM4"
    assert load_settings(path) == s


def test_blank_port_means_no_preference(tmp_path):
    path = tmp_path / "settings.json"
    s = PersistedSettings(port="   ", baud_rate=9600, simulate=True)
    assert s.port is None
    save_settings(path, s)
    assert load_settings(path) == s
