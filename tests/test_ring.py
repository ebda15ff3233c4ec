import numpy as np
import pytest

from telemetry_viewer.ring import SeriesChannel, SeriesStore


def test_channel_length_is_min_of_window_and_appends():
    ch = SeriesChannel("t", capacity=10)
    for i in range(25):
        ch.append(float(i))
        assert len(ch) == min(10, i + 1)
        assert len(ch.snapshot()) == len(ch)


def test_channel_keeps_last_w_values_in_order():
    ch = SeriesChannel("t", capacity=4)
    for v in range(1, 10):
        ch.append(v)
    np.testing.assert_array_equal(ch.snapshot(), [6, 7, 8, 9])
    assert ch.last() == 9


def test_snapshot_cannot_mutate_store():
    store = SeriesStore(["a"], capacity=3)
    store.append("a", 1.0)
    snap = store.snapshot("a")
    with pytest.raises(ValueError):
        snap[0] = 99.0
    writable = np.array(snap)
    writable[0] = 99.0
    assert store.snapshot("a")[0] == 1.0


def test_append_row_advances_every_channel_with_default_for_missing():
    store = SeriesStore(["a", "b", "c"], capacity=5)
    store.append_row({"a": 1.0, "b": None})
    for name in ("a", "b", "c"):
        assert len(store.snapshot(name)) == 1
    assert store.last("a") == 1.0
    assert store.last("b") == 0.0
    assert store.last("c") == 0.0


def test_unknown_channel_raises_key_error():
    store = SeriesStore(["a"])
    with pytest.raises(KeyError):
        store.append("nope", 1.0)
    with pytest.raises(KeyError):
        store.append_row({"nope": 1.0})
    assert len(store.snapshot("a")) == 0


def test_clear_resets_to_seeds():
    store = SeriesStore(["a", "b"], capacity=4, seeds={"a": (1.0, 2.0)})
    for v in range(10):
        store.append_row({"a": v, "b": v})
    store.clear()
    np.testing.assert_array_equal(store.snapshot("a"), [1.0, 2.0])
    assert len(store.snapshot("b")) == 0
    assert store.last("b") is None


def test_capacity_is_fixed():
    store = SeriesStore(["a"], capacity=3)
    assert store.capacity == 3
    with pytest.raises(AttributeError):
        store.capacity = 5


def test_zero_capacity_rejected():
    with pytest.raises(ValueError):
        SeriesChannel("x", capacity=0)
