import pytest

from telemetry_viewer.codec import Sample
from telemetry_viewer.display_mode import DisplayMode, DisplayModeController
from telemetry_viewer.history import HistoryLog
from telemetry_viewer.ring import SeriesStore

CHANNELS = ("temperature", "humidity", "tertiary")


@pytest.fixture
def controller():
    return DisplayModeController(SeriesStore(CHANNELS, capacity=10), HistoryLog())


def lengths(store):
    return {name: len(store.snapshot(name)) for name in CHANNELS}


def test_sparse_sample_goes_to_chart(controller):
    result = controller.route(Sample(temp_lm35=20.0, humidity=40.0, light=150.0))
    assert result.mode is DisplayMode.CHART
    assert controller.mode is DisplayMode.CHART
    assert lengths(controller.store) == {"temperature": 1, "humidity": 1, "tertiary": 1}
    assert len(controller.history) == 0
    assert controller.store.last("temperature") == 20.0
    assert controller.store.last("tertiary") == 150.0
    assert result.tertiary_unit == "lx"


def test_dht_temperature_wins_over_lm35(controller):
    controller.route(Sample(temp_lm35=20.0, temp_dht=25.0))
    assert controller.store.last("temperature") == 25.0


def test_empty_sample_is_charted_as_zeros(controller):
    result = controller.route(Sample())
    assert result.mode is DisplayMode.CHART
    assert result.readings == {"temperature": 0.0, "humidity": 0.0, "tertiary": 0.0}
    assert result.tertiary_unit is None
    assert lengths(controller.store) == {"temperature": 1, "humidity": 1, "tertiary": 1}


def test_four_fields_still_chart(controller):
    controller.route(Sample(temp_lm35=1, temp_dht=2, humidity=3, light=4))
    assert controller.mode is DisplayMode.CHART
    assert len(controller.history) == 0


@pytest.mark.parametrize("sample", [
    Sample(temp_lm35=1, temp_dht=2, humidity=3, light=4, co2=5),
    Sample(1, 2, 3, 4, 5, 6, 7),
    Sample(humidity=3, light=4, co2=5, water=6, sound=7),
])
def test_rich_sample_goes_to_history_only(controller, sample):
    result = controller.route(sample)
    assert result.mode is DisplayMode.TABLE
    assert lengths(controller.store) == {"temperature": 0, "humidity": 0, "tertiary": 0}
    assert controller.history.snapshot()[0].sample == sample


def test_mode_follows_each_sample(controller):
    controller.route(Sample(1, 2, 3, 4, 5))
    assert controller.mode is DisplayMode.TABLE
    controller.route(Sample(humidity=1))
    assert controller.mode is DisplayMode.CHART
