import json

import pytest

from metricsalerts.models import Metrics


def test_to_dict_gauge_omits_delta():
    metric = Metrics(id="Alloc", mtype="gauge", value=1.5)
    assert metric.to_dict() == {"id": "Alloc", "type": "gauge", "value": 1.5}


def test_to_dict_counter_omits_value():
    metric = Metrics(id="PollCount", mtype="counter", delta=4)
    assert metric.to_dict() == {"id": "PollCount", "type": "counter", "delta": 4}


def test_to_dict_without_numbers():
    assert Metrics(id="x", mtype="gauge").to_dict() == {"id": "x", "type": "gauge"}


def test_to_json_is_compact_and_ordered():
    metric = Metrics(id="Alloc", mtype="gauge", value=2.5)
    assert metric.to_json() == '{"id":"Alloc","type":"gauge","value":2.5}'


def test_json_round_trip():
    metric = Metrics(id="RandomValue", mtype="gauge", value=42.25)
    assert Metrics.from_dict(json.loads(metric.to_json())) == metric


def test_dict_round_trip_counter():
    metric = Metrics(id="PollCount", mtype="counter", delta=7)
    assert Metrics.from_dict(metric.to_dict()) == metric


def test_from_dict_integer_value_becomes_float():
    metric = Metrics.from_dict({"id": "Alloc", "type": "gauge", "value": 3})
    assert isinstance(metric.value, float)
    assert metric.value == 3


def test_from_dict_missing_fields_default():
    metric = Metrics.from_dict({})
    assert metric == Metrics()


@pytest.mark.parametrize(
    "data",
    [
        {"id": 5, "type": "gauge"},
        {"id": "a", "type": 1},
        {"id": "a", "type": "counter", "delta": 1.5},
        {"id": "a", "type": "counter", "delta": True},
        {"id": "a", "type": "gauge", "value": "1.0"},
        {"id": "a", "type": "gauge", "value": False},
    ],
)
def test_from_dict_rejects_wrong_types(data):
    with pytest.raises(ValueError):
        Metrics.from_dict(data)


def test_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        Metrics.from_dict(["id", "type"])