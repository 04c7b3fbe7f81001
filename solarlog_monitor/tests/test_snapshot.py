# solarlog_monitor/tests/test_snapshot.py

import dataclasses
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from solarlog_monitor.errors import (
    DeviceUnreachableError,
    InvalidResponseError,
    InvalidTimezoneError,
    MissingFieldError,
    TimestampParseError,
)
from solarlog_monitor.models.snapshot import NUMERIC_FIELDS, TelemetrySnapshot, parse_device_time
from solarlog_monitor.services.solarlog_client import SolarLogClient, remap_fields
from solarlog_monitor.tests.fake_device import FakeSession, sample_readings, sample_response


def _fields(**overrides):
    return remap_fields(sample_response(sample_readings(**overrides)))


def _snapshot(**values):
    """Build a snapshot directly, all readings zero unless given."""
    base = {name: 0 for name in NUMERIC_FIELDS}
    base.update(values)
    return TelemetrySnapshot(time=datetime(2023, 6, 1, tzinfo=timezone.utc), **base)


# ----------------------------------------------------------------------
# derived metrics

def test_efficiency():
    assert _snapshot(power_ac=94, power_dc=100).efficiency == 0.94
    assert _snapshot(power_ac=0, power_dc=0).efficiency == 0


def test_alternator_loss():
    assert _snapshot(power_dc=100, power_ac=94).alternator_loss == 6


def test_usage():
    assert _snapshot(consumption_ac=50, power_ac=100).usage == 0.5
    assert _snapshot(consumption_ac=200, power_ac=100).usage == 2.0
    assert _snapshot(consumption_ac=200, power_ac=0).usage == 0


def test_power_available():
    assert _snapshot(power_ac=100, consumption_ac=50).power_available == 50
    assert _snapshot(power_ac=100, consumption_ac=200).power_available == -100


def test_capacity_is_a_true_ratio():
    assert _snapshot(power_dc=8000, power_total=10000).capacity == 0.8
    assert _snapshot(power_dc=3, power_total=4).capacity == 0.75
    assert _snapshot(power_dc=8000, power_total=0).capacity == 0


def test_metrics_dict_matches_properties():
    snap = _snapshot(power_ac=94, power_dc=100, consumption_ac=47, power_total=200)
    assert snap.metrics() == {
        "efficiency": 0.94,
        "alternator_loss": 6,
        "usage": 0.5,
        "power_available": 47,
        "capacity": 0.5,
    }


# ----------------------------------------------------------------------
# timestamp

def test_timestamp_with_offset():
    ts = parse_device_time("01.06.23 14:30:00", "+0200")
    assert ts == datetime(2023, 6, 1, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ts.isoformat() == "2023-06-01T14:30:00+02:00"


def test_timestamp_defaults_to_utc():
    ts = parse_device_time("31.12.22 23:59:58")
    assert ts == datetime(2022, 12, 31, 23, 59, 58, tzinfo=timezone.utc)


def test_timestamp_with_zone_name():
    ts = parse_device_time("01.01.24 08:00:00", "Europe/Berlin")
    assert ts.tzinfo == ZoneInfo("Europe/Berlin")
    assert ts.utcoffset() == timedelta(hours=1)


@pytest.mark.parametrize(
    "value",
    ["2023-06-01 14:30:00", "01.06.23", "01.06.2023 14:30:00", "32.01.23 10:00:00", "", None, 1685629800],
)
def test_bad_timestamp_raises(value):
    with pytest.raises(TimestampParseError) as excinfo:
        parse_device_time(value)
    assert excinfo.value.value == value


# ----------------------------------------------------------------------
# construction

def test_from_fields_copies_readings():
    fields = _fields()
    snap = TelemetrySnapshot.from_fields(fields, "+0200")

    assert snap.time.isoformat() == "2023-06-01T14:30:00+02:00"
    for name in NUMERIC_FIELDS:
        assert getattr(snap, name) == fields[name]
        assert isinstance(getattr(snap, name), int)


def test_from_fields_accepts_integer_strings():
    snap = TelemetrySnapshot.from_fields(_fields(**{"101": "94", "102": " 100 "}))
    assert snap.power_ac == 94
    assert snap.power_dc == 100
    assert snap.efficiency == 0.94


@pytest.mark.parametrize("value", ["n/a", 12.5, True, None, "1_000", "\u0663", "+5", "", "94.0"])
def test_from_fields_rejects_non_integers(value):
    with pytest.raises(InvalidResponseError):
        TelemetrySnapshot.from_fields(_fields(**{"110": value}))


def test_from_fields_missing_name():
    fields = _fields()
    del fields["consumption_total"]
    with pytest.raises(MissingFieldError) as excinfo:
        TelemetrySnapshot.from_fields(fields)
    assert excinfo.value.code == "115"


def test_from_fields_bad_timestamp():
    with pytest.raises(TimestampParseError):
        TelemetrySnapshot.from_fields(_fields(**{"100": "garbage"}))


def test_snapshot_is_immutable():
    snap = TelemetrySnapshot.from_fields(_fields())
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.power_ac = 1


def test_as_dict_contains_fields_and_metrics():
    payload = TelemetrySnapshot.from_fields(_fields(), "+0200").as_dict()
    assert payload["time"] == "2023-06-01T14:30:00+02:00"
    assert payload["power_ac"] == 94
    assert payload["metrics"]["efficiency"] == 0.94
    assert payload["metrics"]["alternator_loss"] == 6


# ----------------------------------------------------------------------
# from_device

def test_from_device_queries_once():
    session = FakeSession(payload=sample_response())
    client = SolarLogClient("http://10.0.0.10", session=session)

    snap = TelemetrySnapshot.from_device("http://10.0.0.10", "+0200", client=client)

    assert len(session.calls) == 1
    assert snap.time == datetime(2023, 6, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert snap.power_ac == 94
    assert snap.power_dc == 100
    assert snap.capacity == 0.01


def test_from_device_never_returns_empty_snapshot_on_http_error():
    client = SolarLogClient("http://10.0.0.10", session=FakeSession(status_code=500, payload={}))
    with pytest.raises(DeviceUnreachableError):
        TelemetrySnapshot.from_device("http://10.0.0.10", client=client)


def test_from_device_propagates_missing_field():
    readings = sample_readings()
    del readings["116"]
    client = SolarLogClient("http://10.0.0.10", session=FakeSession(payload=sample_response(readings)))
    with pytest.raises(MissingFieldError):
        TelemetrySnapshot.from_device("http://10.0.0.10", client=client)


def test_from_device_rejects_bad_timezone_before_querying():
    session = FakeSession(payload=sample_response())
    client = SolarLogClient("http://10.0.0.10", session=session)
    with pytest.raises(InvalidTimezoneError):
        TelemetrySnapshot.from_device("http://10.0.0.10", "Mars/Olympus", client=client)
    assert session.calls == []
