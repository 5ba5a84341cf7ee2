"""Unit tests for geolocation capture across the three acquisition modes"""
from unittest.mock import Mock

import pytest

from geolocation.adapters.location_sensor import (
    AbstractLocationSensor,
    LocationSensorError,
    PositionFix,
    ReportedPositionSensor,
)
from geolocation.domain.model import (
    Coordinate,
    GeolocationCapture,
    LocationMethod,
    parse_coordinate_text,
)
from geolocation.service_layer.capture import (
    apply_sensor_fix,
    build_capture,
    capture_from_sensor,
)


class FailingSensor(AbstractLocationSensor):
    def request_position(self, timeout=None):
        raise LocationSensorError("permission denied")


def test_new_capture_defaults_to_sensor_without_coordinate():
    capture = GeolocationCapture()
    assert capture.method == LocationMethod.SENSOR
    assert capture.current_coordinate() is None


def test_fix_is_rounded_to_six_decimals():
    assert Coordinate.from_fix(-25.96921234, 32.57329876) == Coordinate(-25.969212, 32.573299)


def test_sensor_capture_rounds_fix():
    sensor = ReportedPositionSensor(latitude=-25.96921234, longitude=32.57329876)
    capture = capture_from_sensor(GeolocationCapture(), sensor, timeout=1)
    assert capture.current_coordinate() == Coordinate(-25.969212, 32.573299)


def test_sensor_failure_is_recoverable():
    capture = GeolocationCapture()
    with pytest.raises(LocationSensorError) as exc_info:
        capture_from_sensor(capture, FailingSensor(), timeout=1)
    assert exc_info.value.kind == "DeviceLocationFailure"

    # operator may retry with a working sensor
    retried = capture_from_sensor(capture, ReportedPositionSensor(-25.9, 32.5), timeout=1)
    assert retried.current_coordinate() == Coordinate(-25.9, 32.5)


def test_capture_passes_timeout_to_sensor():
    sensor = Mock(spec=AbstractLocationSensor)
    sensor.request_position.return_value = PositionFix(-25.9, 32.5)

    capture_from_sensor(GeolocationCapture(), sensor, timeout=12.5)

    sensor.request_position.assert_called_once_with(timeout=12.5)


def test_sensor_fix_after_mode_switch_is_discarded():
    capture = GeolocationCapture()
    token = capture.generation

    switched = capture.switch_method(LocationMethod.MANUAL)
    result = apply_sensor_fix(switched, PositionFix(-25.9, 32.5), token)

    assert result is switched
    assert result.current_coordinate() is None


def test_map_pick_replaces_previous_pick():
    capture = GeolocationCapture().switch_method(LocationMethod.MAP)
    capture = capture.with_map_pick(-25.91, 32.51)
    capture = capture.with_map_pick(-25.95, 32.55)

    assert capture.current_coordinate() == Coordinate(-25.95, 32.55)
    assert capture.pending_marker == Coordinate(-25.95, 32.55)


def test_map_pick_outside_map_mode_is_ignored():
    capture = GeolocationCapture()
    assert capture.with_map_pick(-25.9, 32.5) is capture


def test_manual_entry_is_parsed_when_read():
    capture = GeolocationCapture().switch_method(LocationMethod.MANUAL)
    capture = capture.with_manual_entry("-25.9692", " 32.5732 ")
    assert capture.current_coordinate() == Coordinate(-25.9692, 32.5732)


@pytest.mark.parametrize("lat_text,lng_text", [
    ("", "32.5"),
    ("-25.9", "abc"),
    ("nan", "32.5"),
    ("-25.9", ""),
])
def test_unparseable_manual_entry_is_absent(lat_text, lng_text):
    capture = GeolocationCapture().switch_method(LocationMethod.MANUAL)
    capture = capture.with_manual_entry(lat_text, lng_text)
    assert capture.current_coordinate() is None


def test_switching_from_map_to_manual_does_not_fill_manual_fields():
    capture = GeolocationCapture().switch_method(LocationMethod.MAP).with_map_pick(-25.95, 32.55)

    manual = capture.switch_method(LocationMethod.MANUAL)

    assert manual.manual_lat == "" and manual.manual_lng == ""
    # the picked coordinate stays the draft's coordinate until manual edit
    assert manual.current_coordinate() == Coordinate(-25.95, 32.55)
    assert manual.pending_marker is None


def test_manual_edit_overrides_previous_coordinate():
    capture = GeolocationCapture().switch_method(LocationMethod.MAP).with_map_pick(-25.95, 32.55)
    manual = capture.switch_method(LocationMethod.MANUAL).with_manual_entry("-26.1", "32.9")
    assert manual.current_coordinate() == Coordinate(-26.1, 32.9)


def test_manual_coordinate_persists_after_switching_away():
    capture = GeolocationCapture().switch_method(LocationMethod.MANUAL).with_manual_entry("-26.1", "32.9")
    on_map = capture.switch_method(LocationMethod.MAP)
    assert on_map.current_coordinate() == Coordinate(-26.1, 32.9)


def test_reset_clears_coordinate_and_invalidates_requests():
    capture = GeolocationCapture().switch_method(LocationMethod.MAP).with_map_pick(-25.95, 32.55)
    reset = capture.reset()
    assert reset.current_coordinate() is None
    assert reset.generation > capture.generation


def test_capture_is_immutable():
    capture = GeolocationCapture()
    capture.switch_method(LocationMethod.MAP)
    assert capture.method == LocationMethod.SENSOR


@pytest.mark.parametrize("text,expected", [
    ("12.5", 12.5),
    ("-0.000001", -0.000001),
    ("", None),
    (None, None),
    ("inf", None),
    ("1,5", None),
])
def test_parse_coordinate_text(text, expected):
    assert parse_coordinate_text(text) == expected


def test_build_capture_for_each_mode():
    sensor = ReportedPositionSensor(latitude=-25.1, longitude=32.1)
    assert build_capture(LocationMethod.SENSOR, sensor=sensor).current_coordinate() == Coordinate(-25.1, 32.1)
    assert build_capture(LocationMethod.MAP, -25.2, 32.2).current_coordinate() == Coordinate(-25.2, 32.2)
    assert build_capture(LocationMethod.MANUAL, "-25.3", "32.3").current_coordinate() == Coordinate(-25.3, 32.3)


def test_build_capture_reports_sensor_error():
    sensor = ReportedPositionSensor(error="timeout")
    with pytest.raises(LocationSensorError):
        build_capture(LocationMethod.SENSOR, sensor=sensor)
