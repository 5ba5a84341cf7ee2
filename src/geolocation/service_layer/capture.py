import logging
from typing import Optional

import config
from geolocation.adapters.location_sensor import (
    AbstractLocationSensor,
    LocationSensorError,
    PositionFix,
)
from geolocation.domain.model import GeolocationCapture, LocationMethod

logger = logging.getLogger(__name__)


def capture_from_sensor(
    capture: GeolocationCapture,
    sensor: AbstractLocationSensor,
    timeout: Optional[float] = None,
) -> GeolocationCapture:
    """
    Request a one-shot fix and apply it to the capture.

    The generation token is taken before the request, so a fix that arrives
    after the operator switched mode is discarded by the capture itself.

    Raises:
        LocationSensorError: If the device could not produce a fix. The
            capture passed in is left untouched.
    """
    if timeout is None:
        timeout = config.get_location_timeout_seconds()

    token = capture.generation
    try:
        fix = sensor.request_position(timeout=timeout)
    except LocationSensorError as e:
        logger.warning(f"Sensor capture failed: {e}")
        raise

    return apply_sensor_fix(capture, fix, token)


def apply_sensor_fix(capture: GeolocationCapture, fix: PositionFix, token: int) -> GeolocationCapture:
    """Merge a fix obtained under ``token`` into the current capture."""
    updated = capture.with_sensor_fix(fix.latitude, fix.longitude, token)
    if updated is capture:
        logger.info(f"Discarded stale sensor fix (token {token}, current {capture.generation})")
    return updated


def build_capture(
    method: LocationMethod,
    latitude=None,
    longitude=None,
    sensor: Optional[AbstractLocationSensor] = None,
) -> GeolocationCapture:
    """
    Build a capture for a single acquisition from one mode.

    For the sensor mode the fix comes from ``sensor``; for the map mode
    latitude/longitude are the pick event; for the manual mode they are the
    text typed by the operator.
    """
    capture = GeolocationCapture().switch_method(method)

    if capture.method == LocationMethod.SENSOR:
        if sensor is None:
            raise LocationSensorError("No location sensor available")
        return capture_from_sensor(capture, sensor)

    if capture.method == LocationMethod.MAP:
        if latitude is None or longitude is None:
            return capture
        return capture.with_map_pick(latitude, longitude)

    return capture.with_manual_entry(latitude, longitude)
