"""
Geolocation capture for a single case draft.

The operator picks one of three acquisition modes; every mode ends up in the
same (lat, lng) pair. State is immutable: each operation returns a new
GeolocationCapture, so an in-flight draft is never partially updated.
"""
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


COORDINATE_DECIMALS = 6


class LocationMethod(str, Enum):
    """Acquisition modes offered on the capture form"""
    SENSOR = "gps"
    MAP = "map"
    MANUAL = "manual"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    @classmethod
    def from_fix(cls, lat: float, lng: float) -> "Coordinate":
        """Coordinate from a sensor fix or map pick, rounded to 6 decimals."""
        return cls(
            lat=round(float(lat), COORDINATE_DECIMALS),
            lng=round(float(lng), COORDINATE_DECIMALS),
        )


def parse_coordinate_text(text: Optional[str]) -> Optional[float]:
    """Parse free-form decimal text; empty, non-numeric or NaN means absent."""
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class GeolocationCapture:
    method: LocationMethod = LocationMethod.SENSOR
    coordinate: Optional[Coordinate] = None
    manual_lat: str = ""
    manual_lng: str = ""
    manual_edited: bool = False
    # Bumped on every mode switch/reset; pending sensor requests carry the
    # value they were issued under
    generation: int = 0

    def current_coordinate(self) -> Optional[Coordinate]:
        if self.method == LocationMethod.MANUAL and self.manual_edited:
            lat = parse_coordinate_text(self.manual_lat)
            lng = parse_coordinate_text(self.manual_lng)
            if lat is None or lng is None:
                return None
            return Coordinate(lat=lat, lng=lng)
        return self.coordinate

    @property
    def pending_marker(self) -> Optional[Coordinate]:
        """The single marker shown on the pick map, if any."""
        if self.method == LocationMethod.MAP:
            return self.coordinate
        return None

    def switch_method(self, method: LocationMethod) -> "GeolocationCapture":
        method = LocationMethod(method)
        return replace(
            self,
            method=method,
            coordinate=self.current_coordinate(),
            manual_lat="",
            manual_lng="",
            manual_edited=False,
            generation=self.generation + 1,
        )

    def with_sensor_fix(self, lat: float, lng: float, token: int) -> "GeolocationCapture":
        """Apply a sensor fix issued under ``token``; stale fixes are dropped."""
        if token != self.generation or self.method != LocationMethod.SENSOR:
            return self
        return replace(self, coordinate=Coordinate.from_fix(lat, lng))

    def with_map_pick(self, lat: float, lng: float) -> "GeolocationCapture":
        if self.method != LocationMethod.MAP:
            return self
        return replace(self, coordinate=Coordinate.from_fix(lat, lng))

    def with_manual_entry(self, lat_text: str, lng_text: str) -> "GeolocationCapture":
        if self.method != LocationMethod.MANUAL:
            return self
        return replace(
            self,
            manual_lat="" if lat_text is None else str(lat_text),
            manual_lng="" if lng_text is None else str(lng_text),
            manual_edited=True,
        )

    def reset(self) -> "GeolocationCapture":
        return GeolocationCapture(generation=self.generation + 1)
