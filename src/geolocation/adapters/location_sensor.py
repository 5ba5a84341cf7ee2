"""Device location capability - one-shot position fixes."""

import abc
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionFix:
    latitude: float
    longitude: float


class AbstractLocationSensor(abc.ABC):
    """Abstract base class for device location implementations."""

    @abc.abstractmethod
    def request_position(self, timeout: Optional[float] = None) -> PositionFix:
        """
        Request a single position fix from the device.

        Args:
            timeout: Seconds to wait for a fix before giving up

        Returns:
            PositionFix with raw latitude/longitude

        Raises:
            LocationSensorError: If no fix could be obtained
        """
        raise NotImplementedError


class ReportedPositionSensor(AbstractLocationSensor):
    """
    Fix (or failure) already obtained by the operator's device and reported
    to the backend together with the draft.
    """

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None,
                 error: Optional[str] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.error = error

    def request_position(self, timeout: Optional[float] = None) -> PositionFix:
        if self.error:
            raise LocationSensorError(f"Device reported location failure: {self.error}")
        if self.latitude is None or self.longitude is None:
            raise LocationSensorError("Device reported no position")
        return PositionFix(latitude=self.latitude, longitude=self.longitude)


class LocationSensorError(Exception):
    """DeviceLocationFailure - recoverable, the operator may retry or switch mode."""
    kind = "DeviceLocationFailure"
