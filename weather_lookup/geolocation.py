"""
Geolocation collaborators.

The coordinator only needs something that can be awaited for the device's
coordinates and that raises GeolocationUnavailable when permission is denied
or the position cannot be determined.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .errors import GeolocationUnavailable


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


class Geolocator(Protocol):
    async def get_current_position(self) -> Coordinates:
        ...


class StaticGeolocator:
    """
    Reports a fixed, configured position.

    On a server there is no device to ask; the browser reports its own
    position through the API instead. With no configured position this
    behaves like a user who declined the permission prompt.
    """

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude

    async def get_current_position(self) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise GeolocationUnavailable("No position configured.")
        return Coordinates(latitude=self.latitude, longitude=self.longitude)
