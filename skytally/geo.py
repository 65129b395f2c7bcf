"""Great-circle distance, initial bearing and compass sectors."""

from __future__ import annotations

from dataclasses import dataclass
import math

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_MILES = 3958.0
EARTH_RADIUS_NM = 3443.0

SECTOR_WIDTH_DEG = 11.25

COMPASS_POINTS: tuple[str, ...] = (
    "N", "NbE", "NNE", "NEbN", "NE", "NEbE", "ENE", "EbN",
    "E", "EbS", "ESE", "SEbE", "SE", "SEbS", "SSE", "SbE",
    "S", "SbW", "SSW", "SWbS", "SW", "SWbW", "WSW", "WbS",
    "W", "WbN", "WNW", "NWbW", "NW", "NWbN", "NNW", "NbW",
)


@dataclass(frozen=True)
class Coordinates:
    """A point on the globe in decimal degrees."""

    latitude: float
    longitude: float

    def to_radians(self) -> tuple[float, float]:
        return math.radians(self.latitude), math.radians(self.longitude)


@dataclass(frozen=True)
class Distance:
    """Central angle between two points; multiply by a radius for a length."""

    central_angle: float

    def kilometers(self) -> float:
        return self.central_angle * EARTH_RADIUS_KM

    def miles(self) -> float:
        return self.central_angle * EARTH_RADIUS_MILES

    def nautical_miles(self) -> float:
        return self.central_angle * EARTH_RADIUS_NM


def distance(p: Coordinates, q: Coordinates) -> Distance:
    """Haversine distance between ``p`` and ``q``."""

    lat1, lon1 = p.to_radians()
    lat2, lon2 = q.to_radians()

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return Distance(c)


def bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from the first point to the second, in [0, 360)."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    y = math.sin(dlon) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlon)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def compass_sector(bearing_deg: float) -> str:
    """Name of the 32-point compass sector centered closest to ``bearing_deg``."""

    index = int(((bearing_deg % 360.0) + SECTOR_WIDTH_DEG / 2) / SECTOR_WIDTH_DEG) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def direction(lat1: float, lon1: float, lat2: float, lon2: float) -> str:
    return compass_sector(bearing(lat1, lon1, lat2, lon2))


__all__ = [
    "COMPASS_POINTS",
    "Coordinates",
    "Distance",
    "bearing",
    "compass_sector",
    "direction",
    "distance",
]
