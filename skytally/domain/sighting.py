"""Per-aircraft continuity record kept by the sighting store."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from skytally.domain.rarity import RarityDimension

# Padded to the width of an ICAO callsign so status lines stay aligned.
FLIGHT_UNKNOWN = "unknown "
TYPE_UNKNOWN = "unknown"
OPERATOR_UNKNOWN = "unknown"
COUNTRY_UNKNOWN = "unknown"
DIRECTION_UNKNOWN = "n/a"

_UNKNOWN = {
    RarityDimension.TYPE: TYPE_UNKNOWN,
    RarityDimension.OPERATOR: OPERATOR_UNKNOWN,
    RarityDimension.COUNTRY: COUNTRY_UNKNOWN,
}


@dataclass
class AircraftSighting:
    """Everything we have learned about one physical aircraft, keyed by hex id."""

    hex: str
    last_seen: datetime
    last_flight_no: str = FLIGHT_UNKNOWN
    registration: str = ""
    latitude: float | None = None
    longitude: float | None = None
    distance_km: float | None = None
    direction: str = DIRECTION_UNKNOWN
    type_short: str = ""
    type_desc: str = TYPE_UNKNOWN
    operator: str = OPERATOR_UNKNOWN
    country: str = COUNTRY_UNKNOWN
    info: str = ""

    def value_for(self, dimension: RarityDimension) -> str:
        if dimension is RarityDimension.TYPE:
            return self.type_desc
        if dimension is RarityDimension.OPERATOR:
            return self.operator
        return self.country

    def set_value(self, dimension: RarityDimension, value: str) -> None:
        if dimension is RarityDimension.TYPE:
            self.type_desc = value
        elif dimension is RarityDimension.OPERATOR:
            self.operator = value
        else:
            self.country = value

    def is_resolved(self, dimension: RarityDimension) -> bool:
        return self.value_for(dimension) != _UNKNOWN[dimension]

    @property
    def display_type(self) -> str:
        """Short type description when transmitted, canonical model otherwise."""

        return self.type_short or self.type_desc

    def copy(self) -> "AircraftSighting":
        return replace(self)


__all__ = [
    "AircraftSighting",
    "COUNTRY_UNKNOWN",
    "DIRECTION_UNKNOWN",
    "FLIGHT_UNKNOWN",
    "OPERATOR_UNKNOWN",
    "TYPE_UNKNOWN",
]
