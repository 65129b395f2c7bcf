"""Models for aircraft observations ingested from ADS-B aggregators."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skytally.domain.sighting import FLIGHT_UNKNOWN

ALTITUDE_UNKNOWN = "  n/a"


class AircraftObservation(BaseModel):
    """One aircraft as reported in a single batch.

    Field aliases follow the readsb/ADSBExchange v2 JSON names.
    """

    hex: str = Field(..., description="24-bit transponder address as hex string")
    flight: str = Field(default="", description="Flight number, may be blank")
    alt_baro: Union[float, str, None] = Field(
        default=None, description="Barometric altitude in feet or the string 'ground'"
    )
    ground_speed: Optional[float] = Field(
        default=None, alias="gs", description="Ground speed in knots"
    )
    lat: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    seen: float = Field(
        default=0.0, description="Seconds between the last message and batch generation"
    )
    description: str = Field(
        default="", alias="desc", description="Short aircraft type description"
    )
    own_op: str = Field(
        default="", alias="ownOp", description="Owner or operator, only rarely set"
    )
    type_code: str = Field(default="", alias="t", description="ICAO aircraft type code")
    registration: str = Field(default="", alias="r", description="Aircraft registration")
    squawk: Optional[str] = Field(default=None, description="Mode A code")
    track: Optional[float] = Field(default=None, description="True track over ground")
    nav_heading: Optional[float] = Field(default=None, description="Selected heading")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("flight", "description", "own_op", "type_code", "registration", mode="before")
    @classmethod
    def _none_to_blank(cls, value):
        return "" if value is None else value

    @property
    def flight_label(self) -> str:
        """Flight number, or the padded 'unknown' sentinel when not transmitted."""

        return self.flight if self.flight else FLIGHT_UNKNOWN

    @property
    def operator_code(self) -> Optional[str]:
        """Flight number with whitespace and digits removed.

        For airline flights this is the three-letter ICAO code, for military,
        government and private flights it is an arbitrary-length callsign stem.
        """

        if not self.flight:
            return None
        return "".join(ch for ch in self.flight.strip() if not ch.isdigit())

    @property
    def altitude_ft(self) -> Optional[float]:
        if isinstance(self.alt_baro, (int, float)) and not isinstance(self.alt_baro, bool):
            return float(self.alt_baro)
        return None

    @property
    def altitude_label(self) -> str:
        altitude = self.altitude_ft
        if altitude is not None:
            return f"{altitude:5.0f}"
        if isinstance(self.alt_baro, str):
            return self.alt_baro
        return ALTITUDE_UNKNOWN

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lon is not None

    def seen_at(self, now: Optional[datetime] = None) -> datetime:
        reference = now or datetime.now(tz=timezone.utc)
        return reference - timedelta(seconds=self.seen)


class AircraftBatch(BaseModel):
    """Payload returned by an aggregator for aircraft within a given distance."""

    now: Optional[float] = Field(
        default=None, description="Generation time of this payload in ms since epoch"
    )
    result_count: Optional[int] = Field(
        default=None, alias="resultCount", description="Number of aircraft returned"
    )
    ptime: Optional[float] = Field(default=None, description="Server processing time in ms")
    aircraft: list[AircraftObservation] = Field(
        default_factory=list, description="Aircraft observations"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("aircraft", mode="before")
    @classmethod
    def _null_aircraft(cls, value):
        return [] if value is None else value

    @property
    def generated_at(self) -> Optional[datetime]:
        if self.now is None:
            return None
        return datetime.fromtimestamp(self.now / 1000.0, tz=timezone.utc)


__all__ = ["ALTITUDE_UNKNOWN", "AircraftBatch", "AircraftObservation"]
