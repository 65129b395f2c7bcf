"""Response models exposing the sighting store over HTTP."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from skytally.domain.rarity import RarityDimension, RarityEvent
from skytally.domain.sighting import AircraftSighting


class SightingModel(BaseModel):
    """Current knowledge about one aircraft."""

    hex: str = Field(..., description="Transponder hex identifier")
    flight: str = Field(..., description="Last recorded flight number")
    registration: str = Field(default="", description="Aircraft registration")
    last_seen: datetime = Field(..., description="Time the aircraft was last heard")
    distance_km: Optional[float] = Field(
        default=None, description="Distance from the reference point in kilometers"
    )
    direction: str = Field(..., description="Compass sector from the reference point")
    type_short: str = Field(default="", description="Transmitted short type description")
    type_desc: str = Field(..., description="Canonical aircraft model")
    operator: str = Field(..., description="Resolved operator")
    country: str = Field(..., description="Resolved country of registration")
    info: str = Field(default="", description="Human-readable status line")

    @classmethod
    def from_sighting(cls, sighting: AircraftSighting) -> "SightingModel":
        return cls(
            hex=sighting.hex,
            flight=sighting.last_flight_no.strip(),
            registration=sighting.registration,
            last_seen=sighting.last_seen,
            distance_km=sighting.distance_km,
            direction=sighting.direction,
            type_short=sighting.type_short,
            type_desc=sighting.type_desc,
            operator=sighting.operator,
            country=sighting.country,
            info=sighting.info,
        )


class RarityEventModel(BaseModel):
    """A sighting that crossed a rarity threshold."""

    flag: str = Field(..., description="Rarity flag name, e.g. RARE_TYPE or TRIFECTA")
    dimensions: list[RarityDimension] = Field(
        default_factory=list, description="Dimensions that are rare"
    )
    sighting: SightingModel

    @classmethod
    def from_event(cls, event: RarityEvent) -> "RarityEventModel":
        return cls(
            flag=event.flag.name,
            dimensions=list(event.flag.dimensions),
            sighting=SightingModel.from_sighting(event.sighting),
        )


class IngestResponse(BaseModel):
    aircraft_count: int = Field(..., description="Aircraft in the ingested batch")
    events: list[RarityEventModel] = Field(default_factory=list)
    notified: int = Field(default=0, description="Notifications delivered")


class RankedCount(BaseModel):
    property: str
    count: int


class RarityRankingResponse(BaseModel):
    dimension: RarityDimension
    total: int = Field(..., description="Observations tallied for this dimension")
    ranking: list[RankedCount] = Field(
        default_factory=list, description="Least common first"
    )


class ExtremesResponse(BaseModel):
    fastest: Optional[str] = Field(default=None, description="Fastest aircraft ever seen")
    fastest_speed_kt: Optional[float] = None
    highest: Optional[str] = Field(default=None, description="Highest aircraft ever seen")
    highest_altitude_ft: Optional[float] = None


class SummaryResponse(BaseModel):
    is_warmup: bool
    rankings: dict[RarityDimension, list[RankedCount]] = Field(default_factory=dict)
    totals: dict[RarityDimension, int] = Field(default_factory=dict)
    fastest: Optional[str] = None
    highest: Optional[str] = None


__all__ = [
    "ExtremesResponse",
    "IngestResponse",
    "RankedCount",
    "RarityEventModel",
    "RarityRankingResponse",
    "SightingModel",
    "SummaryResponse",
]
