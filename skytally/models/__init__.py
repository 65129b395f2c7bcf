"""Pydantic models for SkyTally."""

from .observation import AircraftBatch, AircraftObservation
from .traffic import (
    ExtremesResponse,
    IngestResponse,
    RankedCount,
    RarityEventModel,
    RarityRankingResponse,
    SightingModel,
    SummaryResponse,
)

__all__ = [
    "AircraftBatch",
    "AircraftObservation",
    "ExtremesResponse",
    "IngestResponse",
    "RankedCount",
    "RarityEventModel",
    "RarityRankingResponse",
    "SightingModel",
    "SummaryResponse",
]
