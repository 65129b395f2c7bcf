"""Core domain types for SkyTally."""

from .errors import ReferenceTableError, SkyTallyError
from .rarity import RarityDimension, RarityEvent, RarityFlag
from .reference import HexRange, IcaoAircraft, IcaoOperator, ReferenceTables
from .sighting import AircraftSighting

__all__ = [
    "AircraftSighting",
    "HexRange",
    "IcaoAircraft",
    "IcaoOperator",
    "RarityDimension",
    "RarityEvent",
    "RarityFlag",
    "ReferenceTableError",
    "ReferenceTables",
    "SkyTallyError",
]
