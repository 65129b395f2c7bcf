"""Data ingestors for SkyTally."""

from .adsb import ADSBIngestor
from .reference_tables import load_reference_tables

__all__ = ["ADSBIngestor", "load_reference_tables"]
