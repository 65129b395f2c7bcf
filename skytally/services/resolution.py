"""Resolve the type, operator and country of an observed aircraft."""

from __future__ import annotations

import logging
from typing import Optional

from skytally.domain.rarity import RarityDimension
from skytally.domain.reference import ReferenceTables
from skytally.models.observation import AircraftObservation

logger = logging.getLogger("skytally.resolution")


class CategoryResolver:
    """Ordered fallback chains over the reference tables.

    Every ``resolve_*`` method returns ``None`` when the value cannot be
    determined; the caller must not count unresolved values.
    """

    def __init__(self, tables: ReferenceTables) -> None:
        self.tables = tables
        # Longest prefixes first so "VP-B" wins over "VP" and matching is deterministic.
        self._prefixes = sorted(
            (prefix for prefix in tables.registration_prefixes if prefix),
            key=lambda prefix: (-len(prefix), prefix),
        )

    def resolve(self, dimension: RarityDimension, aircraft: AircraftObservation) -> Optional[str]:
        if dimension is RarityDimension.TYPE:
            return self.resolve_type(aircraft)
        if dimension is RarityDimension.OPERATOR:
            return self.resolve_operator(aircraft)
        return self.resolve_country(aircraft)

    def resolve_type(self, aircraft: AircraftObservation) -> Optional[str]:
        """Canonical manufacturer/model name for the aircraft's type code."""

        record = self.tables.aircraft_types.get(aircraft.type_code)
        if record is None or not record.make:
            return None
        return record.make

    def resolve_operator(self, aircraft: AircraftObservation) -> Optional[str]:
        code = aircraft.operator_code
        if code is None:
            return None

        airline = self.tables.operators.get(code) if code else None
        if airline is not None and airline.company:
            return airline.company

        military = self.tables.military_codes.get(code) if code else None
        if military:
            return military

        if aircraft.own_op:
            return aircraft.own_op
        return None

    def resolve_country(self, aircraft: AircraftObservation) -> Optional[str]:
        code = aircraft.operator_code
        if code:
            airline = self.tables.operators.get(code)
            # Only when the operator itself came from the airline table.
            if airline is not None and airline.company and airline.country:
                return airline.country.upper()

        country = self.country_by_hex(aircraft.hex)
        if country:
            return country.upper()

        country = self.country_by_registration(aircraft.registration)
        if country:
            return country.upper()
        return None

    def country_by_hex(self, hex_id: str) -> Optional[str]:
        try:
            value = int(hex_id.strip(), 16)
        except ValueError:
            logger.warning("Unable to convert hex to int: %r", hex_id)
            return None

        for hex_range, country in self.tables.hex_ranges.items():
            if value in hex_range:
                return country
        return None

    def country_by_registration(self, registration: str) -> Optional[str]:
        if not registration:
            return None
        for prefix in self._prefixes:
            if prefix in registration:
                return self.tables.registration_prefixes[prefix]
        return None


__all__ = ["CategoryResolver"]
