"""Static reference tables used to resolve type, operator and country."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class IcaoAircraft:
    """Aircraft type record keyed by ICAO type designator."""

    aircraft_class: str
    engine: str
    make: str


@dataclass(frozen=True)
class IcaoOperator:
    """Airline record keyed by three-letter ICAO code."""

    company: str
    country: str


@dataclass(frozen=True)
class HexRange:
    """Numeric range of 24-bit transponder addresses assigned to a country.

    Both bounds are excluded from the range.
    """

    lower_bound: int
    upper_bound: int

    def __contains__(self, value: int) -> bool:
        return self.lower_bound < value < self.upper_bound


@dataclass
class ReferenceTables:
    """Already-parsed lookup structures injected into the sighting store."""

    aircraft_types: dict[str, IcaoAircraft] = field(default_factory=dict)
    operators: dict[str, IcaoOperator] = field(default_factory=dict)
    hex_ranges: dict[HexRange, str] = field(default_factory=dict)
    registration_prefixes: dict[str, str] = field(default_factory=dict)
    military_codes: dict[str, str] = field(default_factory=dict)


__all__ = ["HexRange", "IcaoAircraft", "IcaoOperator", "ReferenceTables"]
