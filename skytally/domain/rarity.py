"""Rarity dimensions, flags and events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from skytally.domain.sighting import AircraftSighting
    from skytally.models.observation import AircraftObservation


class RarityDimension(str, Enum):
    """Independent categories an aircraft can be rare in."""

    TYPE = "type"
    OPERATOR = "operator"
    COUNTRY = "country"

    @property
    def bit(self) -> int:
        return _DIMENSION_BITS[self]


_DIMENSION_BITS = {
    RarityDimension.TYPE: 0b001,
    RarityDimension.OPERATOR: 0b010,
    RarityDimension.COUNTRY: 0b100,
}


class RarityFlag(int, Enum):
    """Combination of rare dimensions for a single sighting."""

    NO_RARITY = 0b000
    RARE_TYPE = 0b001
    RARE_OPERATOR = 0b010
    RARE_TYPE_AND_OPERATOR = 0b011
    RARE_COUNTRY = 0b100
    RARE_TYPE_AND_COUNTRY = 0b101
    RARE_OPERATOR_AND_COUNTRY = 0b110
    TRIFECTA = 0b111

    @classmethod
    def from_bits(cls, type_bit: int, operator_bit: int, country_bit: int) -> "RarityFlag":
        """Combine per-dimension classifier outputs (each 0 or 1) into a flag."""

        for bit in (type_bit, operator_bit, country_bit):
            if bit not in (0, 1):
                raise ValueError(f"Rarity bits must be 0 or 1, got {bit!r}")
        return cls(type_bit | operator_bit << 1 | country_bit << 2)

    def has(self, dimension: RarityDimension) -> bool:
        return bool(self.value & dimension.bit)

    @property
    def is_type_rare(self) -> bool:
        return self.has(RarityDimension.TYPE)

    @property
    def is_operator_rare(self) -> bool:
        return self.has(RarityDimension.OPERATOR)

    @property
    def is_country_rare(self) -> bool:
        return self.has(RarityDimension.COUNTRY)

    @property
    def dimensions(self) -> tuple[RarityDimension, ...]:
        return tuple(dim for dim in RarityDimension if self.has(dim))


@dataclass
class RarityEvent:
    """A sighting that crossed a rarity threshold in at least one dimension.

    The event only carries the flag and the sighting/observation pair it
    refers to; rendering a message is left to the notifier.
    """

    flag: RarityFlag
    sighting: "AircraftSighting"
    aircraft: "AircraftObservation"

    @property
    def hex(self) -> str:
        return self.sighting.hex


__all__ = ["RarityDimension", "RarityEvent", "RarityFlag"]
