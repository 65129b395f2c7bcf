"""Rarity thresholds, tallies and the per-dimension classifier."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Protocol

from skytally.domain.rarity import RarityDimension
from skytally.domain.sighting import AircraftSighting
from skytally.models.observation import AircraftObservation
from skytally.services.resolution import CategoryResolver

logger = logging.getLogger("skytally.rarity")

DEFAULT_LOG_CONSTANT = 6.0
DEFAULT_RATIO = 0.001


class RarityPolicy(Protocol):
    """Decides whether a category seen ``count`` times out of ``total`` is rare."""

    def is_rare(self, count: int, total: int) -> bool:
        ...


@dataclass(frozen=True)
class RatioPolicy:
    """Rare while the category's share of all observations stays below ``ratio``."""

    ratio: float = DEFAULT_RATIO

    def is_rare(self, count: int, total: int) -> bool:
        if total <= 0:
            return False
        return count / total < self.ratio


@dataclass(frozen=True)
class LogarithmicPolicy:
    """Rare while the count stays below ``ln(total) - constant``.

    The bar grows with the logarithm of traffic volume, so nothing is rare
    until roughly ``e ** constant`` observations have been tallied.
    """

    constant: float = DEFAULT_LOG_CONSTANT

    def is_rare(self, count: int, total: int) -> bool:
        if total <= 0:
            return False
        return count < math.log(total) - self.constant


def build_policy(name: str, *, log_constant: float, ratio: float) -> RarityPolicy:
    normalized = name.strip().lower()
    if normalized in {"log", "logarithmic"}:
        return LogarithmicPolicy(constant=log_constant)
    if normalized == "ratio":
        return RatioPolicy(ratio=ratio)
    raise ValueError(f"Unsupported rarity policy: {name}")


@dataclass
class RarityTally:
    """Running observation counts for one dimension. Never decremented."""

    counts: dict[str, int] = field(default_factory=dict)
    total: int = 0

    def record(self, value: str) -> int:
        count = self.counts.get(value, 0) + 1
        self.counts[value] = count
        self.total += 1
        return count


class RarityClassifier:
    """Counts resolved category values and reports threshold crossings."""

    def __init__(self, resolver: CategoryResolver, policy: RarityPolicy) -> None:
        self.resolver = resolver
        self.policy = policy
        self.tallies: dict[RarityDimension, RarityTally] = {
            dimension: RarityTally() for dimension in RarityDimension
        }

    def classify(
        self,
        dimension: RarityDimension,
        aircraft: AircraftObservation,
        sighting: AircraftSighting,
        is_new_flight: bool,
    ) -> int:
        """Return 1 if this sighting makes its ``dimension`` value rare, else 0."""

        # Same flight seen again, it was counted the first time round.
        if sighting.is_resolved(dimension) and not is_new_flight:
            return 0

        value = self.resolver.resolve(dimension, aircraft)
        if value is None:
            return 0

        sighting.set_value(dimension, value)
        tally = self.tallies[dimension]
        count = tally.record(value)
        is_rare = self.policy.is_rare(count, tally.total)

        logger.debug(
            "%s rarity: value=%s count=%s total=%s rare=%s",
            dimension.value,
            value,
            count,
            tally.total,
            is_rare,
        )
        return 1 if is_rare else 0


__all__ = [
    "LogarithmicPolicy",
    "RarityClassifier",
    "RarityPolicy",
    "RarityTally",
    "RatioPolicy",
    "build_policy",
]
