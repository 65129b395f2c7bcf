"""Rank tallies from least to most common and shape periodic summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from skytally.domain.rarity import RarityDimension
from skytally.services.sighting_store import StoreSnapshot

_SUMMARY_LABELS = {
    RarityDimension.TYPE: "aircraft",
    RarityDimension.OPERATOR: "operator",
    RarityDimension.COUNTRY: "country",
}


@dataclass(frozen=True)
class PropertyCount:
    property: str
    count: int


@dataclass
class TrafficSummary:
    """Ranked tallies plus the all-time extremes."""

    rankings: dict[RarityDimension, list[PropertyCount]] = field(default_factory=dict)
    totals: dict[RarityDimension, int] = field(default_factory=dict)
    fastest: Optional[str] = None
    highest: Optional[str] = None


def rank_by_rarity(counts: Mapping[str, int]) -> list[PropertyCount]:
    """Least common first; ties ordered by name so the output is stable."""

    return [
        PropertyCount(property=name, count=count)
        for name, count in sorted(counts.items(), key=lambda item: (item[1], item[0]))
    ]


def build_summary(snapshot: StoreSnapshot) -> TrafficSummary:
    return TrafficSummary(
        rankings={
            dimension: rank_by_rarity(snapshot.tallies.get(dimension, {}))
            for dimension in RarityDimension
        },
        totals=dict(snapshot.totals),
        fastest=snapshot.fastest.status if snapshot.fastest else None,
        highest=snapshot.highest.status if snapshot.highest else None,
    )


def render_summary(summary: TrafficSummary) -> list[str]:
    lines = ["=== Summary ==="]
    for dimension in RarityDimension:
        lines.append(f"Rarity from least to most common {_SUMMARY_LABELS[dimension]}")
        lines.extend(
            f"{entry.count:6d} - {entry.property}"
            for entry in summary.rankings.get(dimension, [])
        )
    lines.append("Fastest Aircraft:")
    lines.append(summary.fastest or "none seen yet")
    lines.append("Highest Aircraft:")
    lines.append(summary.highest or "none seen yet")
    lines.append("=== End Summary ===")
    return lines


__all__ = [
    "PropertyCount",
    "TrafficSummary",
    "build_summary",
    "rank_by_rarity",
    "render_summary",
]
