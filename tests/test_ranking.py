from datetime import datetime, timezone

from skytally.domain.rarity import RarityDimension
from skytally.models.observation import AircraftObservation
from skytally.services.ranking import (
    PropertyCount,
    TrafficSummary,
    build_summary,
    rank_by_rarity,
    render_summary,
)
from skytally.services.rarity import RatioPolicy
from skytally.services.sighting_store import SightingStore


def test_rank_by_rarity_orders_least_common_first():
    ranking = rank_by_rarity({"BOEING, 737-800": 12, "AIRBUS, A-380-800": 1, "ATR, 72": 1})

    assert ranking == [
        PropertyCount("AIRBUS, A-380-800", 1),
        PropertyCount("ATR, 72", 1),
        PropertyCount("BOEING, 737-800", 12),
    ]


def test_render_empty_summary():
    lines = render_summary(TrafficSummary())

    assert lines == [
        "=== Summary ===",
        "Rarity from least to most common aircraft",
        "Rarity from least to most common operator",
        "Rarity from least to most common country",
        "Fastest Aircraft:",
        "none seen yet",
        "Highest Aircraft:",
        "none seen yet",
        "=== End Summary ===",
    ]


def test_summary_from_store(tables):
    store = SightingStore(1.359297, 103.989348, tables, policy=RatioPolicy())
    now = datetime(2024, 5, 3, 12, 0, tzinfo=timezone.utc)
    store.ingest(
        [
            AircraftObservation.model_validate(
                {"hex": "7c0001", "flight": "QFA1", "t": "B738", "gs": 450, "alt_baro": 37000}
            ),
            AircraftObservation.model_validate(
                {"hex": "7c0002", "flight": "QFA2", "t": "B738", "gs": 430, "alt_baro": 39000}
            ),
            AircraftObservation.model_validate({"hex": "760001", "flight": "SIA22", "t": "A388"}),
        ],
        now=now,
    )

    summary = build_summary(store.snapshot())

    assert summary.rankings[RarityDimension.TYPE] == [
        PropertyCount("AIRBUS, A-380-800", 1),
        PropertyCount("BOEING, 737-800", 2),
    ]
    assert summary.totals[RarityDimension.COUNTRY] == 3
    assert "FNO QFA1" in summary.fastest
    assert "FNO QFA2" in summary.highest

    lines = render_summary(summary)
    assert "     1 - AIRBUS, A-380-800" in lines
    assert "     2 - Qantas Airways" in lines
    assert lines[-1] == "=== End Summary ==="
