"""Traffic endpoints over the sighting store."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from skytally.domain.rarity import RarityDimension
from skytally.models import (
    AircraftBatch,
    ExtremesResponse,
    IngestResponse,
    RankedCount,
    RarityEventModel,
    RarityRankingResponse,
    SightingModel,
    SummaryResponse,
)
from skytally.services.notifier import RarityNotifier
from skytally.services.ranking import build_summary, rank_by_rarity
from skytally.services.sighting_store import SightingStore

router = APIRouter(prefix="/api/v1", tags=["traffic"])

logger = logging.getLogger("skytally.api.traffic")


def get_store(request: Request) -> SightingStore:
    store: SightingStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sighting store is not ready",
        )
    return store


def get_notifier(request: Request) -> RarityNotifier | None:
    return getattr(request.app.state, "notifier", None)


def _distance_key(sighting: SightingModel) -> tuple[bool, float]:
    # Aircraft without a known position sort last.
    return (sighting.distance_km is None, sighting.distance_km or 0.0)


@router.get("/traffic", response_model=list[SightingModel], summary="List sightings")
def list_traffic(store: SightingStore = Depends(get_store)) -> list[SightingModel]:
    """Every aircraft seen so far, nearest first."""

    snapshot = store.snapshot()
    sightings = [SightingModel.from_sighting(sighting) for sighting in snapshot.sightings]
    return sorted(sightings, key=_distance_key)


@router.post(
    "/traffic",
    response_model=IngestResponse,
    summary="Push an aircraft batch",
)
async def push_traffic(
    batch: AircraftBatch,
    store: SightingStore = Depends(get_store),
    notifier: RarityNotifier | None = Depends(get_notifier),
) -> IngestResponse:
    """Ingest a batch in the aggregator format and return the rarity events it raised."""

    events = store.ingest(batch)
    notified = 0
    if notifier is not None:
        notified = await notifier.notify(events, warmup=store.is_warmup)
    logger.info(
        "Ingested pushed batch of %s aircraft, %s rarity events",
        len(batch.aircraft),
        len(events),
    )
    return IngestResponse(
        aircraft_count=len(batch.aircraft),
        events=[RarityEventModel.from_event(event) for event in events],
        notified=notified,
    )


@router.get(
    "/rarities/{dimension}",
    response_model=RarityRankingResponse,
    summary="Rank a dimension from least to most common",
)
def get_rarities(
    dimension: RarityDimension, store: SightingStore = Depends(get_store)
) -> RarityRankingResponse:
    snapshot = store.snapshot()
    ranking = rank_by_rarity(snapshot.tallies.get(dimension, {}))
    return RarityRankingResponse(
        dimension=dimension,
        total=snapshot.totals.get(dimension, 0),
        ranking=[RankedCount(property=entry.property, count=entry.count) for entry in ranking],
    )


@router.get("/extremes", response_model=ExtremesResponse, summary="Fastest and highest")
def get_extremes(store: SightingStore = Depends(get_store)) -> ExtremesResponse:
    snapshot = store.snapshot()
    fastest, highest = snapshot.fastest, snapshot.highest
    return ExtremesResponse(
        fastest=fastest.status if fastest else None,
        fastest_speed_kt=fastest.aircraft.ground_speed if fastest else None,
        highest=highest.status if highest else None,
        highest_altitude_ft=highest.aircraft.altitude_ft if highest else None,
    )


@router.get("/summary", response_model=SummaryResponse, summary="Traffic summary")
def get_summary(store: SightingStore = Depends(get_store)) -> SummaryResponse:
    snapshot = store.snapshot()
    summary = build_summary(snapshot)
    return SummaryResponse(
        is_warmup=snapshot.is_warmup,
        rankings={
            dimension: [
                RankedCount(property=entry.property, count=entry.count) for entry in ranking
            ]
            for dimension, ranking in summary.rankings.items()
        },
        totals=summary.totals,
        fastest=summary.fastest,
        highest=summary.highest,
    )


__all__ = ["get_notifier", "get_store", "router"]
