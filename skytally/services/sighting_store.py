"""Stateful aggregation of aircraft sightings, tallies and extremes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
import threading
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from skytally.domain.rarity import RarityDimension, RarityEvent, RarityFlag
from skytally.domain.reference import ReferenceTables
from skytally.domain.sighting import AircraftSighting, FLIGHT_UNKNOWN
from skytally.geo import Coordinates, direction, distance
from skytally.models.observation import AircraftBatch, AircraftObservation
from skytally.services.rarity import LogarithmicPolicy, RarityClassifier, RarityPolicy
from skytally.services.resolution import CategoryResolver

logger = logging.getLogger("skytally.sighting_store")


@dataclass(frozen=True)
class Extreme:
    """An all-time extreme observation with its status line at capture time."""

    aircraft: AircraftObservation
    status: str


@dataclass(frozen=True)
class StoreSnapshot:
    """Copy of the store state taken between ingest cycles."""

    taken_at: datetime
    sightings: tuple[AircraftSighting, ...]
    tallies: dict[RarityDimension, dict[str, int]]
    totals: dict[RarityDimension, int]
    fastest: Optional[Extreme]
    highest: Optional[Extreme]
    current_aircraft: tuple[AircraftObservation, ...]
    rare_sightings: tuple[RarityEvent, ...]
    is_warmup: bool


def describe_aircraft(aircraft: AircraftObservation, sighting: AircraftSighting) -> str:
    """One-line summary of the most relevant information about an aircraft."""

    dist = f"{sighting.distance_km:4.0f}" if sighting.distance_km is not None else " n/a"
    speed = f"{aircraft.ground_speed:3.0f}" if aircraft.ground_speed is not None else "n/a"
    heading_value = aircraft.track if aircraft.track is not None else aircraft.nav_heading
    heading = f"{heading_value:3.0f}" if heading_value is not None else "n/a"
    return (
        f"FNO {aircraft.flight_label} DST {dist} km ALT {aircraft.altitude_label} "
        f"SPD {speed} HDG {heading} TID {aircraft.description or sighting.type_desc} "
        f"({aircraft.registration})"
    )


class SightingStore:
    """Owns every sighting, the rarity tallies and the fastest/highest extremes.

    ``ingest`` is the single entry point. It is synchronous, performs no I/O
    and holds the store lock for the whole cycle, so ``snapshot`` never sees a
    half-processed batch.
    """

    def __init__(
        self,
        reference_lat: float,
        reference_lon: float,
        tables: ReferenceTables,
        *,
        policy: RarityPolicy | None = None,
        warmup: bool = True,
    ) -> None:
        self.reference = Coordinates(reference_lat, reference_lon)
        self.tables = tables
        self.classifier = RarityClassifier(
            CategoryResolver(tables), policy or LogarithmicPolicy()
        )
        self.fastest: Extreme | None = None
        self.highest: Extreme | None = None
        self.current_aircraft: list[AircraftObservation] = []
        self.rare_sightings: list[RarityEvent] = []
        self._sightings: dict[str, AircraftSighting] = {}
        self._is_warmup = warmup
        self._lock = threading.RLock()
        logger.info(
            "Sighting store initialized at lat=%.4f lon=%.4f",
            reference_lat,
            reference_lon,
        )

    @property
    def is_warmup(self) -> bool:
        return self._is_warmup

    def finish_warmup(self) -> None:
        with self._lock:
            if self._is_warmup:
                logger.info("Warm-up period finished; rarity notifications enabled")
            self._is_warmup = False

    def get_sighting(self, hex_id: str) -> AircraftSighting | None:
        with self._lock:
            sighting = self._sightings.get(hex_id)
            return sighting.copy() if sighting else None

    def tally(self, dimension: RarityDimension) -> dict[str, int]:
        with self._lock:
            return dict(self.classifier.tallies[dimension].counts)

    def total(self, dimension: RarityDimension) -> int:
        with self._lock:
            return self.classifier.tallies[dimension].total

    def ingest_payload(self, raw: Union[bytes, str, dict[str, Any]]) -> list[RarityEvent]:
        """Validate a raw aggregator payload and ingest it.

        A malformed payload is logged and treated as an empty batch.
        """

        try:
            if isinstance(raw, (bytes, str)):
                raw = json.loads(raw)
            batch = AircraftBatch.model_validate(raw)
        except (ValueError, ValidationError) as exc:
            logger.warning("Failed to parse aircraft payload: %s", exc)
            return []
        return self.ingest(batch)

    def ingest(
        self,
        batch: Union[AircraftBatch, Iterable[AircraftObservation]],
        *,
        now: datetime | None = None,
    ) -> list[RarityEvent]:
        if isinstance(batch, AircraftBatch):
            now = now or batch.generated_at
            observations = list(batch.aircraft)
        else:
            observations = list(batch)

        if not observations:
            return []

        now = now or datetime.now(tz=timezone.utc)
        # Stable, so aircraft sharing a flight number keep their batch order.
        observations.sort(key=lambda aircraft: aircraft.flight)

        events: list[RarityEvent] = []
        with self._lock:
            self.current_aircraft = observations
            for aircraft in observations:
                event = self._process(aircraft, now)
                if event is not None:
                    events.append(event)
            self.rare_sightings = events
            logger.debug(
                "Ingested %s aircraft, %s rarity events, %s known sightings",
                len(observations),
                len(events),
                len(self._sightings),
            )
        return events

    def _process(self, aircraft: AircraftObservation, now: datetime) -> RarityEvent | None:
        sighting = self._sightings.get(aircraft.hex)
        exists = sighting is not None
        if sighting is None:
            sighting = AircraftSighting(
                hex=aircraft.hex,
                last_seen=aircraft.seen_at(now),
                registration=aircraft.registration,
            )
        else:
            sighting.last_seen = aircraft.seen_at(now)

        if not sighting.registration:
            sighting.registration = aircraft.registration
        if not sighting.type_short and aircraft.description:
            sighting.type_short = aircraft.description

        is_new_flight = self._update_flight_number(sighting, aircraft, exists)

        if aircraft.has_position:
            sighting.latitude = aircraft.lat
            sighting.longitude = aircraft.lon
            sighting.distance_km = distance(
                self.reference, Coordinates(aircraft.lat, aircraft.lon)
            ).kilometers()
            sighting.direction = direction(
                self.reference.latitude, self.reference.longitude, aircraft.lat, aircraft.lon
            )

        flag = RarityFlag.from_bits(
            self.classifier.classify(RarityDimension.TYPE, aircraft, sighting, is_new_flight),
            self.classifier.classify(RarityDimension.OPERATOR, aircraft, sighting, is_new_flight),
            self.classifier.classify(RarityDimension.COUNTRY, aircraft, sighting, is_new_flight),
        )

        # Rendered after classification so the line carries the resolved type.
        sighting.info = describe_aircraft(aircraft, sighting)
        self._update_extremes(aircraft, sighting)
        self._sightings[aircraft.hex] = sighting

        if flag is RarityFlag.NO_RARITY:
            return None
        # Events keep a copy so later cycles cannot rewrite what was reported.
        return RarityEvent(flag=flag, sighting=sighting.copy(), aircraft=aircraft)

    @staticmethod
    def _update_flight_number(
        sighting: AircraftSighting, aircraft: AircraftObservation, exists: bool
    ) -> bool:
        """Record the flight number and report whether this is a new flight.

        A flight number appearing for the first time only fills in the gap. A
        known flight number changing to another known one means the aircraft
        departed again and is re-evaluated.
        """

        this_flight = aircraft.flight_label
        previous = sighting.last_flight_no
        is_identified = previous == FLIGHT_UNKNOWN and this_flight != FLIGHT_UNKNOWN
        is_updated = (
            previous != FLIGHT_UNKNOWN
            and this_flight != FLIGHT_UNKNOWN
            and previous != this_flight
        )
        if is_identified or is_updated:
            sighting.last_flight_no = this_flight
        return not exists or is_updated

    def _update_extremes(self, aircraft: AircraftObservation, sighting: AircraftSighting) -> None:
        altitude = aircraft.altitude_ft
        if altitude is not None and (
            self.highest is None or altitude > self.highest.aircraft.altitude_ft
        ):
            self.highest = Extreme(aircraft=aircraft, status=sighting.info)

        speed = aircraft.ground_speed
        if speed is not None and (
            self.fastest is None or speed > self.fastest.aircraft.ground_speed
        ):
            self.fastest = Extreme(aircraft=aircraft, status=sighting.info)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            tallies = self.classifier.tallies
            return StoreSnapshot(
                taken_at=datetime.now(tz=timezone.utc),
                sightings=tuple(sighting.copy() for sighting in self._sightings.values()),
                tallies={dim: dict(tally.counts) for dim, tally in tallies.items()},
                totals={dim: tally.total for dim, tally in tallies.items()},
                fastest=self.fastest,
                highest=self.highest,
                current_aircraft=tuple(self.current_aircraft),
                rare_sightings=tuple(self.rare_sightings),
                is_warmup=self._is_warmup,
            )


__all__ = ["Extreme", "SightingStore", "StoreSnapshot", "describe_aircraft"]
