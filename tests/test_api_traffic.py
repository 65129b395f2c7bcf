import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from skytally.api.traffic import get_rarities
from skytally.config import settings
from skytally.domain.errors import ReferenceTableError
from skytally.domain.rarity import RarityDimension
from skytally.main import app, lifespan
from skytally.services.sighting_store import SightingStore

BATCH = {
    "now": 1714765200000,
    "resultCount": 4,
    "aircraft": [
        {"hex": "7c0001", "flight": "QFA1", "t": "B738", "gs": 440, "alt_baro": 38000,
         "lat": 1.9, "lon": 104.5},
        {"hex": "7c0002", "flight": "QFA2", "t": "B738", "gs": 410, "alt_baro": 41000,
         "lat": 1.4, "lon": 104.0},
        {"hex": "7c0003", "flight": "QFA3", "t": "B738", "alt_baro": "ground"},
        {"hex": "760001", "flight": "SIA22", "t": "A388", "r": "9V-SKA", "gs": 470,
         "lat": 1.3, "lon": 103.5},
    ],
}


@pytest.fixture
def client(monkeypatch, reference_dir):
    monkeypatch.setattr(settings, "data_dir", str(reference_dir))
    monkeypatch.setattr(settings, "enable_tracker", False)
    monkeypatch.setattr(settings, "warmup_minutes", 0)
    monkeypatch.setattr(settings, "rarity_policy", "ratio")
    monkeypatch.setattr(settings, "rarity_ratio", 0.3)
    monkeypatch.setattr(settings, "notify_webhook_url", None)

    with TestClient(app) as test_client:
        yield test_client


def test_health_check(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_push_traffic_returns_rarity_events(client):
    response = client.post("/api/v1/traffic", json=BATCH)

    assert response.status_code == 200
    data = response.json()
    assert data["aircraft_count"] == 4
    assert [event["flag"] for event in data["events"]] == ["TRIFECTA"]
    event = data["events"][0]
    assert event["dimensions"] == ["type", "operator", "country"]
    assert event["sighting"]["hex"] == "760001"
    assert event["sighting"]["country"] == "SINGAPORE"
    assert data["notified"] == 1


def test_push_rejects_invalid_batch(client):
    response = client.post("/api/v1/traffic", json={"aircraft": [{"flight": "QFA1"}]})

    assert response.status_code == 422


def test_traffic_is_sorted_by_distance(client):
    client.post("/api/v1/traffic", json=BATCH)

    response = client.get("/api/v1/traffic")

    assert response.status_code == 200
    hexes = [sighting["hex"] for sighting in response.json()]
    assert hexes == ["7c0002", "760001", "7c0001", "7c0003"]
    assert response.json()[-1]["distance_km"] is None


def test_rarities_endpoint(client):
    client.post("/api/v1/traffic", json=BATCH)

    response = client.get("/api/v1/rarities/operator")

    assert response.status_code == 200
    data = response.json()
    assert data["dimension"] == "operator"
    assert data["total"] == 4
    assert data["ranking"] == [
        {"property": "Singapore Airlines", "count": 1},
        {"property": "Qantas Airways", "count": 3},
    ]


def test_rarities_rejects_unknown_dimension(client):
    response = client.get("/api/v1/rarities/colour")

    assert response.status_code == 422


def test_extremes_endpoint(client):
    empty = client.get("/api/v1/extremes").json()
    assert empty["fastest"] is None
    assert empty["highest"] is None

    client.post("/api/v1/traffic", json=BATCH)
    data = client.get("/api/v1/extremes").json()

    assert data["fastest_speed_kt"] == 470
    assert "FNO SIA22" in data["fastest"]
    assert data["highest_altitude_ft"] == 41000
    assert "FNO QFA2" in data["highest"]


def test_summary_endpoint(client):
    client.post("/api/v1/traffic", json=BATCH)

    data = client.get("/api/v1/summary").json()

    assert data["is_warmup"] is False
    assert data["totals"]["type"] == 4
    assert data["rankings"]["country"][0] == {"property": "SINGAPORE", "count": 1}


@pytest.mark.anyio
async def test_startup_fails_without_reference_tables(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path))
    monkeypatch.setattr(settings, "enable_tracker", False)

    with pytest.raises(ReferenceTableError):
        async with lifespan(FastAPI()):
            pass


class SnapshotOnlyStore:
    """Exposes nothing but ``snapshot``, so ranking and total come from one read."""

    def __init__(self, store):
        self._store = store
        self.snapshots = 0

    def snapshot(self):
        self.snapshots += 1
        return self._store.snapshot()


def test_rarities_ranking_and_total_come_from_one_snapshot(tables):
    store = SightingStore(1.359297, 103.989348, tables)
    store.ingest_payload(BATCH)
    wrapped = SnapshotOnlyStore(store)

    response = get_rarities(RarityDimension.TYPE, store=wrapped)

    assert wrapped.snapshots == 1
    assert response.total == 4
    assert [entry.count for entry in response.ranking] == [1, 3]
