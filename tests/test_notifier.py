import json
import logging
from datetime import datetime, timezone

import httpx
import pytest

from skytally.domain.rarity import RarityEvent, RarityFlag
from skytally.domain.sighting import AircraftSighting
from skytally.models.observation import AircraftObservation
from skytally.services.notifier import (
    LogSink,
    Notification,
    RarityNotifier,
    WebhookSink,
    render_notification,
)


def _event(flag: RarityFlag) -> RarityEvent:
    sighting = AircraftSighting(
        hex="760001",
        last_seen=datetime(2024, 5, 3, 12, 0, tzinfo=timezone.utc),
        last_flight_no="SIA22",
        registration="9V-SKA",
        distance_km=42.0,
        direction="NE",
        type_short="A388",
        type_desc="AIRBUS, A-380-800",
        operator="Singapore Airlines",
        country="SINGAPORE",
    )
    aircraft = AircraftObservation.model_validate({"hex": "760001", "flight": "SIA22"})
    return RarityEvent(flag=flag, sighting=sighting, aircraft=aircraft)


class RecordingSink:
    def __init__(self) -> None:
        self.delivered: list[Notification] = []

    async def deliver(self, notification: Notification) -> None:
        self.delivered.append(notification)


class FailingSink:
    async def deliver(self, notification: Notification) -> None:
        raise RuntimeError("channel down")


@pytest.mark.parametrize(
    "flag, title",
    [
        (RarityFlag.RARE_TYPE, "Rare Aircraft Type Spotted"),
        (RarityFlag.RARE_OPERATOR, "Rare Operator Spotted"),
        (RarityFlag.RARE_COUNTRY, "Rare Aircraft Country Spotted"),
        (RarityFlag.RARE_TYPE_AND_OPERATOR, "Rare Type & Operator Spotted"),
        (RarityFlag.RARE_TYPE_AND_COUNTRY, "Rare Type & Country Spotted"),
        (RarityFlag.RARE_OPERATOR_AND_COUNTRY, "Rare Operator & Country Spotted"),
        (RarityFlag.TRIFECTA, "TRIFECTA Spotted!"),
    ],
)
def test_render_notification_titles(flag, title):
    notification = render_notification(_event(flag))

    assert notification.title == title
    assert notification.flag is flag
    assert notification.hex == "760001"
    assert notification.body.endswith(" 42 km NE")


def test_trifecta_body_names_every_dimension():
    body = render_notification(_event(RarityFlag.TRIFECTA)).body

    assert "A388 (9V-SKA)" in body
    assert "Singapore Airlines" in body
    assert "SINGAPORE" in body


def test_no_rarity_is_not_renderable():
    with pytest.raises(ValueError):
        render_notification(_event(RarityFlag.NO_RARITY))


@pytest.mark.anyio
async def test_notifications_are_suppressed_during_warmup(caplog):
    sink = RecordingSink()
    notifier = RarityNotifier([sink])

    with caplog.at_level(logging.INFO, logger="skytally.notifier"):
        delivered = await notifier.notify([_event(RarityFlag.RARE_TYPE)], warmup=True)

    assert delivered == 0
    assert sink.delivered == []
    # Still visible in the log while warming up.
    assert "Rare Aircraft Type Spotted" in caplog.text
    assert "AIRBUS, A-380-800 (9V-SKA)" in caplog.text


@pytest.mark.anyio
async def test_failing_sink_does_not_stop_delivery(caplog):
    sink = RecordingSink()
    notifier = RarityNotifier([FailingSink(), sink])
    events = [_event(RarityFlag.RARE_TYPE), _event(RarityFlag.RARE_COUNTRY)]

    with caplog.at_level(logging.WARNING, logger="skytally.notifier"):
        delivered = await notifier.notify(events, warmup=False)

    assert delivered == 2
    assert [n.flag for n in sink.delivered] == [RarityFlag.RARE_TYPE, RarityFlag.RARE_COUNTRY]
    assert "channel down" in caplog.text


@pytest.mark.anyio
async def test_log_sink_writes_notification(caplog):
    notifier = RarityNotifier()
    assert isinstance(notifier.sinks[0], LogSink)

    with caplog.at_level(logging.INFO, logger="skytally.notifications"):
        delivered = await notifier.notify([_event(RarityFlag.TRIFECTA)], warmup=False)

    assert delivered == 1
    assert "TRIFECTA Spotted!" in caplog.text


@pytest.mark.anyio
async def test_webhook_sink_posts_json():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request):
        captured.append(request)
        return httpx.Response(204)

    sink = WebhookSink("https://hooks.example.test/rare", transport=httpx.MockTransport(handler))

    await sink.deliver(render_notification(_event(RarityFlag.RARE_OPERATOR)))

    assert len(captured) == 1
    body = json.loads(captured[0].content)
    assert body["title"] == "Rare Operator Spotted"
    assert body["flag"] == "RARE_OPERATOR"
    assert body["hex"] == "760001"


@pytest.mark.anyio
async def test_webhook_error_is_counted_as_failure():
    def handler(request: httpx.Request):
        return httpx.Response(500, text="boom")

    sink = WebhookSink("https://hooks.example.test/rare", transport=httpx.MockTransport(handler))
    notifier = RarityNotifier([sink])

    delivered = await notifier.notify([_event(RarityFlag.RARE_TYPE)], warmup=False)

    assert delivered == 0
