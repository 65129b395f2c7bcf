"""Render rarity events into notifications and deliver them to sinks."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Protocol, Sequence

import httpx

from skytally.domain.rarity import RarityEvent, RarityFlag
from skytally.domain.sighting import AircraftSighting

logger = logging.getLogger("skytally.notifier")


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    flag: RarityFlag
    hex: str


class NotificationSink(Protocol):
    async def deliver(self, notification: Notification) -> None:
        ...


def _position(sighting: AircraftSighting) -> str:
    if sighting.distance_km is None:
        return f"n/a {sighting.direction}"
    return f"{sighting.distance_km:3.0f} km {sighting.direction}"


def render_notification(event: RarityEvent) -> Notification:
    """Build the title and body for one rarity event."""

    sighting = event.sighting
    flag = event.flag
    position = _position(sighting)
    aircraft = f"{sighting.type_desc} ({sighting.registration})"

    if flag is RarityFlag.RARE_TYPE:
        title = "Rare Aircraft Type Spotted"
        body = f"{aircraft}\n{position}"
    elif flag is RarityFlag.RARE_OPERATOR:
        title = "Rare Operator Spotted"
        body = f"{sighting.operator} flying {aircraft}\n{position}"
    elif flag is RarityFlag.RARE_COUNTRY:
        title = "Rare Aircraft Country Spotted"
        body = f"{sighting.country}-based {aircraft}\n{position}"
    elif flag is RarityFlag.RARE_TYPE_AND_OPERATOR:
        title = "Rare Type & Operator Spotted"
        body = f"{aircraft} operated by\n{sighting.operator}\n{position}"
    elif flag is RarityFlag.RARE_TYPE_AND_COUNTRY:
        title = "Rare Type & Country Spotted"
        body = f"{aircraft} registered in\n{sighting.country}\n{position}"
    elif flag is RarityFlag.RARE_OPERATOR_AND_COUNTRY:
        title = "Rare Operator & Country Spotted"
        body = (
            f"{sighting.operator}\nflying aircraft registered in\n"
            f"{sighting.country}\n{position}"
        )
    elif flag is RarityFlag.TRIFECTA:
        title = "TRIFECTA Spotted!"
        body = (
            f"{sighting.display_type} ({sighting.registration}),\n"
            f"run by {sighting.operator},\nregistered in\n{sighting.country}\n{position}"
        )
    else:
        raise ValueError(f"Nothing to notify for {flag!r}")

    return Notification(title=title, body=body, flag=flag, hex=sighting.hex)


class LogSink:
    """Write notifications to the application log."""

    def __init__(self, logger_name: str = "skytally.notifications") -> None:
        self.logger = logging.getLogger(logger_name)

    async def deliver(self, notification: Notification) -> None:
        self.logger.info(
            "%s: %s", notification.title, notification.body.replace("\n", " | ")
        )


class WebhookSink:
    """POST notifications as JSON to a webhook."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def deliver(self, notification: Notification) -> None:
        payload = {
            "title": notification.title,
            "body": notification.body,
            "flag": notification.flag.name,
            "hex": notification.hex,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()


class RarityNotifier:
    """Deliver rarity events unless the store is still warming up.

    Delivery failures are logged per sink and never reach the caller, so a
    broken notification channel cannot halt aggregation.
    """

    def __init__(self, sinks: Sequence[NotificationSink] | None = None) -> None:
        self.sinks: list[NotificationSink] = list(sinks) if sinks else [LogSink()]

    async def notify(self, events: Iterable[RarityEvent], *, warmup: bool) -> int:
        events = list(events)
        if warmup:
            for event in events:
                notification = render_notification(event)
                logger.info(
                    "Warm-up active, not delivering %s: %s",
                    notification.title,
                    notification.body.replace("\n", " | "),
                )
            return 0

        delivered = 0
        for event in events:
            notification = render_notification(event)
            for sink in self.sinks:
                try:
                    await sink.deliver(notification)
                except Exception as exc:
                    logger.warning(
                        "Failed to deliver %r via %s: %s",
                        notification.title,
                        type(sink).__name__,
                        exc,
                    )
                else:
                    delivered += 1
        return delivered


__all__ = [
    "LogSink",
    "Notification",
    "NotificationSink",
    "RarityNotifier",
    "WebhookSink",
    "render_notification",
]
