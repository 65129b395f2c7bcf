"""ADSB ingestor for nearby air traffic using the adsb.fi open data API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from skytally.config import settings
from skytally.models.observation import AircraftBatch

logger = logging.getLogger("skytally.ingestors.adsb")


class ADSBIngestor:
    """Fetch aircraft within a radius of a point from an ADS-B aggregator."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        radius_nm: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.adsb_base_url).rstrip("/")
        self.timeout = timeout or settings.adsb_timeout
        self.radius_nm = radius_nm or settings.adsb_radius_nm
        self.transport = transport

    def build_url(self, lat: float, lon: float) -> str:
        return f"{self.base_url}/lat/{lat:.6f}/lon/{lon:.6f}/dist/{self.radius_nm}"

    async def get_aircraft(self, lat: float, lon: float) -> Optional[AircraftBatch]:
        """Return the current batch, or ``None`` if the provider could not be read."""

        url = self.build_url(lat, lon)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("ADSB request timed out: %s", exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("ADSB request failed: %s", exc)
            return None

        if response.status_code == 429:
            logger.warning("ADSB provider rate limit encountered: %s", response.text)
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "ADSB provider returned HTTP %s: %s", exc.response.status_code, exc
            )
            return None

        if not response.content:
            logger.warning("ADSB provider returned an empty body")
            return None

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.warning("ADSB provider returned non-JSON content type: %s", content_type)
            return None

        try:
            batch = AircraftBatch.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Failed to parse ADSB JSON response: %s", exc)
            return None

        logger.debug("Fetched %s aircraft", len(batch.aircraft))
        return batch


__all__ = ["ADSBIngestor"]
