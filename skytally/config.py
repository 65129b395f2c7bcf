"""Configuration settings for SkyTally."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("skytally.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", env_var, value, default)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skytally_env: str = os.getenv("SKYTALLY_ENV", "local")
    log_level: str = os.getenv("SKYTALLY_LOG_LEVEL", "INFO")

    # Reference point, defaults to Singapore Changi
    reference_lat: float = _get_float("SKYTALLY_REFERENCE_LAT", 1.359297)
    reference_lon: float = _get_float("SKYTALLY_REFERENCE_LON", 103.989348)

    # Reference tables
    data_dir: str = os.getenv("SKYTALLY_DATA_DIR", "./data")

    # Rarity classification: "log" or "ratio", applied to every dimension
    rarity_policy: str = os.getenv("SKYTALLY_RARITY_POLICY", "log")
    rarity_log_constant: float = _get_float("SKYTALLY_RARITY_LOG_CONSTANT", 6.0)
    rarity_ratio: float = _get_float("SKYTALLY_RARITY_RATIO", 0.001)

    # Tracker loop
    enable_tracker: bool = _get_bool("SKYTALLY_ENABLE_TRACKER", default=False)
    poll_interval_seconds: float = _get_float("SKYTALLY_POLL_INTERVAL_SECONDS", 30.0)
    warmup_minutes: float = _get_float("SKYTALLY_WARMUP_MINUTES", 60.0)
    summary_interval_minutes: float = _get_float("SKYTALLY_SUMMARY_INTERVAL_MINUTES", 60.0)

    # ADS-B provider
    adsb_base_url: str = os.getenv("ADSB_BASE_URL", "https://opendata.adsb.fi/api/v2")
    adsb_timeout: float = _get_float("ADSB_TIMEOUT", 25.0)
    adsb_radius_nm: int = int(_get_float("ADSB_RADIUS_NM", 250))

    # Notifications
    notify_webhook_url: str | None = os.getenv("SKYTALLY_NOTIFY_WEBHOOK_URL")
    notify_timeout: float = _get_float("SKYTALLY_NOTIFY_TIMEOUT", 10.0)


settings = Settings()

__all__ = ["settings", "Settings"]
