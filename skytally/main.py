from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from skytally.api import api_router
from skytally.config import settings
from skytally.ingestors import ADSBIngestor, load_reference_tables
from skytally.services import (
    LogSink,
    RarityNotifier,
    SightingStore,
    TrafficTracker,
    WebhookSink,
    build_policy,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("skytally")


def build_notifier() -> RarityNotifier:
    sinks = [LogSink()]
    if settings.notify_webhook_url:
        sinks.append(
            WebhookSink(settings.notify_webhook_url, timeout=settings.notify_timeout)
        )
    return RarityNotifier(sinks)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    # A missing or malformed table is fatal.
    tables = load_reference_tables(settings.data_dir)
    policy = build_policy(
        settings.rarity_policy,
        log_constant=settings.rarity_log_constant,
        ratio=settings.rarity_ratio,
    )
    app.state.store = SightingStore(
        settings.reference_lat,
        settings.reference_lon,
        tables,
        policy=policy,
        warmup=settings.warmup_minutes > 0,
    )
    app.state.notifier = build_notifier()
    logger.info("Sighting store ready with %s rarity policy", settings.rarity_policy)

    if settings.enable_tracker:
        tracker = TrafficTracker(
            store=app.state.store,
            source=ADSBIngestor(),
            notifier=app.state.notifier,
            poll_interval=settings.poll_interval_seconds,
            warmup_seconds=settings.warmup_minutes * 60,
            summary_interval=settings.summary_interval_minutes * 60,
        )
        app.state.tracker_task = asyncio.create_task(tracker.run())
        logger.info("Traffic tracker started")
    elif app.state.store.is_warmup:
        # Pushed batches only; end warm-up on a timer instead.
        app.state.warmup_handle = asyncio.get_running_loop().call_later(
            settings.warmup_minutes * 60, app.state.store.finish_warmup
        )

    try:
        yield
    finally:
        task = getattr(app.state, "tracker_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        handle = getattr(app.state, "warmup_handle", None)
        if handle:
            handle.cancel()


app = FastAPI(title="SkyTally", lifespan=lifespan)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "SkyTally is running"}
