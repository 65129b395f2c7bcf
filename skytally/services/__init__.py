"""Service-layer helpers for SkyTally."""

from .notifier import LogSink, RarityNotifier, WebhookSink, render_notification
from .ranking import TrafficSummary, build_summary, rank_by_rarity, render_summary
from .rarity import LogarithmicPolicy, RarityClassifier, RatioPolicy, build_policy
from .resolution import CategoryResolver
from .sighting_store import SightingStore, StoreSnapshot
from .tracker import TrafficTracker

__all__ = [
    "CategoryResolver",
    "LogSink",
    "LogarithmicPolicy",
    "RarityClassifier",
    "RarityNotifier",
    "RatioPolicy",
    "SightingStore",
    "StoreSnapshot",
    "TrafficSummary",
    "TrafficTracker",
    "WebhookSink",
    "build_policy",
    "build_summary",
    "rank_by_rarity",
    "render_notification",
    "render_summary",
]
