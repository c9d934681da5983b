"""
Telemetry: Prometheus metrics for scoring and fan-out, Sentry error capture.
"""

from arena.telemetry.metrics import (
    arena_events_published_total,
    arena_matches_completed_total,
    arena_publish_failures_total,
    arena_score_update_latency_ms,
    arena_score_updates_total,
    get_metrics_text,
    record_event_published,
    record_match_completed,
    record_publish_failure,
    record_score_update,
)
from arena.telemetry.sentry import capture_exception, init_sentry, is_sentry_enabled

__all__ = [
    "arena_events_published_total",
    "arena_matches_completed_total",
    "arena_publish_failures_total",
    "arena_score_update_latency_ms",
    "arena_score_updates_total",
    "get_metrics_text",
    "record_event_published",
    "record_match_completed",
    "record_publish_failure",
    "record_score_update",
    "capture_exception",
    "init_sentry",
    "is_sentry_enabled",
]
