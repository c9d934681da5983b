"""
Prometheus metrics for live scoring.

Design principles:
- Low cardinality (controlled labels)
- Best-effort (never block main flow)

ALLOWED LABELS (bounded sets):
- sport:    the seven supported sports
- outcome:  "applied", "noop", "rejected"
- trigger:  "auto" (winning condition), "manual" (explicit end)
- event:    "score-update", "live-score-update", "match-started", "match-ended"

FORBIDDEN AS LABELS: match ids, team or player names, action details.
Use logs for per-match debugging.
"""

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# =============================================================================
# SCORING METRICS
# =============================================================================

arena_score_updates_total = Counter(
    "arena_score_updates_total",
    "Score update requests by sport and outcome",
    ["sport", "outcome"],
)

arena_score_update_latency_ms = Histogram(
    "arena_score_update_latency_ms",
    "Load-to-publish latency of a score update",
    ["sport"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

arena_matches_completed_total = Counter(
    "arena_matches_completed_total",
    "Matches transitioned to completed",
    ["sport", "trigger"],
)

# =============================================================================
# FAN-OUT METRICS
# =============================================================================

arena_events_published_total = Counter(
    "arena_events_published_total",
    "Events accepted by the event bus",
    ["event"],
)

arena_publish_failures_total = Counter(
    "arena_publish_failures_total",
    "Events dropped or failed during fan-out",
    ["event"],
)


def record_score_update(sport: str, outcome: str, latency_ms: float = None) -> None:
    """Record one score update request."""
    try:
        arena_score_updates_total.labels(sport=sport, outcome=outcome).inc()
        if latency_ms is not None:
            arena_score_update_latency_ms.labels(sport=sport).observe(latency_ms)
    except Exception as e:
        logger.warning(f"Failed to record score update metric: {e}")


def record_match_completed(sport: str, trigger: str) -> None:
    try:
        arena_matches_completed_total.labels(sport=sport, trigger=trigger).inc()
    except Exception as e:
        logger.warning(f"Failed to record match completion metric: {e}")


def record_event_published(event: str) -> None:
    try:
        arena_events_published_total.labels(event=event).inc()
    except Exception as e:
        logger.warning(f"Failed to record event metric: {e}")


def record_publish_failure(event: str) -> None:
    try:
        arena_publish_failures_total.labels(event=event).inc()
    except Exception as e:
        logger.warning(f"Failed to record publish failure metric: {e}")


def get_metrics_text() -> tuple[str, str]:
    """
    Generate Prometheus metrics text output.

    Returns:
        Tuple of (content, content_type)
    """
    return generate_latest(REGISTRY).decode("utf-8"), CONTENT_TYPE_LATEST
