"""Core routes: health and metrics.

Auth per-endpoint:
- /api/health: public, rate limited
- /metrics: Bearer token (METRICS_BEARER_TOKEN)
"""

from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse

from arena.config import get_settings
from arena.database import get_pool_status
from arena.models import utcnow
from arena.security import limiter, verify_bearer_token
from arena.telemetry import get_metrics_text, is_sentry_enabled

router = APIRouter(tags=["core"])
settings = get_settings()


@router.get("/api/health")
@limiter.limit("120/minute")
async def health_check(request: Request):
    """Health check endpoint."""
    return {
        "status": "OK",
        "timestamp": utcnow().isoformat(),
        "database": get_pool_status(),
        "sentry": is_sentry_enabled(),
    }


@router.get("/metrics")
async def prometheus_metrics(
    authorization: str = Header(None, alias="Authorization"),
):
    """Prometheus metrics for score updates, match completions and event fan-out."""
    refusal = verify_bearer_token(authorization, settings.METRICS_BEARER_TOKEN)
    if refusal:
        return PlainTextResponse(
            content=f"# Unauthorized: {refusal}\n",
            status_code=401,
            media_type="text/plain",
        )

    content, content_type = get_metrics_text()
    return PlainTextResponse(content=content, media_type=content_type)
