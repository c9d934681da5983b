"""FastAPI application for the Arena live scoring service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from arena import __version__
from arena.config import get_settings
from arena.database import close_db, init_db
from arena.errors import ArenaError
from arena.events import get_event_bus
from arena.routes.core import router as core_router
from arena.routes.live import router as live_router
from arena.routes.matches import router as matches_router
from arena.routes.teams import router as teams_router
from arena.routes.tournaments import router as tournaments_router
from arena.security import limiter
from arena.telemetry.sentry import capture_exception, init_sentry

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking (before FastAPI app creation)
# Only activates if SENTRY_DSN is set in environment
init_sentry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Arena...")
    await init_db()

    bus = get_event_bus()
    await bus.start()
    logger.info("[STARTUP] Event bus running")

    yield

    logger.info("Shutting down Arena...")
    await bus.stop()
    await close_db()


app = FastAPI(
    title="Arena",
    description="Live multi-sport scoring with real-time scoreboards",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# =============================================================================
# ERROR ENVELOPE: every failure is {"success": false, "error": "..."}
# =============================================================================


@app.exception_handler(ArenaError)
async def arena_error_handler(request: Request, exc: ArenaError):
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {request.method} {request.url.path}: {exc.message}", exc_info=exc)
        capture_exception(exc, path=request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"[ERROR] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    capture_exception(exc, path=request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc) or "Internal server error"})


# Include routers
app.include_router(core_router)
app.include_router(matches_router)
app.include_router(teams_router)
app.include_router(tournaments_router)
app.include_router(live_router)
