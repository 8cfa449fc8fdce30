# kidsministry/backend/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
import redis.asyncio as redis
import httpx
import logging

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from fastapi.middleware.cors import CORSMiddleware

from .config.config import settings
from .logging.logging_config import setup_logging
from .api import auth, profile, dashboard, lessons, reports, themes
from .api.entities import (
    children_router, teachers_router, lessons_router,
    photos_router, messages_router, events_router,
)
from .api.utilities.limiter import limiter

from .db.redis_client import RedisClient
from .services.app_state import AppState
from .services.theme_service import ResultBoard
from .tools.gemini_client import GeminiClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Builds the shared clients and loads the persisted dashboard state on startup,
    and releases them on shutdown.
    """
    setup_logging()
    logger.info("Starting the kids ministry dashboard API...")

    redis_pool = redis.ConnectionPool.from_url(settings.APPLICATION_REDIS_URL, decode_responses=True)
    http_client = httpx.AsyncClient(timeout=settings.AI_REQUEST_TIMEOUT_SECONDS)
    app.state.redis_pool = redis_pool
    app.state.http_client = http_client

    redis_client = RedisClient(pool=redis_pool, namespace=settings.STORE_NAMESPACE)
    if not await redis_client.ping():
        logger.error("Redis is not reachable; the dashboard starts from seed data and changes will not persist.")

    app_state = AppState(redis_client)
    await app_state.load()
    app.state.app_state = app_state

    app.state.gemini_client = GeminiClient(
        http_client=http_client,
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.GEMINI_API_URL,
        text_model=settings.GEMINI_TEXT_MODEL,
        image_model=settings.GEMINI_IMAGE_MODEL,
    )
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; AI features will answer with their fallback texts.")
    app.state.result_board = ResultBoard()

    yield

    logger.info("Shutting down...")
    await http_client.aclose()
    await redis_pool.disconnect()
    logger.info("HTTP client and Redis pool closed.")


app = FastAPI(
    title="EBI Kids Ministry API",
    description="Dashboard API for managing a children's ministry: children, teachers, lessons, events, messages and a gallery.",
    version="1.0.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(profile.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")
# The lesson editor routes must win over '/lessons/{entity_id}'.
app.include_router(lessons.router, prefix="/api/v1")
app.include_router(children_router, prefix="/api/v1")
app.include_router(teachers_router, prefix="/api/v1")
app.include_router(lessons_router, prefix="/api/v1")
app.include_router(photos_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(themes.router, prefix="/api/v1")


@app.get("/health", tags=["System"])
def health_check():
    """Simple liveness probe."""
    return {"status": "ok", "message": "EBI Kids Ministry API is running."}
