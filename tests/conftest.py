# tests/conftest.py
import asyncio
import sys
from typing import Dict, Optional
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis
from fastapi.testclient import TestClient

from kidsministry.backend.config.config import settings
from kidsministry.backend.db.redis_client import RedisClient
from kidsministry.backend.services.app_state import AppState
from kidsministry.backend.services.theme_service import ResultBoard
from kidsministry.backend.tools.gemini_client import GeminiClient

# This is the crucial fix for Windows asyncio issues with pytest.
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


class InMemoryRedis:
    """
    Stands in for the redis.asyncio connection used by RedisClient.
    ``fail_reads`` / ``fail_writes`` simulate an unreachable store.
    """

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise redis.ConnectionError("read refused")
        return self.store.get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise redis.ConnectionError("write refused")
        self.store[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        if self.fail_writes:
            raise redis.ConnectionError("write refused")
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def ping(self) -> bool:
        return True


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()

@pytest.fixture
def redis_client(fake_redis) -> RedisClient:
    """A RedisClient whose connection is replaced by the in-memory store."""
    pool = redis.ConnectionPool.from_url("redis://localhost:6379/0", decode_responses=True)
    client = RedisClient(pool=pool, namespace="ebi")
    client._redis = fake_redis
    return client

@pytest.fixture
def app_state(redis_client) -> AppState:
    """Application state holding the seed data, backed by the in-memory store."""
    return AppState(redis_client)

@pytest.fixture
def mock_gemini() -> AsyncMock:
    return AsyncMock(spec=GeminiClient)


# --- API fixtures ---

@pytest.fixture
def api_client(app_state, mock_gemini):
    """
    TestClient over the real app, without running the lifespan: the shared
    objects the lifespan would build are attached by hand.
    """
    from kidsministry.backend.main import app
    from kidsministry.backend.api.utilities.limiter import limiter

    app.state.app_state = app_state
    app.state.result_board = ResultBoard()
    app.state.gemini_client = mock_gemini
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = True

@pytest.fixture
def logged_in_client(api_client):
    response = api_client.post("/api/v1/auth/login", json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD})
    assert response.status_code == 200
    return api_client
