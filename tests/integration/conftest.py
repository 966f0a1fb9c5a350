"""Integration-test fixtures.

Runs against real PostgreSQL + Redis. When POSTGRES_HOST and REDIS_URL are
both set in the environment those services are used as-is; otherwise
throwaway containers are started with testcontainers for the session and
stopped afterwards. Only a missing Docker daemon skips the suite.

All integration tests share a single event-loop so that the engine pool
and the Redis pool remain valid across the entire test session. The
lifespan is not run under ASGITransport, so the fixtures wire app.state
the same way it does.
"""

import os
from collections.abc import Iterator
from contextlib import ExitStack

import pytest
import pytest_asyncio
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from testcontainers.postgres import PostgresContainer
from testcontainers.redis import RedisContainer

from config.settings import Settings, settings
from src.main import create_app
from src.uc_common.database import create_engine_from_settings, create_session_factory
from src.uc_common.redis_client import RedisCache
from src.uc_users.application.service import UserApplicationService
from src.uc_users.infrastructure.persistence import UserRepository

POSTGRES_IMAGE = "postgres:16-alpine"
REDIS_IMAGE = "redis:7-alpine"


def _external_services_configured() -> bool:
    return "POSTGRES_HOST" in os.environ and "REDIS_URL" in os.environ


@pytest.fixture(scope="session")
def service_settings() -> Iterator[Settings]:
    """Settings pointing at the Postgres/Redis the suite runs against."""
    if _external_services_configured():
        yield settings
        return

    stack = ExitStack()
    try:
        postgres = stack.enter_context(PostgresContainer(POSTGRES_IMAGE))
        redis = stack.enter_context(RedisContainer(REDIS_IMAGE))
    except DockerException as exc:
        stack.close()
        pytest.skip(f"Docker unavailable and no POSTGRES_HOST/REDIS_URL configured: {exc}")

    with stack:
        redis_host = redis.get_container_host_ip()
        redis_port = redis.get_exposed_port(6379)
        yield Settings(
            POSTGRES_HOST=postgres.get_container_host_ip(),
            POSTGRES_PORT=int(postgres.get_exposed_port(5432)),
            POSTGRES_USER=postgres.username,
            POSTGRES_PASSWORD=postgres.password,
            POSTGRES_DB=postgres.dbname,
            REDIS_URL=f"redis://{redis_host}:{redis_port}/0",
        )


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def gateways(service_settings: Settings):
    engine = create_engine_from_settings(service_settings)
    repo = UserRepository(create_session_factory(engine))
    cache = RedisCache.from_url(service_settings.REDIS_URL)
    try:
        await repo.ensure_schema()
        await cache.ping()
        yield repo, cache
    finally:
        await engine.dispose()
        await cache.close()


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(gateways) -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the pools alive."""
    repo, cache = gateways
    app = create_app()
    app.state.user_service = UserApplicationService(repo, cache)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def redis_client(gateways):
    return gateways[1].client


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def clean_table(gateways):
    """Every test starts from an empty users table and an empty user:* keyspace."""
    repo, cache = gateways
    await repo.clear()
    async for key in cache.client.scan_iter(match="user:*"):
        await cache.client.delete(key)
    yield
