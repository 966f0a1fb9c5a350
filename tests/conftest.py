"""Shared test fixtures.

HTTP tests run the real app against in-memory gateways that honour the
same contracts as UserRepository / RedisCache (unique email, ascending ids,
absent-key delete is a no-op). No lifespan runs under ASGITransport, so the
service is placed on app.state directly.
"""

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.main import create_app
from src.uc_common.errors import ConstraintViolationError
from src.uc_users.application.service import UserApplicationService
from src.uc_users.domain.models import User


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.rows: dict[int, User] = {}
        self._next_id = 1

    def _email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        return any(u.email == email and u.id != exclude_id for u in self.rows.values())

    async def list_all(self) -> list[User]:
        return [self.rows[k] for k in sorted(self.rows)]

    async def get_by_id(self, user_id: int) -> User | None:
        return self.rows.get(user_id)

    async def insert(self, name: str, email: str) -> User:
        if self._email_taken(email):
            raise ConstraintViolationError("duplicate key value violates unique constraint")
        user = User(id=self._next_id, name=name, email=email, created_at=datetime.now(UTC))
        self.rows[user.id] = user
        self._next_id += 1
        return user

    async def update(
        self, user_id: int, name: str | None = None, email: str | None = None
    ) -> User | None:
        current = self.rows.get(user_id)
        if current is None:
            return None
        if email is not None and self._email_taken(email, exclude_id=user_id):
            raise ConstraintViolationError("duplicate key value violates unique constraint")
        updated = User(
            id=current.id,
            name=name if name is not None else current.name,
            email=email if email is not None else current.email,
            created_at=current.created_at,
        )
        self.rows[user_id] = updated
        return updated

    async def delete(self, user_id: int) -> User | None:
        return self.rows.pop(user_id, None)


class InMemoryCache:
    def __init__(self) -> None:
        self.entries: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.entries.get(key)

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        self.entries[key] = payload
        self.ttls[key] = ttl_seconds

    async def delete(self, key: str) -> None:
        self.entries.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def app(repo: InMemoryUserRepository, cache: InMemoryCache) -> FastAPI:
    application = create_app()
    application.state.user_service = UserApplicationService(repo, cache)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
