"""Gateway Protocols — dependency inversion for testability.

Unit tests inject mocks that conform to these Protocols.
Infrastructure layer provides the real implementations.
"""

from typing import Protocol

from src.uc_users.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def list_all(self) -> list[User]: ...

    async def get_by_id(self, user_id: int) -> User | None: ...

    async def insert(self, name: str, email: str) -> User: ...

    async def update(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
    ) -> User | None: ...

    async def delete(self, user_id: int) -> User | None: ...


class CacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...
