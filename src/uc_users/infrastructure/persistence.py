"""UserRepository — concrete implementation of UserRepositoryProtocol.

All queries use raw text() SQL with bound parameters (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) is required for None values.

Transaction ownership: unlike the request-scoped repositories this one owns
its session factory; every call checks out a pooled connection, runs in its
own transaction and commits before returning. Callers only ever see
committed state.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.uc_common.errors import ConstraintViolationError, StoreUnavailableError
from src.uc_users.domain.models import User

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_CREATE_TABLE_SQL = text("""
    CREATE TABLE IF NOT EXISTS users (
        id          SERIAL          PRIMARY KEY,
        name        VARCHAR(100)    NOT NULL,
        email       VARCHAR(100)    UNIQUE NOT NULL,
        created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW()
    )
""")

_LIST_USERS_SQL = text("""
    SELECT id, name, email, created_at
    FROM users
    ORDER BY id
""")

_GET_USER_SQL = text("""
    SELECT id, name, email, created_at
    FROM users
    WHERE id = :user_id
""")

_INSERT_USER_SQL = text("""
    INSERT INTO users (name, email)
    VALUES (:name, :email)
    RETURNING id, name, email, created_at
""")

_UPDATE_USER_SQL = text("""
    UPDATE users
    SET name  = COALESCE(CAST(:name AS VARCHAR), name),
        email = COALESCE(CAST(:email AS VARCHAR), email)
    WHERE id = :user_id
    RETURNING id, name, email, created_at
""")

_DELETE_USER_SQL = text("""
    DELETE FROM users
    WHERE id = :user_id
    RETURNING id, name, email, created_at
""")

_CLEAR_USERS_SQL = text("DELETE FROM users")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class UserRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Session + transaction; driver errors mapped onto the app taxonomy."""
        try:
            async with self._session_factory() as db, db.begin():
                yield db
        except IntegrityError as exc:
            raise ConstraintViolationError(str(exc.orig)) from exc
        except (OperationalError, InterfaceError, OSError) as exc:
            raise StoreUnavailableError(str(exc)) from exc

    async def ensure_schema(self) -> None:
        async with self._transaction() as db:
            await db.execute(_CREATE_TABLE_SQL)

    async def list_all(self) -> list[User]:
        async with self._transaction() as db:
            result = await db.execute(_LIST_USERS_SQL)
            return [_row_to_user(r) for r in result.fetchall()]

    async def get_by_id(self, user_id: int) -> User | None:
        async with self._transaction() as db:
            result = await db.execute(_GET_USER_SQL, {"user_id": user_id})
            row = result.fetchone()
        return _row_to_user(row) if row else None

    async def insert(self, name: str, email: str) -> User:
        async with self._transaction() as db:
            result = await db.execute(_INSERT_USER_SQL, {"name": name, "email": email})
            row = result.fetchone()
        return _row_to_user(row)

    async def update(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
    ) -> User | None:
        """Partial update: a None field is left unchanged."""
        async with self._transaction() as db:
            result = await db.execute(
                _UPDATE_USER_SQL,
                {"user_id": user_id, "name": name, "email": email},
            )
            row = result.fetchone()
        return _row_to_user(row) if row else None

    async def delete(self, user_id: int) -> User | None:
        async with self._transaction() as db:
            result = await db.execute(_DELETE_USER_SQL, {"user_id": user_id})
            row = result.fetchone()
        return _row_to_user(row) if row else None

    async def clear(self) -> None:
        async with self._transaction() as db:
            await db.execute(_CLEAR_USERS_SQL)
