"""Pydantic schemas for uc_users: request bodies, User JSON, cache payload.

The cache payload is exactly the User JSON document, serialized as text,
so a cache hit and a store read render identically.
"""

from datetime import datetime

from pydantic import BaseModel

from src.uc_users.domain.models import User


class CreateUserRequest(BaseModel):
    # Optional at the schema level so a missing field is a 400 from the
    # service, not a 422 from FastAPI.
    name: str | None = None
    email: str | None = None


class UpdateUserRequest(BaseModel):
    name: str | None = None
    email: str | None = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
        )

    def to_domain(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
        )


def serialize_user(user: User) -> str:
    return UserOut.from_domain(user).model_dump_json()


def deserialize_user(payload: str) -> User:
    return UserOut.model_validate_json(payload).to_domain()
