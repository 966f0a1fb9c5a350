"""Domain models for uc_users — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: int
    name: str
    email: str
    created_at: datetime
