"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User
  9xxx: System (store / cache infrastructure)

Every AppError is rendered at the HTTP edge as {"error": message}
with its http_status.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: User ---

class ValidationError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(1001, message, 400)


class UserNotFoundError(AppError):
    def __init__(self, user_id: int | None = None) -> None:
        self.user_id = user_id
        super().__init__(1002, "User not found", 404)


class ConstraintViolationError(AppError):
    """Unique email or NOT NULL violated. Kept at 500 for API compatibility."""

    def __init__(self, detail: str = "Constraint violation") -> None:
        super().__init__(1003, detail, 500)


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(9001, detail, 500)


class CacheUnavailableError(AppError):
    def __init__(self, detail: str = "Cache unavailable") -> None:
        super().__init__(9002, detail, 500)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9003, detail, 500)
