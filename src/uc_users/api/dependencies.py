"""FastAPI dependencies — hand out the gateways built by the lifespan."""

from fastapi import Request

from src.uc_users.application.service import UserApplicationService


def get_user_service(request: Request) -> UserApplicationService:
    """The single per-process service instance stored on app.state."""
    return request.app.state.user_service
