"""Error response body.

Successful responses return the resource JSON directly. Errors use:
{
    "error": "User not found"
}
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str


def error_response(message: str) -> ErrorResponse:
    return ErrorResponse(error=message)
