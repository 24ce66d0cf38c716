"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every exception handler."""

    error_code: str = Field(..., examples=["ALLOCATION_LIMIT_REACHED"])
    message: str
    details: Any | None = None


# Shared by every authenticated router
AUTH_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
}
