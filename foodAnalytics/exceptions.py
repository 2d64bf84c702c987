"""Error taxonomy for the JSON API.

Views and services raise these; ``core.middleware.ApiExceptionMiddleware``
turns them into ``{"message": ...}`` responses with the matching status code.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from django.http import JsonResponse


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or malformed request fields."""
    status_code = 400
    default_message = "Invalid request."


class ConflictError(ApiError):
    """A unique field (the account email) is already taken."""
    status_code = 400
    default_message = "Resource already exists."


class AuthError(ApiError):
    status_code = 401
    default_message = "Not authorized"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found."


class OrderNotFound(NotFoundError):
    default_message = "Order not found or not owned by user."


class ProcessingError(ApiError):
    """Upload could not be parsed or persisted."""
    status_code = 500
    default_message = "Failed to process order history. Please check file format."


def error_response(exc: ApiError, extra: Optional[Dict[str, Any]] = None) -> JsonResponse:
    payload: Dict[str, Any] = {"message": exc.message}
    if extra:
        payload.update(extra)
    response = JsonResponse(payload, status=exc.status_code)
    if exc.status_code == 401:
        response["WWW-Authenticate"] = "Bearer"
    return response
