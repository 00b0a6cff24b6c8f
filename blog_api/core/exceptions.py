"""
Domain exceptions raised by the engagement services.
The API layer maps them to JSON error responses in main.py.
"""
from typing import Optional
from fastapi import status


class EngagementError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(EngagementError):
    """Missing or malformed input, rejected before touching the store"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, detail=field)
        self.field = field


class InvalidTransitionError(ValidationError):
    """Comment status change not allowed by the moderation table"""


class NotFoundError(EngagementError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(EngagementError):
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(EngagementError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(EngagementError):
    """Persistence failure. The message is generic and safe to show to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
