"""
Domain errors raised by the record store services.

Each error carries a stable ``code`` and the HTTP status it maps to at the
API boundary. Owner-scoped lookups raise ``NotFoundOrForbiddenError`` for
both a missing row and a row owned by someone else, with the same message,
so callers cannot probe for other users' records.
"""
from typing import Any, Dict, Optional

from fastapi import status


class CharacterChatError(Exception):
    """Base exception for record store errors"""
    code: str = "INTERNAL_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnauthenticatedError(CharacterChatError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "You must be signed in to perform this action.", details=None):
        super().__init__(message, details)


class ForbiddenError(CharacterChatError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundOrForbiddenError(ForbiddenError):
    def __init__(self, entity: str):
        super().__init__(f"{entity} not found or you do not have access.")


class NotFoundError(CharacterChatError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ConstraintViolationError(CharacterChatError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class StorageError(CharacterChatError):
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
