"""Application exception hierarchy."""
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        validation_errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.validation_errors = validation_errors


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404


class DuplicateResourceError(AppError):
    """A resource with the same unique key already exists."""

    status_code = 409


class BadRequestError(AppError):
    """Request is well-formed but its values are not acceptable."""

    status_code = 400
