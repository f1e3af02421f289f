"""Standard domain error types.

The four kinds the engines raise, plus the infrastructure kinds the
exception mapper produces.
"""

from .base import AppError


class InvalidInputError(AppError):
    """Invalid input data."""

    status_code = 422


class NotFoundError(AppError):
    """Resource not found."""

    status_code = 404


class ConflictError(AppError):
    """Resource conflict."""

    status_code = 409


class DuplicateError(AppError):
    """Possible duplicate; resubmit with the override flag to keep it."""

    # Not a ConflictError subclass: the override flag resolves it.
    status_code = 409


class ServiceUnavailableError(AppError):
    """External service is unavailable."""

    status_code = 503
