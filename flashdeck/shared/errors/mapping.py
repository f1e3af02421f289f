"""Translation of storage failures into the error taxonomy.

Repositories never let SQLAlchemy exceptions escape: ``@safe`` hands them to
``ExceptionMapper``, which picks the handler registered for the closest
exception class in the MRO.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from .base import AppError
from .domain import ConflictError, InvalidInputError, ServiceUnavailableError

logger = logging.getLogger(__name__)

Handler = Callable[[Any, str], AppError]
HandlerT = TypeVar("HandlerT", bound=Handler)


class ExceptionMapper:
    """Registry of ``exception class -> AppError factory`` handlers."""

    _handlers: dict[type[BaseException], Handler] = {}

    @classmethod
    def register(cls, *exception_types: type[BaseException]) -> Callable[[HandlerT], HandlerT]:
        """Register the decorated function for ``exception_types``.

        Example:
            @ExceptionMapper.register(IntegrityError)
            def _integrity(exc: IntegrityError, operation: str) -> AppError:
                ...
        """

        def decorator(handler: HandlerT) -> HandlerT:
            for exception_type in exception_types:
                cls._handlers[exception_type] = handler
            return handler

        return decorator

    @classmethod
    def resolve(cls, exc_type: type[BaseException]) -> Handler | None:
        """Handler of the nearest registered base class, if any."""
        for klass in exc_type.__mro__:
            handler = cls._handlers.get(klass)
            if handler is not None:
                return handler
        return None

    @classmethod
    def map(cls, exc: Exception, operation: str = "") -> AppError:
        """Convert ``exc`` raised inside ``operation`` to an ``AppError``.

        Unknown exceptions become a plain 500 ``AppError``.
        """
        handler = cls.resolve(type(exc))
        if handler is not None:
            return handler(exc, operation)

        logger.error(
            "Unmapped %s in %s",
            type(exc).__name__,
            operation or "<unknown>",
            exc_info=exc,
        )
        return AppError(details={"function": operation} if operation else None)


def constraint_name(exc: DBAPIError) -> str | None:
    """Constraint reported by the driver (asyncpg exposes ``constraint_name``)."""
    orig = getattr(exc, "orig", None)
    name = getattr(orig, "constraint_name", None)
    if name is None:
        name = getattr(getattr(orig, "__cause__", None), "constraint_name", None)
    return name


@ExceptionMapper.register(IntegrityError)
def _integrity_violation(exc: IntegrityError, operation: str) -> AppError:
    message = str(exc.orig if exc.orig is not None else exc).lower()
    constraint = constraint_name(exc)

    if "unique" in message or "duplicate key" in message:
        logger.warning(
            "Unique constraint violated in %s",
            operation,
            extra={"constraint": constraint},
        )
        return ConflictError(
            "Record already exists",
            details={"constraint": constraint or "unique"},
        )
    if "foreign key" in message:
        return InvalidInputError(
            "Referenced record does not exist",
            details={"constraint": constraint or "foreign_key"},
        )
    return InvalidInputError(
        "Database constraint violation",
        details={"constraint": constraint} if constraint else None,
    )


@ExceptionMapper.register(OperationalError, DBAPIError)
def _database_unavailable(exc: DBAPIError, operation: str) -> AppError:
    logger.error("Database error in %s: %s", operation, exc)
    return ServiceUnavailableError(
        "Database temporarily unavailable",
        details={"service": "database"},
    )
