"""Error taxonomy shared by every module.

Engines and services raise ``AppError`` subclasses; repositories translate
storage failures with ``@safe``; ``setup_exception_handlers`` renders all of
them as one JSON shape.
"""

from .base import AppError, error_code_for
from .context import trace_id_var
from .decorators import safe, translated_errors
from .domain import (
    ConflictError,
    DuplicateError,
    InvalidInputError,
    NotFoundError,
    ServiceUnavailableError,
)
from .handlers import setup_exception_handlers
from .mapping import ExceptionMapper
from .schemas import ErrorDetail, ErrorResponse

__all__ = [
    "AppError",
    "ConflictError",
    "DuplicateError",
    "ErrorDetail",
    "ErrorResponse",
    "ExceptionMapper",
    "InvalidInputError",
    "NotFoundError",
    "ServiceUnavailableError",
    "error_code_for",
    "safe",
    "setup_exception_handlers",
    "trace_id_var",
    "translated_errors",
]
