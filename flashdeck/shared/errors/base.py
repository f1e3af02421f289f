"""Root of the flashdeck error taxonomy.

Every error the engines and services raise is an ``AppError``. A subclass
only has to pick a status code and write a docstring: the machine-readable
code is derived from the class name (``DeckPathConflictError`` becomes
``DECK_PATH_CONFLICT``) and the first docstring line becomes the default
message.
"""

import logging
import re
from typing import Any, ClassVar

from pydantic import ValidationError

from .context import trace_id_var
from .schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def error_code_for(class_name: str) -> str:
    """``NonEmptySubtreeError`` -> ``NON_EMPTY_SUBTREE``."""
    for suffix in ("Error", "Exception"):
        if class_name.endswith(suffix) and class_name != suffix:
            class_name = class_name[: -len(suffix)]
            break
    return _CAMEL_BOUNDARY.sub("_", class_name).upper()


class AppError(Exception):
    """Internal server error"""

    status_code: ClassVar[int] = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "code" not in vars(cls):
            cls.code = error_code_for(cls.__name__)
        if "default_message" not in vars(cls) and cls.__doc__:
            cls.default_message = cls.__doc__.strip().splitlines()[0]

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | ErrorDetail | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = self._normalize_details(details)
        if status_code is not None:
            self.status_code = status_code  # type: ignore[misc]
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def _normalize_details(self, details: dict[str, Any] | ErrorDetail | None) -> dict[str, Any]:
        if details is None:
            return {}
        if not isinstance(details, ErrorDetail):
            try:
                details = ErrorDetail.model_validate(details)
            except ValidationError:
                logger.warning(
                    "Unvalidated details attached to %s",
                    type(self).__name__,
                    extra={"error_code": self.code},
                )
                return dict(details)
        return details.model_dump(mode="json", exclude_none=True)

    @property
    def trace_id(self) -> str:
        return trace_id_var.get()

    def to_response(self) -> ErrorResponse:
        """Body of the HTTP error response."""
        return ErrorResponse(
            error=self.code,
            message=self.message,
            details=self.details,
            trace_id=self.trace_id,
        )

    @classmethod
    def openapi_response(cls) -> dict[str, Any]:
        """Entry for a route's ``responses=`` mapping."""
        example = ErrorResponse(
            error=cls.code,
            message=cls.default_message,
            trace_id="example-trace-id",
        )
        return {
            "model": ErrorResponse,
            "description": cls.default_message,
            "content": {"application/json": {"example": example.model_dump()}},
        }
