"""flashdeck - Logger Configuration.

One Loguru pipeline for the whole process. Application modules log through
``logging.getLogger(__name__)`` with ``extra=`` context; ``InterceptHandler``
forwards those records (and uvicorn/sqlalchemy ones) into Loguru, where the
request trace id is attached and the configured sink renders them as
colored console lines or JSON objects.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from flashdeck.shared.context import get_request_id, get_trace_id

if TYPE_CHECKING:
    from flashdeck.core.config import Settings

NO_TRACE = "-"
REDACTED = "***REDACTED***"

SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|key|auth|credential)",
    re.IGNORECASE,
)

# Extras promoted to fixed JSON keys (or dropped) instead of copied verbatim
_PROMOTED_EXTRA = frozenset({"trace_id", "request_id", "name"})

# Attributes every stdlib LogRecord has; anything else came in through ``extra=``
_LOG_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | "
    "<dim>trace_id={extra[trace_id]}</dim>"
)

# Stdlib loggers routed into Loguru, with their level in (console, json) mode
STDLIB_LOGGERS: dict[str, tuple[int, int]] = {
    "": (logging.INFO, logging.INFO),
    "flashdeck": (logging.INFO, logging.INFO),
    "fastapi": (logging.INFO, logging.INFO),
    "uvicorn": (logging.INFO, logging.INFO),
    "uvicorn.error": (logging.INFO, logging.INFO),
    "uvicorn.access": (logging.INFO, logging.WARNING),
    "sqlalchemy": (logging.WARNING, logging.WARNING),
    "sqlalchemy.engine": (logging.WARNING, logging.WARNING),
}


def _caller_depth() -> int:
    """Stack depth of the first frame outside the ``logging`` package."""
    frame = logging.currentframe()
    depth = 2
    while frame is not None and frame.f_code.co_filename == logging.__file__:
        frame = frame.f_back
        depth += 1
    return depth


class InterceptHandler(logging.Handler):
    """Stdlib ``logging.Handler`` that re-emits records through Loguru.

    Values passed with ``extra=`` become Loguru extras, so the JSON sink
    renders them as top-level keys.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        extra = {key: value for key, value in vars(record).items() if key not in _LOG_RECORD_ATTRS}
        logger.bind(**extra).opt(depth=_caller_depth(), exception=record.exc_info).log(
            level, record.getMessage()
        )


def _context_patcher(record: dict[str, Any]) -> None:
    """Attach the current request's trace and request ids."""
    extra = record["extra"]
    extra.setdefault("trace_id", get_trace_id() or NO_TRACE)
    request_id = get_request_id()
    if request_id:
        extra.setdefault("request_id", request_id)


def redact(key: str, value: Any) -> Any:
    """Mask ``value`` when ``key`` looks like a credential."""
    return REDACTED if SENSITIVE_PATTERNS.search(key) else value


def build_log_entry(record: dict[str, Any], service_name: str) -> dict[str, Any]:
    """Flatten a Loguru record into the JSON log line.

    Args:
        record: Loguru record (``message.record`` inside a sink)
        service_name: Value of the ``service`` key

    Returns:
        Standard keys, then extras (credentials masked), then exception info
    """
    extra = record["extra"]
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "service": service_name,
        "module": extra.get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
        "trace_id": extra.get("trace_id", NO_TRACE),
    }
    if "request_id" in extra:
        entry["request_id"] = extra["request_id"]

    entry.update(
        (key, redact(key, value)) for key, value in extra.items() if key not in _PROMOTED_EXTRA
    )

    exception = record.get("exception")
    if exception:
        entry["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
        }
    return entry


def _json_sink(service_name: str) -> Any:
    def sink(message: Any) -> None:
        line = json.dumps(build_log_entry(message.record, service_name), ensure_ascii=False, default=str)
        sys.stdout.write(line + "\n")
        sys.stdout.flush()

    return sink


def setup_logger(settings: Settings | None = None) -> None:
    """Install the Loguru sink chosen by ``LOG_FORMAT`` and route stdlib logs into it.

    Args:
        settings: Application settings; the cached instance when omitted
    """
    if settings is None:
        from flashdeck.core.config import get_settings

        settings = get_settings()

    level = settings.logging.level.upper()
    is_json = settings.logging.format.lower() == "json"

    logger.remove()
    logger.configure(patcher=_context_patcher)
    if is_json:
        logger.add(
            _json_sink(settings.app.name),
            level=level,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
    else:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=settings.app.debug,
            enqueue=True,
        )

    configure_stdlib_loggers(is_json=is_json)
    logger.info("Logger configured", level=level, format="json" if is_json else "console")


def configure_stdlib_loggers(*, is_json: bool = False) -> None:
    """Replace stdlib handlers with ``InterceptHandler``.

    Args:
        is_json: Use the production level column of ``STDLIB_LOGGERS``
    """
    logging.root.handlers = []
    for name, (console_level, json_level) in STDLIB_LOGGERS.items():
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(json_level if is_json else console_level)


def get_logger(name: str):
    """Loguru logger bound to a module name."""
    return logger.bind(name=name)
