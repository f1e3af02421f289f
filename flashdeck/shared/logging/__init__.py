"""flashdeck - Shared Logging Configuration.

Loguru-based logging module with:
- Structured JSON logging for production
- Colored console output for development
- Request trace correlation
- Automatic sensitive data redaction
"""

from loguru import logger

from .config import (
    InterceptHandler,
    build_log_entry,
    configure_stdlib_loggers,
    get_logger,
    redact,
    setup_logger,
)
from .event_logger import (
    log_card_saved,
    log_deck_created,
    log_deck_renamed,
    log_duplicate_overridden,
    log_subtree_deleted,
)

__all__ = [
    # Core logging
    "logger",
    "setup_logger",
    "get_logger",
    "build_log_entry",
    "redact",
    "InterceptHandler",
    "configure_stdlib_loggers",
    # Event logging
    "log_deck_created",
    "log_deck_renamed",
    "log_subtree_deleted",
    "log_card_saved",
    "log_duplicate_overridden",
]
