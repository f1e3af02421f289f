"""Time-ordered UUID7 external identifiers.

Decks, cards, fields and templates are addressed outside the storage layer
only by these ids; they sort by creation time, which keeps the unique index
on ``id`` append-mostly.
"""

import os
import time
import uuid
from typing import Any

from sqlalchemy import TypeDecorator
from sqlalchemy.dialects.postgresql import UUID as PG_UUID

_VERSION = 0x7
_VARIANT = 0b10


def uuid7() -> uuid.UUID:
    """New UUID7: 48-bit millisecond timestamp, version, variant, 74 random bits."""
    unix_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")
    rand_a = rand >> 68  # 12 bits
    rand_b = rand & ((1 << 62) - 1)

    value = (unix_ms & ((1 << 48) - 1)) << 80
    value |= _VERSION << 76
    value |= rand_a << 64
    value |= _VARIANT << 62
    value |= rand_b
    return uuid.UUID(int=value)


class UUID7(TypeDecorator):
    """Native PostgreSQL ``uuid`` column that accepts ``UUID`` or its string form."""

    impl = PG_UUID(as_uuid=True)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> uuid.UUID | None:
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
