"""SQLAlchemy model mixins for common functionality."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from .uuid7 import UUID7, uuid7


class IdentityMixin:
    """Mixin providing an internal surrogate key and an external identifier.

    ``pk`` is the storage key used for joins inside the database and is never
    exposed past the repository layer. ``id`` is the opaque UUID7 token that
    crosses every other boundary; foreign keys reference it so that parent
    and owner references are external ids as well.

    Example:
        class Deck(IdentityMixin, Base):
            __tablename__ = "decks"
            name: Mapped[str] = mapped_column(String(255))
    """

    pk: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID7,
        unique=True,
        default=uuid7,
        nullable=False,
    )


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamps.

    Automatically sets created_at on insert and updates updated_at
    on every update operation.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
