"""
Модели SQLAlchemy для колод.

Основные компоненты:
    - AccessLevel: уровень доступа к колоде
    - Deck: узел дерева колод владельца, адресуемый путём ``A::B::C``
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.core.database import Base
from flashdeck.shared.mixins import IdentityMixin, TimestampMixin
from flashdeck.shared.uuid7 import UUID7

if TYPE_CHECKING:
    from flashdeck.modules.cards.models import Card


class AccessLevel(str, Enum):
    """
    Уровень доступа к колоде.

    DEFAULT допустим только как входное значение при создании:
    он означает «унаследовать от родителя» и никогда не сохраняется.
    """

    PRIVATE = "private"
    SHARED = "shared"
    PUBLIC = "public"
    DEFAULT = "default"


class Deck(IdentityMixin, TimestampMixin, Base):
    """
    Модель колоды.

    Иерархия материализована в строке пути: путь дочерней колоды равен
    ``parent.path + "::" + name``. Путь уникален в пределах владельца.

    Attributes:
        pk: Внутренний ключ (не покидает слой хранения)
        id: Внешний идентификатор (UUID7)
        owner_id: UUID владельца колоды
        name: Название колоды
        access_level: Разрешённый при создании уровень доступа
        parent_id: Внешний ID родительской колоды (None для корня)
        path: Материализованный путь колоды
        description: Описание колоды (опционально)
        cards: Карточки в колоде
    """

    __tablename__ = "decks"

    owner_id: Mapped[UUID] = mapped_column(UUID7, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    access_level: Mapped[AccessLevel] = mapped_column(
        SQLEnum(AccessLevel, values_callable=lambda x: [e.value for e in x]),
        default=AccessLevel.PRIVATE,
        nullable=False,
    )
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    path: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    cards: Mapped[list[Card]] = relationship(
        back_populates="deck",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        Index("ix_decks_owner_parent", "owner_id", "parent_id"),
        UniqueConstraint("owner_id", "path", name="uq_decks_owner_path"),
    )
