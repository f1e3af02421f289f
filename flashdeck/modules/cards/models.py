"""
Модели SQLAlchemy для карточек.

Основные компоненты:
    - Card: карточка в колоде, созданная по шаблону
    - Field: значение одного поля шаблона на карточке
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.core.database import Base
from flashdeck.shared.mixins import IdentityMixin, TimestampMixin

if TYPE_CHECKING:
    from flashdeck.modules.decks.models import Deck
    from flashdeck.modules.templates.models import CardTemplate, TemplateField


class Card(IdentityMixin, TimestampMixin, Base):
    """
    Модель карточки.

    Шаблон карточки задаётся при создании и больше не меняется.
    После любого создания или обновления у карточки есть хотя бы одно
    поле с ролью FRONT и одно с ролью BACK.

    Attributes:
        id: Внешний идентификатор (UUID7)
        deck_id: Внешний ID колоды, которой принадлежит карточка
        template_id: Внешний ID шаблона карточки
        fields: Поля карточки в порядке добавления
        deck: Связь с колодой
        template: Связь с шаблоном
    """

    __tablename__ = "cards"

    deck_id: Mapped[UUID] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    template_id: Mapped[UUID] = mapped_column(
        ForeignKey("card_templates.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Relationships
    deck: Mapped[Deck] = relationship(back_populates="cards")
    template: Mapped[CardTemplate] = relationship(lazy="raise")
    fields: Mapped[list[Field]] = relationship(
        back_populates="card",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Field.pk",
    )

    def get_field(self, template_field_id: UUID) -> Field | None:
        """Найти поле карточки по ID поля шаблона."""
        for field in self.fields:
            if field.template_field_id == template_field_id:
                return field
        return None


class Field(IdentityMixin, TimestampMixin, Base):
    """
    Значение поля карточки.

    На одно поле шаблона приходится не более одного поля карточки.

    Attributes:
        id: Внешний идентификатор (UUID7)
        card_id: Внешний ID карточки
        template_field_id: Внешний ID поля шаблона
        content: Содержимое поля (всегда удовлетворяет типу поля шаблона)
    """

    __tablename__ = "fields"

    card_id: Mapped[UUID] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
    )
    template_field_id: Mapped[UUID] = mapped_column(
        ForeignKey("template_fields.id", ondelete="RESTRICT"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Relationships
    card: Mapped[Card] = relationship(back_populates="fields")
    template_field: Mapped[TemplateField] = relationship(lazy="raise")

    __table_args__ = (
        UniqueConstraint("card_id", "template_field_id", name="uq_fields_card_template_field"),
        Index("ix_fields_content_hash", "content", postgresql_using="hash"),
    )
