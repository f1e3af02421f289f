"""
Репозиторий карточек.

Чтение и запись карточек вместе с их полями в сессии текущего запроса.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashdeck.modules.decks.models import Deck
from flashdeck.shared.errors import safe

from .models import Card, Field

logger = logging.getLogger(__name__)


class CardRepository:
    """
    Репозиторий карточек одного запроса.

    Также реализует запрос ``find_card_ids_by_content`` для DuplicateDetector.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @safe
    async def get_with_fields(self, card_id: UUID) -> Card | None:
        """Получить карточку с загруженными полями."""
        stmt = select(Card).options(selectinload(Card.fields)).where(Card.id == card_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @safe
    async def list_by_deck(self, deck_id: UUID) -> list[Card]:
        """Получить все карточки колоды с полями, в порядке создания."""
        stmt = (
            select(Card)
            .options(selectinload(Card.fields))
            .where(Card.deck_id == deck_id)
            .order_by(Card.pk)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    @safe
    async def get_deck(self, deck_id: UUID) -> Deck | None:
        """Получить колоду карточки (для проверки владельца)."""
        result = await self._session.execute(select(Deck).where(Deck.id == deck_id))
        return result.scalar_one_or_none()

    @safe
    async def find_card_ids_by_content(
        self,
        content: str,
        *,
        owner_id: UUID | None = None,
    ) -> list[UUID]:
        """
        Получить ID карточек, у которых есть поле с точно таким содержимым.

        Args:
            content: Искомое содержимое поля
            owner_id: Искать только в колодах этого владельца

        Returns:
            ID карточек без повторов
        """
        stmt = (
            select(Card.id)
            .join(Field, Field.card_id == Card.id)
            .where(Field.content == content)
            .distinct()
        )
        if owner_id is not None:
            stmt = stmt.join(Deck, Deck.id == Card.deck_id).where(Deck.owner_id == owner_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    @safe
    async def save(self, card: Card) -> Card:
        """
        Сохранить новую или изменённую карточку вместе с полями.

        Фиксация транзакции остаётся за вызывающим кодом.
        """
        self._session.add(card)
        await self._session.flush()
        await self._session.refresh(card, attribute_names=["created_at", "updated_at"])
        return card

    @safe
    async def delete(self, card: Card) -> None:
        """Удалить карточку; поля удаляются каскадно."""
        await self._session.delete(card)
        await self._session.flush()
        logger.debug("Deleted card %s", card.id, extra={"card_id": str(card.id)})
