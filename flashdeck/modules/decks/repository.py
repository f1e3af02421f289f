"""
Репозиторий колод.

Тонкий слой доступа к данным: читает и пишет строки таблицы ``decks``
в рамках сессии текущего запроса. Технические ошибки БД переводятся
в доменные декоратором ``@safe``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flashdeck.modules.cards.models import Card
from flashdeck.shared.errors import safe

from .engine import PathUpdate
from .models import Deck

logger = logging.getLogger(__name__)


class DeckRepository:
    """
    Репозиторий колод одного запроса.

    Example:
        repo = DeckRepository(session)
        decks = await repo.list_by_owner(owner_id, for_update=True)
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @safe
    async def list_by_owner(
        self,
        owner_id: UUID,
        *,
        for_update: bool = False,
    ) -> list[Deck]:
        """
        Получить все колоды владельца, упорядоченные по пути.

        Args:
            owner_id: UUID владельца
            for_update: Заблокировать строки до конца транзакции

        Returns:
            Плоский список колод владельца
        """
        stmt = select(Deck).where(Deck.owner_id == owner_id).order_by(Deck.path)
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    @safe
    async def get_by_id(self, deck_id: UUID) -> Deck | None:
        """Получить колоду по внешнему ID."""
        result = await self._session.execute(select(Deck).where(Deck.id == deck_id))
        return result.scalar_one_or_none()

    @safe
    async def get_with_cards(self, deck_id: UUID) -> Deck | None:
        """Получить колоду с загруженными карточками."""
        stmt = select(Deck).options(selectinload(Deck.cards)).where(Deck.id == deck_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @safe
    async def get_by_path(self, owner_id: UUID, path: str) -> Deck | None:
        """Получить колоду владельца по точному пути."""
        stmt = select(Deck).where(Deck.owner_id == owner_id, Deck.path == path)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @safe
    async def add(self, deck: Deck) -> Deck:
        """Сохранить новую колоду и получить сгенерированные значения."""
        self._session.add(deck)
        await self._session.flush()
        await self._session.refresh(deck)
        return deck

    @safe
    async def refresh(self, deck: Deck) -> Deck:
        """Перечитать колоду после записи (серверные значения, updated_at)."""
        await self._session.refresh(deck)
        return deck

    @safe
    async def apply_path_updates(self, updates: Sequence[PathUpdate]) -> int:
        """
        Применить пакет изменений путей в текущей транзакции.

        Args:
            updates: Изменения путей, родитель раньше потомка

        Returns:
            Количество обновлённых колод
        """
        for item in updates:
            await self._session.execute(
                update(Deck)
                .where(Deck.id == item.deck_id)
                .values(path=item.new_path)
                .execution_options(synchronize_session="fetch")
            )
        await self._session.flush()
        return len(updates)

    @safe
    async def delete_many(self, deck_ids: Iterable[UUID]) -> int:
        """
        Удалить колоды по внешним ID.

        Карточки и поля удаляются каскадно на уровне БД.

        Returns:
            Количество удалённых колод
        """
        ids = list(deck_ids)
        if not ids:
            return 0

        result = await self._session.execute(
            delete(Deck).where(Deck.id.in_(ids)).execution_options(synchronize_session=False)
        )
        await self._session.flush()
        logger.debug("Deleted %d deck rows", result.rowcount, extra={"deck_count": len(ids)})
        return result.rowcount

    @safe
    async def card_counts(self, deck_ids: Iterable[UUID]) -> dict[UUID, int]:
        """
        Посчитать карточки в каждой колоде.

        Колоды без карточек в результат не попадают.
        """
        ids = list(deck_ids)
        if not ids:
            return {}

        stmt = (
            select(Card.deck_id, func.count(Card.pk))
            .where(Card.deck_id.in_(ids))
            .group_by(Card.deck_id)
        )
        result = await self._session.execute(stmt)
        return {deck_id: count for deck_id, count in result.all()}
