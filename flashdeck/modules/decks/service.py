"""
Сервис управления колодами.

Связывает движок дерева колод с хранилищем: читает колоды владельца
внутри транзакции запроса (с блокировкой строк), передаёт их движку
и применяет полученную спецификацию изменений.

Основные компоненты:
    - DeckService: создание, переименование, удаление поддерева и чтение дерева
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.shared.logging import log_deck_created, log_deck_renamed, log_subtree_deleted

from .engine import DeckTreeEngine, DeletionSpec
from .exceptions import DeckNotFoundError
from .models import Deck
from .repository import DeckRepository
from .schemas import DeckCreate, DeckTreeResponse, DeckWithCards
from .tree import TreeIndex

logger = logging.getLogger(__name__)


class DeckService:
    """
    Сервис управления колодами.

    Все проверки инвариантов дерева выполняет DeckTreeEngine; сервис
    отвечает только за чтение данных и запись результата в одной транзакции.

    Example:
        async with db_manager.session() as session:
            service = DeckService(session)
            deck = await service.create(owner_id, DeckCreate(name="Spanish"))
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        repository: DeckRepository | None = None,
        engine: DeckTreeEngine | None = None,
    ) -> None:
        """
        Инициализировать сервис колод.

        Args:
            session: Асинхронная сессия SQLAlchemy текущего запроса
            repository: Репозиторий колод (по умолчанию создаётся из сессии)
            engine: Движок дерева колод
        """
        self._session = session
        self._repo = repository or DeckRepository(session)
        self._engine = engine or DeckTreeEngine()

    async def create(self, owner_id: UUID, data: DeckCreate) -> Deck:
        """
        Создать новую колоду.

        Args:
            owner_id: UUID владельца
            data: Имя, путь родителя, уровень доступа и описание

        Returns:
            Созданная колода

        Raises:
            InvalidDeckNameError: Пустое имя или имя с разделителем
            ParentDeckNotFoundError: Путь родителя не найден
            DeckPathConflictError: Колода с таким путём уже существует
        """
        owner_decks = await self._repo.list_by_owner(owner_id, for_update=True)
        spec = self._engine.create(owner_decks, data.parent_path, data.name, data.access_level)

        deck = Deck(
            owner_id=owner_id,
            name=spec.name,
            path=spec.path,
            access_level=spec.access_level,
            parent_id=spec.parent_id,
            description=data.description,
        )
        deck = await self._repo.add(deck)

        logger.info(
            "Created deck %s at %s",
            deck.id,
            deck.path,
            extra={"deck_id": str(deck.id), "owner_id": str(owner_id)},
        )
        log_deck_created(
            str(deck.id),
            deck.path,
            deck.access_level.value,
            owner_id=str(owner_id),
        )
        return deck

    async def get(self, owner_id: UUID, deck_id: UUID) -> Deck:
        """
        Получить колоду владельца по ID.

        Raises:
            DeckNotFoundError: Колода не существует или принадлежит другому владельцу
        """
        deck = await self._repo.get_by_id(deck_id)
        if deck is None or deck.owner_id != owner_id:
            raise DeckNotFoundError(deck_id)
        return deck

    async def get_with_cards(self, owner_id: UUID, deck_id: UUID) -> DeckWithCards:
        """
        Получить колоду вместе с её карточками.

        Raises:
            DeckNotFoundError: Колода не найдена
        """
        deck = await self._repo.get_with_cards(deck_id)
        if deck is None or deck.owner_id != owner_id:
            raise DeckNotFoundError(deck_id)

        response = DeckWithCards.model_validate(deck)
        response.card_count = len(response.cards)
        return response

    async def get_tree(self, owner_id: UUID) -> list[DeckTreeResponse]:
        """
        Построить лес колод владельца.

        Дерево собирается итеративно по индексу: каждый узел добавляется
        к уже созданному узлу родителя.

        Returns:
            Корневые колоды с вложенными дочерними, упорядоченные по пути
        """
        decks = await self._repo.list_by_owner(owner_id)
        index = TreeIndex(decks)

        nodes: dict[UUID, DeckTreeResponse] = {}
        forest: list[DeckTreeResponse] = []
        for root in index.roots():
            for deck in index.collect_subtree(root):
                node = DeckTreeResponse.model_validate(deck)
                nodes[deck.id] = node
                if deck is root:
                    forest.append(node)
                else:
                    nodes[deck.parent_id].children.append(node)

        return forest

    async def rename(self, owner_id: UUID, deck_id: UUID, new_name: str) -> Deck:
        """
        Переименовать колоду и пересчитать пути всех потомков.

        Args:
            owner_id: UUID владельца
            deck_id: ID переименовываемой колоды
            new_name: Новое имя

        Returns:
            Обновлённая колода

        Raises:
            DeckNotFoundError: Колода не найдена
            InvalidDeckNameError: Пустое имя или имя с разделителем
            DeckPathConflictError: Новый путь занят
        """
        owner_decks = await self._repo.list_by_owner(owner_id, for_update=True)
        target = next((deck for deck in owner_decks if deck.id == deck_id), None)
        if target is None:
            raise DeckNotFoundError(deck_id)

        spec = self._engine.rename(target, new_name, owner_decks)

        target.name = spec.new_name
        target.path = spec.new_path
        await self._repo.apply_path_updates(spec.path_updates)
        await self._repo.refresh(target)

        logger.info(
            "Renamed deck %s: %s -> %s",
            deck_id,
            spec.old_path,
            spec.new_path,
            extra={
                "deck_id": str(deck_id),
                "descendants_updated": len(spec.descendant_updates),
            },
        )
        log_deck_renamed(
            str(deck_id),
            spec.old_path,
            spec.new_path,
            len(spec.descendant_updates),
        )
        return target

    async def delete(
        self,
        owner_id: UUID,
        deck_id: UUID,
        *,
        force: bool = False,
    ) -> DeletionSpec:
        """
        Удалить колоду вместе со всем поддеревом.

        Без ``force`` удаление отклоняется, если хотя бы одна колода
        поддерева содержит карточки; в этом случае ничего не удаляется.

        Returns:
            Спецификация удаления (ID удалённых колод, корень первым)

        Raises:
            DeckNotFoundError: Колода не найдена
            NonEmptySubtreeError: В поддереве есть карточки, ``force`` не указан
        """
        owner_decks = await self._repo.list_by_owner(owner_id, for_update=True)
        target = next((deck for deck in owner_decks if deck.id == deck_id), None)
        if target is None:
            raise DeckNotFoundError(deck_id)

        subtree_ids = [deck.id for deck in TreeIndex(owner_decks).collect_subtree(target)]
        card_counts = await self._repo.card_counts(subtree_ids)

        spec = self._engine.delete(target, owner_decks, card_counts, force=force)
        await self._repo.delete_many(spec.deck_ids)

        logger.info(
            "Deleted deck subtree %s (%d decks)",
            deck_id,
            len(spec.deck_ids),
            extra={"deck_id": str(deck_id), "forced": spec.forced},
        )
        log_subtree_deleted(str(deck_id), len(spec.deck_ids), forced=spec.forced)
        return spec
