"""
Сервис управления карточками.

Порядок обработки создания и обновления:
    1. Согласование полей с шаблоном (FieldReconciler + FieldContentValidator)
    2. Проверка дубликатов по каждому переданному полю (в колодах владельца)
    3. Проверка структуры (FRONT и BACK)
    4. Сохранение карточки в транзакции запроса
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.config import settings
from flashdeck.modules.decks.exceptions import DeckNotFoundError
from flashdeck.modules.templates.repository import TemplateRepository
from flashdeck.shared.logging import log_card_saved, log_duplicate_overridden
from flashdeck.shared.uuid7 import uuid7

from .duplicates import DuplicateDetector
from .exceptions import CardNotFoundError
from .models import Card, Field
from .reconciler import FieldPayload, FieldReconciler, ReconciliationResult, overlay_template
from .repository import CardRepository
from .schemas import (
    CardCreate,
    CardDetailResponse,
    CardResponse,
    CardUpdate,
    FieldInput,
    TemplateFieldViewResponse,
)
from .validation import CardStructureValidator

logger = logging.getLogger(__name__)


class CardService:
    """
    Сервис управления карточками.

    Example:
        service = CardService(session)
        card = await service.create(owner_id, data, allow_duplicate=False)
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        repository: CardRepository | None = None,
        templates: TemplateRepository | None = None,
        reconciler: FieldReconciler | None = None,
        structure_validator: CardStructureValidator | None = None,
        duplicate_check_enabled: bool | None = None,
    ) -> None:
        """
        Инициализировать сервис карточек.

        Args:
            session: Асинхронная сессия SQLAlchemy текущего запроса
            repository: Репозиторий карточек
            templates: Репозиторий шаблонов
            reconciler: Согласователь полей
            structure_validator: Проверка структуры карточки
            duplicate_check_enabled: Переопределение настройки CARD_DUPLICATE_CHECK_ENABLED
        """
        self._session = session
        self._repo = repository or CardRepository(session)
        self._templates = templates or TemplateRepository(session)
        self._reconciler = reconciler or FieldReconciler()
        self._structure = structure_validator or CardStructureValidator()
        self._duplicates = DuplicateDetector(self._repo)
        self._duplicate_check_enabled = (
            settings.cards.duplicate_check_enabled
            if duplicate_check_enabled is None
            else duplicate_check_enabled
        )

    async def create(
        self,
        owner_id: UUID,
        data: CardCreate,
        *,
        allow_duplicate: bool = False,
    ) -> CardResponse:
        """
        Создать карточку.

        Args:
            owner_id: UUID владельца колоды
            data: Колода, шаблон и поля
            allow_duplicate: Сохранить даже при совпадении содержимого

        Returns:
            Сохранённая карточка

        Raises:
            DeckNotFoundError: Колода не найдена
            TemplateNotFoundError: Шаблон не найден
            DuplicateCardError: Найдено совпадающее содержимое
            TemplateFieldNotFoundError: Поле не принадлежит шаблону
            InvalidFieldContentError: Недопустимое содержимое поля
            CardStructureError: Нет поля FRONT или BACK
        """
        await self._ensure_deck_owner(owner_id, data.deck_id)
        schema = await self._templates.get_schema(data.template_id)

        payloads = self._to_payloads(data.fields)
        result = self._reconciler.reconcile([], schema, payloads)
        duplicates = await self._check_duplicates(owner_id, payloads, None, allow_duplicate)
        self._structure.validate(result.roles)

        card = Card(id=uuid7(), deck_id=data.deck_id, template_id=data.template_id, fields=[])
        self._apply(card, result)
        card = await self._repo.save(card)

        self._log_saved(card, result, created=True)
        return self._to_response(card, duplicates)

    async def update(
        self,
        owner_id: UUID,
        card_id: UUID,
        data: CardUpdate,
        *,
        allow_duplicate: bool = False,
    ) -> CardResponse:
        """
        Обновить поля карточки.

        Существующие поля обновляются на месте, отсутствующие добавляются,
        непереданные поля не меняются.

        Raises:
            CardNotFoundError: Карточка не найдена
            DuplicateCardError: Найдено совпадающее содержимое
            TemplateFieldNotFoundError: Поле не принадлежит шаблону карточки
            InvalidFieldContentError: Недопустимое содержимое поля
            CardStructureError: Нет поля FRONT или BACK
        """
        card = await self._get_owned(owner_id, card_id)
        schema = await self._templates.get_schema(card.template_id)

        payloads = self._to_payloads(data.fields)
        result = self._reconciler.reconcile(card.fields, schema, payloads)
        duplicates = await self._check_duplicates(owner_id, payloads, card.id, allow_duplicate)
        self._structure.validate(result.roles)

        self._apply(card, result)
        card = await self._repo.save(card)

        self._log_saved(card, result, created=False)
        return self._to_response(card, duplicates)

    async def get(self, owner_id: UUID, card_id: UUID) -> CardDetailResponse:
        """
        Получить карточку со всеми полями шаблона.

        Поля шаблона, которых у карточки ещё нет, возвращаются пустыми.

        Raises:
            CardNotFoundError: Карточка не найдена
        """
        card = await self._get_owned(owner_id, card_id)
        schema = await self._templates.get_schema(card.template_id)

        views = overlay_template(schema, card.fields)
        return CardDetailResponse(
            id=card.id,
            deck_id=card.deck_id,
            template_id=card.template_id,
            fields=[
                TemplateFieldViewResponse(
                    template_field_id=view.template_field_id,
                    field_id=view.field_id,
                    name=view.name,
                    role=view.role,
                    kind=view.kind,
                    options=list(view.options),
                    position=view.position,
                    content=view.content,
                )
                for view in views
            ],
        )

    async def list_by_deck(self, owner_id: UUID, deck_id: UUID) -> list[CardResponse]:
        """
        Получить карточки колоды.

        Raises:
            DeckNotFoundError: Колода не найдена
        """
        await self._ensure_deck_owner(owner_id, deck_id)
        cards = await self._repo.list_by_deck(deck_id)
        return [CardResponse.model_validate(card) for card in cards]

    async def delete(self, owner_id: UUID, card_id: UUID) -> None:
        """
        Удалить карточку.

        Raises:
            CardNotFoundError: Карточка не найдена
        """
        card = await self._get_owned(owner_id, card_id)
        await self._repo.delete(card)
        logger.info("Deleted card %s", card_id, extra={"card_id": str(card_id)})

    async def _ensure_deck_owner(self, owner_id: UUID, deck_id: UUID) -> None:
        deck = await self._repo.get_deck(deck_id)
        if deck is None or deck.owner_id != owner_id:
            raise DeckNotFoundError(deck_id)

    async def _get_owned(self, owner_id: UUID, card_id: UUID) -> Card:
        card = await self._repo.get_with_fields(card_id)
        if card is None:
            raise CardNotFoundError(card_id)

        deck = await self._repo.get_deck(card.deck_id)
        if deck is None or deck.owner_id != owner_id:
            raise CardNotFoundError(card_id)
        return card

    async def _check_duplicates(
        self,
        owner_id: UUID,
        payloads: Sequence[FieldPayload],
        card_id: UUID | None,
        allow_duplicate: bool,
    ) -> list[UUID]:
        if not self._duplicate_check_enabled:
            return []

        found: list[UUID] = []
        for payload in payloads:
            duplicates = await self._duplicates.check(
                payload.content,
                owner_id=owner_id,
                card_id=card_id,
                allow_duplicate=allow_duplicate,
            )
            if duplicates:
                log_duplicate_overridden(
                    payload.content or "",
                    [str(duplicate_id) for duplicate_id in duplicates],
                    card_id=str(card_id) if card_id is not None else None,
                )
                found.extend(duplicates)
        return list(dict.fromkeys(found))

    @staticmethod
    def _to_payloads(fields: Sequence[FieldInput]) -> list[FieldPayload]:
        return [FieldPayload(item.template_field_id, item.content) for item in fields]

    @staticmethod
    def _apply(card: Card, result: ReconciliationResult) -> None:
        """Перенести результат согласования на ORM-карточку."""
        for resolved in result.fields:
            if resolved.is_new:
                card.fields.append(
                    Field(
                        id=uuid7(),
                        template_field_id=resolved.template_field_id,
                        content=resolved.content,
                    )
                )
            elif resolved.changed:
                existing = card.get_field(resolved.template_field_id)
                if existing is not None:
                    existing.content = resolved.content

    @staticmethod
    def _to_response(card: Card, duplicates: list[UUID]) -> CardResponse:
        response = CardResponse.model_validate(card)
        response.duplicate_card_ids = duplicates
        return response

    @staticmethod
    def _log_saved(card: Card, result: ReconciliationResult, *, created: bool) -> None:
        logger.info(
            "%s card %s in deck %s",
            "Created" if created else "Updated",
            card.id,
            card.deck_id,
            extra={"card_id": str(card.id), "deck_id": str(card.deck_id)},
        )
        log_card_saved(
            str(card.id),
            str(card.deck_id),
            len(result.created),
            len(result.updated),
            created=created,
        )
