"""Схемы Pydantic для операций с колодами."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from flashdeck.shared.schemas import BaseSchema, UUIDTimestampSchema

from .models import AccessLevel


class DeckCreate(BaseSchema):
    """Схема для создания новой колоды.

    Путь не передаётся клиентом: он вычисляется из пути родителя и имени.
    """

    name: str = Field(
        ...,
        max_length=255,
        description="Название колоды (без разделителя '::')",
        examples=["Spanish"],
    )
    parent_path: str | None = Field(
        default=None,
        description="Путь родительской колоды; пусто для корневой колоды",
        examples=["Languages"],
    )
    access_level: AccessLevel | None = Field(
        default=None,
        description="Уровень доступа; DEFAULT наследует уровень родителя",
    )
    description: str | None = Field(
        default=None,
        max_length=2000,
        description="Описание колоды (опционально)",
    )


class DeckRename(BaseSchema):
    """Схема для переименования колоды."""

    name: str = Field(
        ...,
        max_length=255,
        description="Новое название колоды",
        examples=["Castellano"],
    )


class DeckResponse(UUIDTimestampSchema):
    """Схема ответа с данными колоды."""

    name: str = Field(
        ...,
        description="Название колоды",
    )
    path: str = Field(
        ...,
        description="Материализованный путь колоды",
        examples=["Languages::Spanish"],
    )
    access_level: AccessLevel = Field(
        ...,
        description="Уровень доступа",
    )
    owner_id: UUID = Field(
        ...,
        description="ID владельца колоды",
    )
    parent_id: UUID | None = Field(
        default=None,
        description="ID родительской колоды",
    )
    description: str | None = Field(
        default=None,
        description="Описание колоды",
    )


class DeckTreeResponse(DeckResponse):
    """Схема колоды с вложенными дочерними колодами.

    Используется для отображения иерархической структуры колод.
    """

    children: list[DeckTreeResponse] = Field(
        default_factory=list,
        description="Дочерние колоды в иерархии",
    )


class CardBriefResponse(BaseSchema):
    """Краткая информация о карточке для списка колоды."""

    id: UUID = Field(
        ...,
        description="Уникальный идентификатор карточки",
    )
    template_id: UUID = Field(
        ...,
        description="ID шаблона карточки",
    )


class DeckWithCards(DeckResponse):
    """Схема ответа с колодой и связанными карточками."""

    cards: list[CardBriefResponse] = Field(
        default_factory=list,
        description="Карточки в этой колоде",
    )
    card_count: int = Field(
        default=0,
        description="Общее количество карточек в колоде",
    )


class DeckDeleteResponse(BaseSchema):
    """Результат удаления поддерева колод."""

    root_id: UUID = Field(
        ...,
        description="ID корня удалённого поддерева",
    )
    deleted_ids: list[UUID] = Field(
        default_factory=list,
        description="ID всех удалённых колод, корень первым",
    )
    forced: bool = Field(
        default=False,
        description="Удалены ли колоды, содержавшие карточки",
    )
