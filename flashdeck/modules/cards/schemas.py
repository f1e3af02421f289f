"""Схемы Pydantic для операций с карточками."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from flashdeck.modules.templates.schema import FieldKind, FieldRole
from flashdeck.shared.schemas import BaseSchema, UUIDSchema, UUIDTimestampSchema


class FieldInput(BaseSchema):
    """Значение одного поля шаблона в запросе."""

    template_field_id: UUID = Field(
        ...,
        description="ID поля шаблона",
    )
    content: str | None = Field(
        default=None,
        description="Содержимое поля",
        examples=["hola"],
    )


class CardCreate(BaseSchema):
    """Схема для создания карточки."""

    deck_id: UUID = Field(
        ...,
        description="ID колоды",
    )
    template_id: UUID = Field(
        ...,
        description="ID шаблона карточки",
    )
    fields: list[FieldInput] = Field(
        ...,
        min_length=2,
        description="Поля карточки (минимум FRONT и BACK)",
    )


class CardUpdate(BaseSchema):
    """Схема для обновления полей карточки.

    Передаются только изменяемые поля; остальные поля карточки не меняются.
    """

    fields: list[FieldInput] = Field(
        ...,
        min_length=1,
        description="Изменяемые поля карточки",
    )


class FieldResponse(BaseSchema):
    """Поле карточки в ответе."""

    id: UUID = Field(..., description="ID поля")
    template_field_id: UUID = Field(..., description="ID поля шаблона")
    content: str = Field(..., description="Содержимое поля")


class CardResponse(UUIDTimestampSchema):
    """Схема ответа с данными карточки."""

    deck_id: UUID = Field(
        ...,
        description="ID колоды",
    )
    template_id: UUID = Field(
        ...,
        description="ID шаблона",
    )
    fields: list[FieldResponse] = Field(
        default_factory=list,
        description="Сохранённые поля карточки",
    )
    duplicate_card_ids: list[UUID] = Field(
        default_factory=list,
        description="Карточки с совпадающим содержимым, сохранённые с разрешения клиента",
    )


class TemplateFieldViewResponse(BaseSchema):
    """Поле шаблона вместе с содержимым карточки (пустым, если поля ещё нет)."""

    template_field_id: UUID
    field_id: UUID | None = None
    name: str
    role: FieldRole
    kind: FieldKind
    options: list[str] = Field(default_factory=list)
    position: int
    content: str = ""


class CardDetailResponse(UUIDSchema):
    """Карточка с полным набором полей её шаблона."""

    deck_id: UUID
    template_id: UUID
    fields: list[TemplateFieldViewResponse] = Field(default_factory=list)
