"""Базовые схемы Pydantic для обработки API запросов и ответов."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Базовая схема с общей конфигурацией.

    Все схемы должны наследоваться от этого базового класса
    для обеспечения единообразного поведения в приложении.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        populate_by_name=True,
    )


class UUIDSchema(BaseSchema):
    """Схема с внешним идентификатором сущности."""

    id: uuid.UUID = Field(
        ...,
        description="Уникальный внешний идентификатор",
    )


class TimestampSchema(BaseSchema):
    """Схема с полями временных меток."""

    created_at: datetime | None = Field(
        default=None,
        description="Дата и время создания",
    )
    updated_at: datetime | None = Field(
        default=None,
        description="Дата и время последнего обновления",
    )


class UUIDTimestampSchema(UUIDSchema, TimestampSchema):
    """Комбинированная схема с идентификатором и временными метками."""

    pass


class HealthResponse(BaseSchema):
    """Схема ответа проверки работоспособности."""

    status: str = Field(
        ...,
        description="Общий статус работоспособности",
        examples=["healthy", "unhealthy"],
    )
    version: str | None = Field(
        default=None,
        description="Версия приложения",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(),
        description="Временная метка проверки",
    )
    dependencies: dict[str, str] | None = Field(
        default=None,
        description="Состояние зависимостей",
    )
