"""
FastAPI зависимости (dependencies).
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.shared.errors import InvalidInputError

from .database import get_db

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user_id(
    x_user_id: Annotated[str, Header(alias="X-User-Id")],
) -> UUID:
    """
    Получить идентификатор владельца из заголовка запроса.

    Аутентификация выполняется внешним слоем; сюда приходит уже
    проверенный идентификатор пользователя.

    Raises:
        InvalidInputError: Заголовок не является UUID.
    """
    try:
        return UUID(x_user_id)
    except ValueError as e:
        raise InvalidInputError(
            "X-User-Id header must be a UUID",
            details={"field": "X-User-Id", "value": x_user_id},
        ) from e


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
