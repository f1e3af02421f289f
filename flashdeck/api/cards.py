"""FastAPI роутер для эндпоинтов карточек."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response, status

from flashdeck.core.dependencies import CurrentUserId, DatabaseSession
from flashdeck.modules.cards.exceptions import (
    CardNotFoundError,
    CardStructureError,
    DuplicateCardError,
)
from flashdeck.modules.cards.schemas import (
    CardCreate,
    CardDetailResponse,
    CardResponse,
    CardUpdate,
)
from flashdeck.modules.cards.service import CardService
from flashdeck.modules.decks.exceptions import DeckNotFoundError

router = APIRouter(prefix="/cards", tags=["Карточки"])

CardId = Annotated[UUID, Path(description="ID карточки")]
AllowDuplicate = Annotated[
    bool,
    Query(description="Сохранить карточку даже при совпадении содержимого"),
]


async def get_card_service(
    session: DatabaseSession,
) -> CardService:
    """Получить экземпляр сервиса карточек."""
    return CardService(session)


CardServiceDep = Annotated[CardService, Depends(get_card_service)]


@router.post(
    "",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать карточку",
    responses={
        404: DeckNotFoundError.openapi_response(),
        409: DuplicateCardError.openapi_response(),
        422: CardStructureError.openapi_response(),
    },
)
async def create_card(
    data: CardCreate,
    user_id: CurrentUserId,
    service: CardServiceDep,
    allow_duplicate: AllowDuplicate = False,
) -> CardResponse:
    """Создать карточку по шаблону.

    При совпадении содержимого поля с другой карточкой возвращается 409;
    повторный запрос с ``allow_duplicate=true`` сохраняет карточку.
    """
    return await service.create(user_id, data, allow_duplicate=allow_duplicate)


@router.get(
    "",
    response_model=list[CardResponse],
    summary="Получить карточки колоды",
    responses={404: DeckNotFoundError.openapi_response()},
)
async def list_cards(
    user_id: CurrentUserId,
    service: CardServiceDep,
    deck_id: Annotated[UUID, Query(description="ID колоды")],
) -> list[CardResponse]:
    return await service.list_by_deck(user_id, deck_id)


@router.get(
    "/{card_id}",
    response_model=CardDetailResponse,
    summary="Получить карточку со всеми полями шаблона",
    responses={404: CardNotFoundError.openapi_response()},
)
async def get_card(
    card_id: CardId,
    user_id: CurrentUserId,
    service: CardServiceDep,
) -> CardDetailResponse:
    return await service.get(user_id, card_id)


@router.patch(
    "/{card_id}",
    response_model=CardResponse,
    summary="Обновить поля карточки",
    responses={
        404: CardNotFoundError.openapi_response(),
        409: DuplicateCardError.openapi_response(),
        422: CardStructureError.openapi_response(),
    },
)
async def update_card(
    card_id: CardId,
    data: CardUpdate,
    user_id: CurrentUserId,
    service: CardServiceDep,
    allow_duplicate: AllowDuplicate = False,
) -> CardResponse:
    """Частично обновить поля карточки; непереданные поля не меняются."""
    return await service.update(user_id, card_id, data, allow_duplicate=allow_duplicate)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить карточку",
    responses={404: CardNotFoundError.openapi_response()},
)
async def delete_card(
    card_id: CardId,
    user_id: CurrentUserId,
    service: CardServiceDep,
) -> Response:
    await service.delete(user_id, card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
