"""FastAPI роутер для эндпоинтов колод."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from flashdeck.core.dependencies import CurrentUserId, DatabaseSession
from flashdeck.modules.decks.exceptions import (
    DeckNotFoundError,
    DeckPathConflictError,
    InvalidDeckNameError,
    NonEmptySubtreeError,
    ParentDeckNotFoundError,
)
from flashdeck.modules.decks.schemas import (
    DeckCreate,
    DeckDeleteResponse,
    DeckRename,
    DeckResponse,
    DeckTreeResponse,
    DeckWithCards,
)
from flashdeck.modules.decks.service import DeckService

router = APIRouter(prefix="/decks", tags=["Колоды"])

DeckId = Annotated[UUID, Path(description="ID колоды")]


async def get_deck_service(
    session: DatabaseSession,
) -> DeckService:
    """Получить экземпляр сервиса колод."""
    return DeckService(session)


DeckServiceDep = Annotated[DeckService, Depends(get_deck_service)]


@router.post(
    "",
    response_model=DeckResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать новую колоду",
    responses={
        404: ParentDeckNotFoundError.openapi_response(),
        409: DeckPathConflictError.openapi_response(),
        422: InvalidDeckNameError.openapi_response(),
    },
)
async def create_deck(
    data: DeckCreate,
    user_id: CurrentUserId,
    service: DeckServiceDep,
) -> DeckResponse:
    """Создать колоду.

    Путь вычисляется из пути родителя и имени; уровень доступа DEFAULT
    наследуется от родителя в момент создания.
    """
    deck = await service.create(user_id, data)
    return DeckResponse.model_validate(deck)


@router.get(
    "/tree",
    response_model=list[DeckTreeResponse],
    summary="Получить дерево колод пользователя",
)
async def get_deck_tree(
    user_id: CurrentUserId,
    service: DeckServiceDep,
) -> list[DeckTreeResponse]:
    """Вернуть все колоды пользователя в виде леса, упорядоченного по пути."""
    return await service.get_tree(user_id)


@router.get(
    "/{deck_id}",
    response_model=DeckResponse,
    summary="Получить колоду по ID",
    responses={404: DeckNotFoundError.openapi_response()},
)
async def get_deck(
    deck_id: DeckId,
    user_id: CurrentUserId,
    service: DeckServiceDep,
) -> DeckResponse:
    deck = await service.get(user_id, deck_id)
    return DeckResponse.model_validate(deck)


@router.get(
    "/{deck_id}/cards",
    response_model=DeckWithCards,
    summary="Получить колоду с карточками",
    responses={404: DeckNotFoundError.openapi_response()},
)
async def get_deck_with_cards(
    deck_id: DeckId,
    user_id: CurrentUserId,
    service: DeckServiceDep,
) -> DeckWithCards:
    return await service.get_with_cards(user_id, deck_id)


@router.patch(
    "/{deck_id}/name",
    response_model=DeckResponse,
    summary="Переименовать колоду",
    responses={
        404: DeckNotFoundError.openapi_response(),
        409: DeckPathConflictError.openapi_response(),
        422: InvalidDeckNameError.openapi_response(),
    },
)
async def rename_deck(
    deck_id: DeckId,
    data: DeckRename,
    user_id: CurrentUserId,
    service: DeckServiceDep,
) -> DeckResponse:
    """Переименовать колоду; пути всех потомков пересчитываются в той же транзакции."""
    deck = await service.rename(user_id, deck_id, data.name)
    return DeckResponse.model_validate(deck)


@router.delete(
    "/{deck_id}",
    response_model=DeckDeleteResponse,
    summary="Удалить колоду вместе с поддеревом",
    responses={
        404: DeckNotFoundError.openapi_response(),
        409: NonEmptySubtreeError.openapi_response(),
    },
)
async def delete_deck(
    deck_id: DeckId,
    user_id: CurrentUserId,
    service: DeckServiceDep,
    force: Annotated[
        bool,
        Query(description="Удалить даже если в поддереве есть карточки"),
    ] = False,
) -> DeckDeleteResponse:
    """Удалить колоду и всех её потомков.

    Без ``force`` запрос отклоняется с 409, если в поддереве есть карточки.
    """
    spec = await service.delete(user_id, deck_id, force=force)
    return DeckDeleteResponse(
        root_id=spec.root_id,
        deleted_ids=list(spec.deck_ids),
        forced=spec.forced,
    )
