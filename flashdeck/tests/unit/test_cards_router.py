"""Unit tests for cards router endpoints."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from flashdeck.api.cards import get_card_service
from flashdeck.core.dependencies import get_current_user_id
from flashdeck.modules.cards.exceptions import (
    CardNotFoundError,
    CardStructureError,
    DuplicateCardError,
    InvalidFieldContentError,
)
from flashdeck.modules.cards.schemas import (
    CardDetailResponse,
    CardResponse,
    FieldResponse,
    TemplateFieldViewResponse,
)
from flashdeck.modules.cards.service import CardService
from flashdeck.modules.templates.schema import FieldKind, FieldRole


@pytest.fixture
def app_with_mocked_db():
    """Create app with mocked database dependency."""
    from flashdeck.core.database import get_db
    from flashdeck.main import create_app

    app = create_app()

    async def override_get_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def mock_service():
    return AsyncMock(spec=CardService)


@pytest.fixture
def client(app_with_mocked_db, mock_service, owner_id):
    app_with_mocked_db.dependency_overrides[get_current_user_id] = lambda: owner_id
    app_with_mocked_db.dependency_overrides[get_card_service] = lambda: mock_service
    return TestClient(app_with_mocked_db, raise_server_exceptions=False)


@pytest.fixture
def card_payload():
    return {
        "deck_id": str(uuid4()),
        "template_id": str(uuid4()),
        "fields": [
            {"template_field_id": str(uuid4()), "content": "hola"},
            {"template_field_id": str(uuid4()), "content": "hello"},
        ],
    }


def _card_response(payload) -> CardResponse:
    return CardResponse(
        id=uuid4(),
        deck_id=payload["deck_id"],
        template_id=payload["template_id"],
        fields=[
            FieldResponse(id=uuid4(), template_field_id=item["template_field_id"], content=item["content"])
            for item in payload["fields"]
        ],
    )


class TestCreateCardEndpoint:
    """Tests for POST /api/cards endpoint."""

    def test_create_card_success(self, client, mock_service, card_payload):
        mock_service.create.return_value = _card_response(card_payload)

        response = client.post("/api/cards", json=card_payload)

        assert response.status_code == status.HTTP_201_CREATED
        assert [f["content"] for f in response.json()["fields"]] == ["hola", "hello"]
        assert mock_service.create.await_args.kwargs == {"allow_duplicate": False}

    def test_create_card_duplicate(self, client, mock_service, card_payload):
        existing = uuid4()
        mock_service.create.side_effect = DuplicateCardError("hola", [existing])

        response = client.post("/api/cards", json=card_payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["error"] == "DUPLICATE_CARD"
        assert body["details"]["duplicate_card_ids"] == [str(existing)]

    def test_create_card_allow_duplicate(self, client, mock_service, card_payload):
        mock_service.create.return_value = _card_response(card_payload)

        response = client.post(
            "/api/cards", json=card_payload, params={"allow_duplicate": "true"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert mock_service.create.await_args.kwargs == {"allow_duplicate": True}

    def test_create_card_structure_error(self, client, mock_service, card_payload):
        mock_service.create.side_effect = CardStructureError(["back"])

        response = client.post("/api/cards", json=card_payload)

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "CARD_STRUCTURE"
        assert body["details"]["missing_roles"] == ["back"]

    def test_create_card_invalid_option(self, client, mock_service, card_payload):
        field_id = uuid4()
        mock_service.create.side_effect = InvalidFieldContentError(field_id, "x", ["a", "b"])

        response = client.post("/api/cards", json=card_payload)

        assert response.status_code == 422
        assert response.json()["details"]["expected"] == ["a", "b"]

    def test_create_card_requires_two_fields(self, client, card_payload):
        card_payload["fields"] = card_payload["fields"][:1]

        response = client.post("/api/cards", json=card_payload)

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_INPUT"


class TestCardEndpoints:
    def test_get_card(self, client, mock_service):
        card_id = uuid4()
        mock_service.get.return_value = CardDetailResponse(
            id=card_id,
            deck_id=uuid4(),
            template_id=uuid4(),
            fields=[
                TemplateFieldViewResponse(
                    template_field_id=uuid4(),
                    name="Front",
                    role=FieldRole.FRONT,
                    kind=FieldKind.TEXT,
                    position=0,
                    content="hola",
                ),
                TemplateFieldViewResponse(
                    template_field_id=uuid4(),
                    name="Hint",
                    role=FieldRole.HINT,
                    kind=FieldKind.TEXT,
                    position=1,
                ),
            ],
        )

        response = client.get(f"/api/cards/{card_id}")

        assert response.status_code == status.HTTP_200_OK
        fields = response.json()["fields"]
        assert [f["role"] for f in fields] == ["front", "hint"]
        assert fields[1]["content"] == ""
        assert fields[1]["field_id"] is None

    def test_get_card_not_found(self, client, mock_service):
        card_id = uuid4()
        mock_service.get.side_effect = CardNotFoundError(card_id)

        response = client.get(f"/api/cards/{card_id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "CARD_NOT_FOUND"

    def test_update_card(self, client, mock_service, card_payload):
        card_id = uuid4()
        mock_service.update.return_value = _card_response(card_payload)

        response = client.patch(
            f"/api/cards/{card_id}",
            json={"fields": card_payload["fields"][:1]},
        )

        assert response.status_code == status.HTTP_200_OK
        _, called_id, data = mock_service.update.await_args.args
        assert called_id == card_id
        assert len(data.fields) == 1

    def test_list_cards(self, client, mock_service, card_payload):
        mock_service.list_by_deck.return_value = [_card_response(card_payload)]

        response = client.get("/api/cards", params={"deck_id": card_payload["deck_id"]})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 1

    def test_delete_card(self, client, mock_service):
        card_id = uuid4()

        response = client.delete(f"/api/cards/{card_id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_service.delete.assert_awaited_once()
