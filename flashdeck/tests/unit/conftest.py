"""Pytest configuration for unit tests.

This module provides fixtures for unit testing with mocked dependencies.
It imports all SQLAlchemy models to ensure mapper initialization happens correctly.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

# Import all models to ensure SQLAlchemy mapper is properly configured
# This is needed because models reference each other through relationships
from flashdeck.modules.cards.models import Card, Field
from flashdeck.modules.decks.models import AccessLevel, Deck
from flashdeck.modules.templates.models import CardTemplate, TemplateField  # noqa: F401
from flashdeck.modules.templates.schema import (
    FieldRole,
    FieldType,
    TemplateFieldDef,
    TemplateSchema,
)


@pytest.fixture
def mock_session():
    """Create a mock AsyncSession for testing."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def owner_id():
    """Create a sample owner ID."""
    return uuid4()


@pytest.fixture
def make_deck(owner_id):
    """Factory for detached Deck rows with a consistent path."""

    def _make(
        name: str,
        parent: Deck | None = None,
        *,
        access_level: AccessLevel = AccessLevel.PRIVATE,
        owner=None,
    ) -> Deck:
        now = datetime.now(timezone.utc)
        return Deck(
            id=uuid4(),
            owner_id=owner or owner_id,
            name=name,
            path=f"{parent.path}::{name}" if parent is not None else name,
            parent_id=parent.id if parent is not None else None,
            access_level=access_level,
            description=None,
            created_at=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def basic_schema():
    """Template with FRONT, BACK, HINT and an enumerated EXTRA field."""
    template_id = uuid4()
    return TemplateSchema(
        template_id=template_id,
        fields=(
            TemplateFieldDef(uuid4(), "Front", FieldRole.FRONT, 0),
            TemplateFieldDef(uuid4(), "Back", FieldRole.BACK, 1),
            TemplateFieldDef(uuid4(), "Hint", FieldRole.HINT, 2),
            TemplateFieldDef(
                uuid4(),
                "Part of speech",
                FieldRole.EXTRA,
                3,
                FieldType.enum(["noun", "verb", "adjective"]),
            ),
        ),
    )


@pytest.fixture
def make_card(owner_id):
    """Factory for detached Card rows with fields."""

    def _make(deck_id=None, template_id=None, contents=None) -> Card:
        now = datetime.now(timezone.utc)
        card = Card(
            id=uuid4(),
            deck_id=deck_id or uuid4(),
            template_id=template_id or uuid4(),
            created_at=now,
            updated_at=now,
            fields=[],
        )
        for template_field_id, content in (contents or {}).items():
            card.fields.append(
                Field(id=uuid4(), template_field_id=template_field_id, content=content)
            )
        return card

    return _make
