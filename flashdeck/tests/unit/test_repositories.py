"""Unit tests for the deck, card and template repositories.

Statements are captured from a mocked AsyncSession and compiled with the
PostgreSQL dialect, so the SQL shape and bound values are checked without
a live database.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.modules.cards.models import Card, Field
from flashdeck.modules.cards.repository import CardRepository
from flashdeck.modules.decks.engine import PathUpdate
from flashdeck.modules.decks.models import Deck
from flashdeck.modules.decks.repository import DeckRepository
from flashdeck.modules.templates.exceptions import TemplateNotFoundError
from flashdeck.modules.templates.models import CardTemplate, TemplateField
from flashdeck.modules.templates.repository import TemplateRepository
from flashdeck.modules.templates.schema import FieldKind, FieldRole

# ==================== Fixtures ====================


@pytest.fixture
def mock_session():
    """Create a mock AsyncSession for testing."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def deck_repo(mock_session):
    return DeckRepository(mock_session)


@pytest.fixture
def card_repo(mock_session):
    return CardRepository(mock_session)


@pytest.fixture
def template_repo(mock_session):
    return TemplateRepository(mock_session)


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _scalars_result(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def _compiled(statement):
    return statement.compile(dialect=postgresql.dialect())


def _executed(mock_session, index: int = 0):
    """Compiled form of the ``index``-th statement passed to ``execute``."""
    return _compiled(mock_session.execute.await_args_list[index].args[0])


# ==================== DeckRepository Tests ====================


class TestDeckRepositoryReads:
    """Tests for DeckRepository lookups."""

    @pytest.mark.asyncio
    async def test_list_by_owner_ordered_by_path(self, deck_repo, mock_session, make_deck, owner_id):
        decks = [make_deck("A"), make_deck("B")]
        mock_session.execute.return_value = _scalars_result(decks)

        result = await deck_repo.list_by_owner(owner_id)

        assert result == decks
        compiled = _executed(mock_session)
        assert "WHERE decks.owner_id = " in str(compiled)
        assert str(compiled).endswith("ORDER BY decks.path")
        assert list(compiled.params.values()) == [owner_id]

    @pytest.mark.asyncio
    async def test_list_by_owner_for_update_locks_rows(self, deck_repo, mock_session, owner_id):
        mock_session.execute.return_value = _scalars_result([])

        await deck_repo.list_by_owner(owner_id, for_update=True)

        assert "FOR UPDATE" in str(_executed(mock_session))

    @pytest.mark.asyncio
    async def test_get_by_path(self, deck_repo, mock_session, make_deck, owner_id):
        deck = make_deck("Spanish", make_deck("Languages"))
        mock_session.execute.return_value = _scalar_result(deck)

        result = await deck_repo.get_by_path(owner_id, "Languages::Spanish")

        assert result is deck
        compiled = _executed(mock_session)
        assert "decks.owner_id = " in str(compiled)
        assert "decks.path = " in str(compiled)
        assert set(compiled.params.values()) == {owner_id, "Languages::Spanish"}

    @pytest.mark.asyncio
    async def test_get_by_path_not_found(self, deck_repo, mock_session, owner_id):
        mock_session.execute.return_value = _scalar_result(None)

        assert await deck_repo.get_by_path(owner_id, "Missing") is None


class TestDeckRepositoryApplyPathUpdates:
    """Tests for DeckRepository.apply_path_updates."""

    @pytest.mark.asyncio
    async def test_one_update_per_deck_in_order(self, deck_repo, mock_session):
        first, second = uuid4(), uuid4()
        updates = [
            PathUpdate(first, "A", "Z"),
            PathUpdate(second, "A::B", "Z::B"),
        ]

        count = await deck_repo.apply_path_updates(updates)

        assert count == 2
        assert mock_session.execute.await_count == 2
        for index, item in enumerate(updates):
            statement = mock_session.execute.await_args_list[index].args[0]
            compiled = _compiled(statement)
            sql = str(compiled)
            assert sql.startswith("UPDATE decks SET ")
            assert "path=" in sql
            assert compiled.params["path"] == item.new_path
            assert item.deck_id in compiled.params.values()
            assert statement.get_execution_options()["synchronize_session"] == "fetch"
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_batch(self, deck_repo, mock_session):
        assert await deck_repo.apply_path_updates([]) == 0
        mock_session.execute.assert_not_awaited()


class TestDeckRepositoryDeleteMany:
    """Tests for DeckRepository.delete_many."""

    @pytest.mark.asyncio
    async def test_deletes_all_ids_in_one_statement(self, deck_repo, mock_session):
        ids = [uuid4(), uuid4(), uuid4()]
        result = MagicMock()
        result.rowcount = 3
        mock_session.execute.return_value = result

        deleted = await deck_repo.delete_many(iter(ids))

        assert deleted == 3
        mock_session.execute.assert_awaited_once()
        compiled = _executed(mock_session)
        assert str(compiled).startswith("DELETE FROM decks WHERE decks.id IN")
        assert list(compiled.params.values()) == [ids]
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_ids(self, deck_repo, mock_session):
        assert await deck_repo.delete_many([]) == 0
        mock_session.execute.assert_not_awaited()

    def test_cards_and_fields_cascade_with_their_deck(self):
        """Deleting deck rows removes their cards, and those cards' fields, in the database."""
        (card_fk,) = Card.__table__.c.deck_id.foreign_keys
        (field_fk,) = Field.__table__.c.card_id.foreign_keys
        (parent_fk,) = Deck.__table__.c.parent_id.foreign_keys

        assert card_fk.ondelete == "CASCADE"
        assert field_fk.ondelete == "CASCADE"
        assert parent_fk.ondelete == "CASCADE"


class TestDeckRepositoryCardCounts:
    """Tests for DeckRepository.card_counts."""

    @pytest.mark.asyncio
    async def test_grouped_count(self, deck_repo, mock_session):
        with_cards, empty = uuid4(), uuid4()
        result = MagicMock()
        result.all.return_value = [(with_cards, 4)]
        mock_session.execute.return_value = result

        counts = await deck_repo.card_counts([with_cards, empty])

        assert counts == {with_cards: 4}
        sql = str(_executed(mock_session))
        assert "count(cards.pk)" in sql
        assert "WHERE cards.deck_id IN" in sql
        assert sql.endswith("GROUP BY cards.deck_id")

    @pytest.mark.asyncio
    async def test_no_ids(self, deck_repo, mock_session):
        assert await deck_repo.card_counts([]) == {}
        mock_session.execute.assert_not_awaited()


# ==================== CardRepository Tests ====================


class TestCardRepositoryContentLookup:
    """Tests for CardRepository.find_card_ids_by_content."""

    @pytest.mark.asyncio
    async def test_distinct_card_ids_for_content(self, card_repo, mock_session):
        card_id = uuid4()
        mock_session.execute.return_value = _scalars_result([card_id])

        result = await card_repo.find_card_ids_by_content("hola")

        assert result == [card_id]
        compiled = _executed(mock_session)
        sql = str(compiled)
        assert sql.startswith("SELECT DISTINCT cards.id")
        assert "JOIN fields ON fields.card_id = cards.id" in sql
        assert "JOIN decks" not in sql
        assert list(compiled.params.values()) == ["hola"]

    @pytest.mark.asyncio
    async def test_owner_filter_joins_decks(self, card_repo, mock_session, owner_id):
        mock_session.execute.return_value = _scalars_result([])

        await card_repo.find_card_ids_by_content("hola", owner_id=owner_id)

        compiled = _executed(mock_session)
        sql = str(compiled)
        assert "JOIN decks ON decks.id = cards.deck_id" in sql
        assert "decks.owner_id = " in sql
        assert set(compiled.params.values()) == {"hola", owner_id}


class TestCardRepositoryWrites:
    """Tests for CardRepository.save and delete."""

    @pytest.mark.asyncio
    async def test_save_refreshes_only_timestamps(self, card_repo, mock_session, make_card):
        card = make_card()

        result = await card_repo.save(card)

        assert result is card
        mock_session.add.assert_called_once_with(card)
        mock_session.flush.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(
            card, attribute_names=["created_at", "updated_at"]
        )

    @pytest.mark.asyncio
    async def test_delete(self, card_repo, mock_session, make_card):
        card = make_card()

        await card_repo.delete(card)

        mock_session.delete.assert_awaited_once_with(card)
        mock_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_by_deck_in_creation_order(self, card_repo, mock_session, make_card):
        deck_id = uuid4()
        cards = [make_card(deck_id), make_card(deck_id)]
        mock_session.execute.return_value = _scalars_result(cards)

        assert await card_repo.list_by_deck(deck_id) == cards
        sql = str(_executed(mock_session))
        assert "WHERE cards.deck_id = " in sql
        assert sql.endswith("ORDER BY cards.pk")


# ==================== TemplateRepository Tests ====================


class TestTemplateRepositoryGetSchema:
    """Tests for TemplateRepository.get_schema."""

    @pytest.mark.asyncio
    async def test_converts_template_to_schema(self, template_repo, mock_session):
        template = CardTemplate(
            id=uuid4(),
            name="vocabulary",
            fields=[
                TemplateField(
                    id=uuid4(), name="Front", role=FieldRole.FRONT, kind=FieldKind.TEXT, options=[], position=0
                ),
                TemplateField(
                    id=uuid4(),
                    name="Gender",
                    role=FieldRole.EXTRA,
                    kind=FieldKind.ENUM,
                    options=["m", "f"],
                    position=1,
                ),
            ],
        )
        mock_session.execute.return_value = _scalar_result(template)

        schema = await template_repo.get_schema(template.id)

        assert schema.template_id == template.id
        assert len(schema) == 2
        assert [definition.id for definition in schema] == [f.id for f in template.fields]
        assert [definition.role for definition in schema] == [FieldRole.FRONT, FieldRole.EXTRA]
        assert list(schema)[1].type.options == ("m", "f")

    @pytest.mark.asyncio
    async def test_missing_template(self, template_repo, mock_session):
        mock_session.execute.return_value = _scalar_result(None)

        with pytest.raises(TemplateNotFoundError):
            await template_repo.get_schema(uuid4())


# ==================== Relationship loading ====================


@pytest.mark.parametrize(
    "relationship",
    [Deck.cards, Card.template, Field.template_field],
    ids=["deck.cards", "card.template", "field.template_field"],
)
def test_unloaded_relationships_raise_instead_of_loading(relationship):
    """Relationships that are only ever loaded explicitly refuse implicit loads."""
    assert relationship.property.lazy == "raise"
