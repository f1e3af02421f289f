"""Errors raised by the deck tree engine and deck service."""

from collections.abc import Iterable
from uuid import UUID

from flashdeck.shared.errors import ConflictError, InvalidInputError, NotFoundError


class InvalidDeckNameError(InvalidInputError):
    """Deck name is blank or contains the path delimiter."""

    def __init__(self, name: str | None) -> None:
        self.name = name
        super().__init__(details={"field": "name", "value": name})


class DeckNotFoundError(NotFoundError):
    """Deck not found."""

    def __init__(self, deck_id: UUID) -> None:
        self.deck_id = deck_id
        super().__init__(
            f"Deck with ID {deck_id} not found",
            details={"resource_type": "deck", "resource_id": str(deck_id)},
        )


class ParentDeckNotFoundError(NotFoundError):
    """Parent path not found."""

    def __init__(self, parent_path: str) -> None:
        self.parent_path = parent_path
        super().__init__(
            f"Parent path not found: {parent_path}",
            details={"resource_type": "deck", "field": "parent_path", "value": parent_path},
        )


class DeckPathConflictError(ConflictError):
    """Path already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Path already exists: {path}",
            details={"field": "path", "value": path, "constraint": "unique"},
        )


class NonEmptySubtreeError(ConflictError):
    """Cannot delete deck(s) containing cards without force flag."""

    def __init__(self, deck_ids: Iterable[UUID]) -> None:
        self.deck_ids = list(deck_ids)
        super().__init__(
            details={
                "constraint": "empty_subtree",
                "deck_ids": [str(deck_id) for deck_id in self.deck_ids],
            },
        )
