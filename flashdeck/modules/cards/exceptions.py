"""Errors raised by the card field engine and card service."""

from collections.abc import Iterable
from uuid import UUID

from flashdeck.shared.errors import DuplicateError, InvalidInputError, NotFoundError


class CardNotFoundError(NotFoundError):
    """Card not found."""

    def __init__(self, card_id: UUID) -> None:
        self.card_id = card_id
        super().__init__(
            f"Card with ID {card_id} not found",
            details={"resource_type": "card", "resource_id": str(card_id)},
        )


class InvalidFieldContentError(InvalidInputError):
    """Field content is not allowed for this template field."""

    def __init__(
        self,
        template_field_id: UUID,
        content: str | None,
        allowed_options: Iterable[str],
    ) -> None:
        self.template_field_id = template_field_id
        self.content = content
        self.allowed_options = list(allowed_options)
        super().__init__(
            f"Content {content!r} is not one of the allowed options: {self.allowed_options}",
            details={
                "field": str(template_field_id),
                "value": content,
                "expected": self.allowed_options,
                "constraint": "allowed_options",
            },
        )


class CardStructureError(InvalidInputError):
    """Card must have at least one FRONT and one BACK field."""

    def __init__(self, missing_roles: Iterable[str]) -> None:
        self.missing_roles = sorted(missing_roles)
        super().__init__(
            details={"constraint": "front_and_back", "missing_roles": self.missing_roles},
        )


class DuplicateCardError(DuplicateError):
    """A card with the same field content already exists."""

    def __init__(self, content: str, duplicate_card_ids: Iterable[UUID]) -> None:
        self.content = content
        self.duplicate_card_ids = list(duplicate_card_ids)
        super().__init__(
            f"A card with field content {content!r} already exists. "
            "Resubmit with allow_duplicate=true to save it anyway.",
            details={
                "value": content,
                "duplicate_card_ids": [str(card_id) for card_id in self.duplicate_card_ids],
            },
        )
