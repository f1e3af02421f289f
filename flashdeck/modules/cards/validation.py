"""Content and structure rules for card fields."""

from __future__ import annotations

from collections.abc import Iterable

from flashdeck.modules.templates.schema import FieldRole, TemplateFieldDef

from .exceptions import CardStructureError, InvalidFieldContentError

REQUIRED_ROLES: frozenset[FieldRole] = frozenset({FieldRole.FRONT, FieldRole.BACK})


class FieldContentValidator:
    """Checks content against the type of its template field.

    Free text accepts anything, including an empty string. Enumerated and
    multi-tag fields accept only a member of their option list.
    """

    def validate(self, definition: TemplateFieldDef, content: str | None) -> str:
        """Return the content to store, or raise if the type rejects it.

        Raises:
            InvalidFieldContentError: Content is not an allowed option.
        """
        field_type = definition.type
        if not field_type.is_enumerated:
            return content if content is not None else ""

        if not field_type.options or content not in field_type.options:
            raise InvalidFieldContentError(definition.id, content, field_type.options)
        return content


class CardStructureValidator:
    """Final gate before a card is committed."""

    def validate(self, roles: Iterable[FieldRole | None]) -> None:
        """
        Require at least one FRONT and one BACK among the card's field roles.

        Raises:
            CardStructureError: FRONT or BACK is missing.
        """
        missing = REQUIRED_ROLES.difference(role for role in roles if role is not None)
        if missing:
            raise CardStructureError(role.value for role in missing)
