"""Near-duplicate detection for card field content."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol
from uuid import UUID

from .exceptions import DuplicateCardError

logger = logging.getLogger(__name__)


class CardContentLookup(Protocol):
    """Storage query used by the detector."""

    async def find_card_ids_by_content(
        self, content: str, *, owner_id: UUID | None = None
    ) -> Sequence[UUID]:
        """Ids of cards holding a field with exactly ``content``."""
        ...


class DuplicateDetector:
    """
    Rejects field content that already exists on another card.

    The check is a soft conflict: with ``allow_duplicate`` the colliding
    ids are returned instead of raised.

    Example:
        detector = DuplicateDetector(card_repository)
        await detector.check("hola", owner_id=owner_id, card_id=card.id)
    """

    def __init__(self, lookup: CardContentLookup) -> None:
        self._lookup = lookup

    async def check(
        self,
        content: str | None,
        *,
        owner_id: UUID | None = None,
        card_id: UUID | None = None,
        allow_duplicate: bool = False,
    ) -> list[UUID]:
        """
        Look for other cards with the same field content.

        Args:
            content: Submitted field content
            owner_id: Only match cards in this owner's decks (None searches all)
            card_id: Card being updated (excluded from matches)
            allow_duplicate: Return matches instead of raising

        Returns:
            Ids of other cards with identical content

        Raises:
            DuplicateCardError: Matches exist and ``allow_duplicate`` is False
        """
        if content is None or not content.strip():
            return []

        found = await self._lookup.find_card_ids_by_content(content, owner_id=owner_id)
        return self.evaluate(content, found, card_id=card_id, allow_duplicate=allow_duplicate)

    @staticmethod
    def evaluate(
        content: str,
        found: Iterable[UUID],
        *,
        card_id: UUID | None = None,
        allow_duplicate: bool = False,
    ) -> list[UUID]:
        """Decide on lookup results without touching storage."""
        duplicates = list(dict.fromkeys(found_id for found_id in found if found_id != card_id))
        if duplicates and not allow_duplicate:
            logger.info(
                "Duplicate content rejected",
                extra={"duplicate_count": len(duplicates)},
            )
            raise DuplicateCardError(content, duplicates)
        return duplicates
