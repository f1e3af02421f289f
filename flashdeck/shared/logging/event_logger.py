"""flashdeck - Event Logger.

Structured event logging for deck tree and card mutations.
"""

from loguru import logger


def log_deck_created(
    deck_id: str,
    path: str,
    access_level: str,
    *,
    owner_id: str | None = None,
) -> None:
    """Log the creation of a deck.

    Args:
        deck_id: External identifier of the new deck
        path: Computed deck path
        access_level: Resolved access level
        owner_id: Optional owner identifier
    """
    logger.info(
        "Deck created",
        event="deck.created",
        deck_id=deck_id,
        path=path,
        access_level=access_level,
        owner_id=owner_id,
    )


def log_deck_renamed(
    deck_id: str,
    old_path: str,
    new_path: str,
    descendants_updated: int,
) -> None:
    """Log a rename together with the size of its path cascade.

    Args:
        deck_id: External identifier of the renamed deck
        old_path: Path before the rename
        new_path: Path after the rename
        descendants_updated: Number of descendant paths rewritten
    """
    logger.info(
        "Deck renamed",
        event="deck.renamed",
        deck_id=deck_id,
        old_path=old_path,
        new_path=new_path,
        descendants_updated=descendants_updated,
    )


def log_subtree_deleted(
    root_deck_id: str,
    decks_deleted: int,
    *,
    forced: bool,
) -> None:
    """Log the removal of a deck subtree.

    Args:
        root_deck_id: External identifier of the subtree root
        decks_deleted: Number of decks removed, root included
        forced: Whether decks holding cards were removed as well
    """
    logger.info(
        "Deck subtree deleted",
        event="deck.subtree_deleted",
        root_deck_id=root_deck_id,
        decks_deleted=decks_deleted,
        forced=forced,
    )


def log_card_saved(
    card_id: str,
    deck_id: str,
    fields_created: int,
    fields_updated: int,
    *,
    created: bool,
) -> None:
    """Log a successful card create or update.

    Args:
        card_id: External identifier of the card
        deck_id: External identifier of the owning deck
        fields_created: Number of fields appended by reconciliation
        fields_updated: Number of fields updated in place
        created: True for a new card, False for an update
    """
    logger.info(
        "Card created" if created else "Card updated",
        event="card.created" if created else "card.updated",
        card_id=card_id,
        deck_id=deck_id,
        fields_created=fields_created,
        fields_updated=fields_updated,
    )


def log_duplicate_overridden(
    content: str,
    duplicate_card_ids: list[str],
    *,
    card_id: str | None = None,
) -> None:
    """Log a duplicate that the caller chose to keep.

    Args:
        content: Field content that matched other cards
        duplicate_card_ids: Identifiers of the matching cards
        card_id: Card being updated, if any
    """
    logger.warning(
        "Duplicate content saved with override",
        event="card.duplicate_overridden",
        content=content[:100],
        duplicate_card_ids=duplicate_card_ids,
        card_id=card_id,
    )
