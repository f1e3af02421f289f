"""Deck tree engine.

Stateless create/rename/delete planning over one owner's decks. Each operation
takes the owner's flat deck list (read inside the caller's transaction),
enforces the tree invariants and returns a spec describing the mutation. It
never writes anything; committing the spec is the deck service's job.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from .exceptions import (
    DeckNotFoundError,
    DeckPathConflictError,
    NonEmptySubtreeError,
    ParentDeckNotFoundError,
)
from .models import AccessLevel
from .paths import PATH_DELIMITER, compute_path, normalize_name, resolve_access_level
from .tree import TreeIndex


class EngineDeck(Protocol):
    """Deck attributes the engine reads."""

    id: UUID
    parent_id: UUID | None
    name: str
    path: str
    access_level: AccessLevel


@dataclass(frozen=True, slots=True)
class NewDeckSpec:
    """A fully derived deck, ready to be persisted (id assigned by storage)."""

    name: str
    path: str
    access_level: AccessLevel
    parent_id: UUID | None


@dataclass(frozen=True, slots=True)
class PathUpdate:
    """One path rewrite inside a rename batch."""

    deck_id: UUID
    old_path: str
    new_path: str


@dataclass(frozen=True, slots=True)
class RenameSpec:
    """New name/path of the target plus the cascaded descendant paths.

    ``descendant_updates`` is ordered parent before child.
    """

    deck_id: UUID
    old_name: str
    new_name: str
    old_path: str
    new_path: str
    descendant_updates: tuple[PathUpdate, ...] = ()

    @property
    def path_updates(self) -> tuple[PathUpdate, ...]:
        """All path rewrites, target first, to be committed together."""
        return (PathUpdate(self.deck_id, self.old_path, self.new_path), *self.descendant_updates)


@dataclass(frozen=True, slots=True)
class DeletionSpec:
    """Decks to remove for one subtree delete, root first."""

    root_id: UUID
    deck_ids: tuple[UUID, ...]
    forced: bool = False
    decks_with_cards: tuple[UUID, ...] = field(default=())


class DeckTreeEngine:
    """
    Planner for deck tree mutations.

    Holds no state; every call works only on its arguments.

    Example:
        engine = DeckTreeEngine()
        spec = engine.create(owner_decks, "Languages", "Spanish", AccessLevel.DEFAULT)
    """

    def create(
        self,
        owner_decks: Sequence[EngineDeck],
        parent_path: str | None,
        name: str | None,
        access_level: AccessLevel | None,
    ) -> NewDeckSpec:
        """
        Plan the creation of a deck.

        Args:
            owner_decks: All decks of the owner
            parent_path: Path of the parent deck; blank or None for a root deck
            name: Requested deck name
            access_level: Requested access level (DEFAULT inherits from the parent)

        Returns:
            NewDeckSpec with the computed path and resolved access level

        Raises:
            InvalidDeckNameError: Name is blank or contains the path delimiter
            ParentDeckNotFoundError: Parent path does not match any deck
            DeckPathConflictError: The computed path is already taken
        """
        trimmed = normalize_name(name)
        index = TreeIndex(owner_decks)

        parent: EngineDeck | None = None
        if parent_path is not None and parent_path.strip():
            parent = index.find_by_path(parent_path.strip())
            if parent is None:
                raise ParentDeckNotFoundError(parent_path)

        path = compute_path(parent, trimmed)
        if index.find_by_path(path) is not None:
            raise DeckPathConflictError(path)

        return NewDeckSpec(
            name=trimmed,
            path=path,
            access_level=resolve_access_level(access_level, parent),
            parent_id=parent.id if parent is not None else None,
        )

    def rename(
        self,
        target: EngineDeck,
        new_name: str | None,
        owner_decks: Sequence[EngineDeck],
    ) -> RenameSpec:
        """
        Plan a rename and the path cascade to every descendant.

        Args:
            target: Deck being renamed
            new_name: Requested new name
            owner_decks: All decks of the owner, including ``target``

        Returns:
            RenameSpec with the target's new path and descendant path updates

        Raises:
            InvalidDeckNameError: Name is blank or contains the path delimiter
            DeckNotFoundError: The target's parent is missing from ``owner_decks``
            DeckPathConflictError: New path collides with another deck
        """
        trimmed = normalize_name(new_name)
        index = TreeIndex(owner_decks)

        parent: EngineDeck | None = None
        if target.parent_id is not None:
            parent = index.get(target.parent_id)
            if parent is None:
                raise DeckNotFoundError(target.parent_id)

        new_path = compute_path(parent, trimmed)
        clash = index.find_by_path(new_path)
        if clash is not None and clash.id != target.id:
            raise DeckPathConflictError(new_path)

        descendants = index.collect_descendants(target)
        subtree_ids = {target.id, *(deck.id for deck in descendants)}
        outside_paths = {deck.path for deck in owner_decks if deck.id not in subtree_ids}

        new_paths: dict[UUID, str] = {target.id: new_path}
        updates: list[PathUpdate] = []
        for deck in descendants:
            # Parents precede children in the walk, so the prefix is ready.
            path = f"{new_paths[deck.parent_id]}{PATH_DELIMITER}{deck.name.strip()}"
            if path in outside_paths:
                raise DeckPathConflictError(path)
            new_paths[deck.id] = path
            updates.append(PathUpdate(deck.id, deck.path, path))

        return RenameSpec(
            deck_id=target.id,
            old_name=target.name,
            new_name=trimmed,
            old_path=target.path,
            new_path=new_path,
            descendant_updates=tuple(updates),
        )

    def delete(
        self,
        target: EngineDeck,
        owner_decks: Sequence[EngineDeck],
        card_counts: Mapping[UUID, int],
        *,
        force: bool = False,
    ) -> DeletionSpec:
        """
        Plan the removal of ``target`` and its whole subtree.

        Args:
            target: Root of the subtree to delete
            owner_decks: All decks of the owner
            card_counts: Number of cards per deck id (missing means zero)
            force: Delete even when decks in the subtree hold cards

        Returns:
            DeletionSpec listing every deck id to remove, root first

        Raises:
            NonEmptySubtreeError: Some deck holds cards and ``force`` is False
        """
        subtree = TreeIndex(owner_decks).collect_subtree(target)
        with_cards = tuple(deck.id for deck in subtree if card_counts.get(deck.id, 0) > 0)

        if with_cards and not force:
            raise NonEmptySubtreeError(with_cards)

        return DeletionSpec(
            root_id=target.id,
            deck_ids=tuple(deck.id for deck in subtree),
            forced=force,
            decks_with_cards=with_cards,
        )

