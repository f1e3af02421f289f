"""In-memory index over one owner's flat list of decks.

Subtree walks use an explicit work stack; traversal depth is bounded by the
number of decks, not by the interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Generic, Protocol, TypeVar
from uuid import UUID


class DeckNode(Protocol):
    """Minimal shape of a deck as seen by the tree index."""

    id: UUID
    parent_id: UUID | None
    name: str
    path: str


NodeT = TypeVar("NodeT", bound=DeckNode)


def build_parent_map(decks: Iterable[NodeT]) -> dict[UUID, list[NodeT]]:
    """Map each parent id to its children, preserving input order.

    Root decks (no parent) do not appear as values.
    """
    parent_map: dict[UUID, list[NodeT]] = {}
    for deck in decks:
        if deck.parent_id is not None:
            parent_map.setdefault(deck.parent_id, []).append(deck)
    return parent_map


class TreeIndex(Generic[NodeT]):
    """Adjacency index for subtree collection and tree rendering.

    Example:
        index = TreeIndex(owner_decks)
        for deck in index.collect_subtree(root):
            ...
    """

    def __init__(self, decks: Iterable[NodeT]) -> None:
        self._decks: list[NodeT] = list(decks)
        self._by_id: dict[UUID, NodeT] = {deck.id: deck for deck in self._decks}
        self._by_path: dict[str, NodeT] = {deck.path: deck for deck in self._decks}
        self._children = build_parent_map(self._decks)

    def __len__(self) -> int:
        return len(self._decks)

    def __contains__(self, deck_id: object) -> bool:
        return deck_id in self._by_id

    def get(self, deck_id: UUID) -> NodeT | None:
        return self._by_id.get(deck_id)

    def find_by_path(self, path: str) -> NodeT | None:
        """Exact path lookup."""
        return self._by_path.get(path)

    def children_of(self, deck_id: UUID) -> Sequence[NodeT]:
        return self._children.get(deck_id, [])

    def roots(self) -> list[NodeT]:
        """Decks without a parent in this index, ordered by path.

        A deck whose parent is missing from the index is treated as a root
        so that it still shows up in listings.
        """
        roots = [
            deck
            for deck in self._decks
            if deck.parent_id is None or deck.parent_id not in self._by_id
        ]
        return sorted(roots, key=lambda deck: deck.path)

    def collect_subtree(self, root: NodeT) -> list[NodeT]:
        """Collect ``root`` and all of its descendants, depth first.

        Every deck appears after its parent. Each deck is visited at most
        once, so malformed parent links cannot make the walk loop forever.
        """
        collected: list[NodeT] = []
        visited: set[UUID] = set()
        stack: list[NodeT] = [root]

        while stack:
            current = stack.pop()
            if current.id in visited:
                continue
            visited.add(current.id)
            collected.append(current)
            # Reversed so that siblings pop in their original order.
            stack.extend(reversed(self.children_of(current.id)))

        return collected

    def collect_descendants(self, root: NodeT) -> list[NodeT]:
        """Same walk as :meth:`collect_subtree`, without ``root`` itself."""
        return self.collect_subtree(root)[1:]
