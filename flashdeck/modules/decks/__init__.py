"""Decks module: path-materialized deck tree per owner."""

from .engine import DeckTreeEngine, DeletionSpec, NewDeckSpec, PathUpdate, RenameSpec
from .models import AccessLevel, Deck
from .schemas import (
    DeckCreate,
    DeckDeleteResponse,
    DeckRename,
    DeckResponse,
    DeckTreeResponse,
    DeckWithCards,
)
from .service import DeckService

__all__ = [
    "AccessLevel",
    "Deck",
    "DeckCreate",
    "DeckDeleteResponse",
    "DeckRename",
    "DeckResponse",
    "DeckService",
    "DeckTreeEngine",
    "DeckTreeResponse",
    "DeckWithCards",
    "DeletionSpec",
    "NewDeckSpec",
    "PathUpdate",
    "RenameSpec",
]
