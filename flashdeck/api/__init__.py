"""API routers package."""

from flashdeck.api import cards, decks, system

__all__ = [
    "cards",
    "decks",
    "system",
]
