"""Domain modules: decks, cards and templates."""
