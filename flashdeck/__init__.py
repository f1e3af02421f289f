"""flashdeck - hierarchical flashcard decks with template-driven cards."""

__version__ = "0.1.0"
