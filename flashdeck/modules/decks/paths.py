"""Path and access-level derivation for decks.

Pure functions: a deck's path is always derived from its parent's path and its
own name, never set directly. No storage access happens here.
"""

from __future__ import annotations

from typing import Protocol

from .exceptions import InvalidDeckNameError
from .models import AccessLevel

PATH_DELIMITER = "::"


class PathParent(Protocol):
    """Anything with a path and an access level (ORM deck, engine spec)."""

    path: str
    access_level: AccessLevel


def normalize_name(name: str | None) -> str:
    """Trim a deck name, rejecting blank input and embedded delimiters.

    Raises:
        InvalidDeckNameError: ``name`` is None, whitespace only or contains ``::``.
    """
    if name is None or not name.strip() or PATH_DELIMITER in name:
        raise InvalidDeckNameError(name)
    return name.strip()


def compute_path(parent: PathParent | None, name: str) -> str:
    """Compute the path of a deck called ``name`` under ``parent``.

    >>> compute_path(None, "  Spanish ")
    'Spanish'
    """
    trimmed = name.strip()
    if parent is None or not parent.path or not parent.path.strip():
        return trimmed
    return f"{parent.path.strip()}{PATH_DELIMITER}{trimmed}"


def resolve_access_level(
    requested: AccessLevel | None,
    parent: PathParent | None,
) -> AccessLevel:
    """Resolve the access level a new deck is stored with.

    ``DEFAULT`` inherits from the parent (``PRIVATE`` at the root), an explicit
    level wins, and no value at all means ``PRIVATE``. Evaluated once at
    creation; later changes to the parent are not propagated.
    """
    if requested is None:
        return AccessLevel.PRIVATE
    if requested is AccessLevel.DEFAULT:
        return parent.access_level if parent is not None else AccessLevel.PRIVATE
    return requested
