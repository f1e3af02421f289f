"""In-memory template schema used by the card field engine.

A template is read once per card operation and turned into a
``TemplateSchema``: an ordered set of field definitions keyed by external id.
Field types are a tagged variant ``(kind, options)`` so that new kinds can be
added without touching the reconciler.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class FieldRole(str, Enum):
    """Role of a template field on the card."""

    FRONT = "front"
    BACK = "back"
    HINT = "hint"
    EXTRA = "extra"


class FieldKind(str, Enum):
    """Content kind of a template field."""

    TEXT = "text"
    ENUM = "enum"
    MULTI_TAG = "multi_tag"


@dataclass(frozen=True, slots=True)
class FieldType:
    """Tagged field type.

    ``options`` is only meaningful for enumerated kinds; an enumerated type
    with no options accepts no content at all.
    """

    kind: FieldKind = FieldKind.TEXT
    options: tuple[str, ...] = ()

    @property
    def is_enumerated(self) -> bool:
        return self.kind in (FieldKind.ENUM, FieldKind.MULTI_TAG)

    @classmethod
    def text(cls) -> FieldType:
        return cls(FieldKind.TEXT)

    @classmethod
    def enum(cls, options: Iterable[str] | None) -> FieldType:
        return cls(FieldKind.ENUM, tuple(options or ()))

    @classmethod
    def multi_tag(cls, options: Iterable[str] | None) -> FieldType:
        return cls(FieldKind.MULTI_TAG, tuple(options or ()))


@dataclass(frozen=True, slots=True)
class TemplateFieldDef:
    """One field definition of a template."""

    id: UUID
    name: str
    role: FieldRole
    position: int
    type: FieldType = field(default_factory=FieldType.text)


@dataclass(frozen=True, slots=True)
class TemplateSchema:
    """Ordered field definitions of one template.

    Example:
        schema = TemplateSchema(template_id, fields)
        definition = schema.get(template_field_id)
    """

    template_id: UUID
    fields: tuple[TemplateFieldDef, ...] = ()

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.fields, key=lambda item: item.position))
        object.__setattr__(self, "fields", ordered)

    def __iter__(self) -> Iterator[TemplateFieldDef]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, template_field_id: object) -> bool:
        return self.get(template_field_id) is not None  # type: ignore[arg-type]

    def get(self, template_field_id: UUID) -> TemplateFieldDef | None:
        """Definition with the given id, or None."""
        for definition in self.fields:
            if definition.id == template_field_id:
                return definition
        return None
