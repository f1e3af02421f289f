"""Field reconciliation.

Merges a submitted field payload into a card's current fields according to
its template. The reconciler works on plain values: it never touches the ORM
card, so a failed reconciliation leaves nothing half-applied. The card
service applies the returned ``ReconciliationResult`` to the card.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from flashdeck.modules.templates.exceptions import TemplateFieldNotFoundError
from flashdeck.modules.templates.schema import FieldKind, FieldRole, TemplateSchema

from .validation import FieldContentValidator


class CurrentField(Protocol):
    """A field already stored on the card."""

    id: UUID
    template_field_id: UUID
    content: str


@dataclass(frozen=True, slots=True)
class FieldPayload:
    """One submitted ``(template_field_id, content)`` pair."""

    template_field_id: UUID
    content: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedField:
    """A field of the card after reconciliation.

    ``field_id`` is None for a field that does not exist yet.
    """

    template_field_id: UUID
    content: str
    role: FieldRole | None
    field_id: UUID | None = None
    changed: bool = False

    @property
    def is_new(self) -> bool:
        return self.field_id is None


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Ordered resolved fields: existing ones first, then new ones."""

    fields: tuple[ResolvedField, ...]

    @property
    def roles(self) -> set[FieldRole | None]:
        return {item.role for item in self.fields}

    @property
    def created(self) -> tuple[ResolvedField, ...]:
        return tuple(item for item in self.fields if item.is_new)

    @property
    def updated(self) -> tuple[ResolvedField, ...]:
        return tuple(item for item in self.fields if not item.is_new and item.changed)


@dataclass(frozen=True, slots=True)
class TemplateFieldView:
    """One template field with the card's content for it (blank if absent)."""

    template_field_id: UUID
    name: str
    role: FieldRole
    kind: FieldKind
    options: tuple[str, ...]
    position: int
    content: str
    field_id: UUID | None = None


class FieldReconciler:
    """
    Reconciles submitted payloads with a card's fields.

    Example:
        result = FieldReconciler().reconcile(card.fields, schema, payloads)
    """

    def __init__(self, content_validator: FieldContentValidator | None = None) -> None:
        self._content_validator = content_validator or FieldContentValidator()

    def reconcile(
        self,
        current_fields: Iterable[CurrentField],
        schema: TemplateSchema,
        payloads: Sequence[FieldPayload],
    ) -> ReconciliationResult:
        """
        Merge ``payloads`` into ``current_fields``.

        Payloads are applied in order, so a later payload for the same template
        field wins. Existing fields not mentioned in the payload are kept as is.

        Raises:
            TemplateFieldNotFoundError: A payload references a field outside the template
            InvalidFieldContentError: Content is rejected by the field's type
        """
        resolved: dict[UUID, ResolvedField] = {}
        for field in current_fields:
            definition = schema.get(field.template_field_id)
            resolved[field.template_field_id] = ResolvedField(
                template_field_id=field.template_field_id,
                content=field.content,
                role=definition.role if definition is not None else None,
                field_id=field.id,
            )

        for payload in payloads:
            definition = schema.get(payload.template_field_id)
            if definition is None:
                raise TemplateFieldNotFoundError(payload.template_field_id, schema.template_id)

            content = self._content_validator.validate(definition, payload.content)
            previous = resolved.get(definition.id)
            resolved[definition.id] = ResolvedField(
                template_field_id=definition.id,
                content=content,
                role=definition.role,
                field_id=previous.field_id if previous is not None else None,
                changed=True,
            )

        return ReconciliationResult(fields=tuple(resolved.values()))


def overlay_template(
    schema: TemplateSchema,
    fields: Iterable[CurrentField],
) -> list[TemplateFieldView]:
    """Full view of a card in template order.

    Template fields the card has no value for are returned with blank
    content and no ``field_id``.
    """
    by_template_field = {field.template_field_id: field for field in fields}
    views: list[TemplateFieldView] = []
    for definition in schema:
        field = by_template_field.get(definition.id)
        views.append(
            TemplateFieldView(
                template_field_id=definition.id,
                name=definition.name,
                role=definition.role,
                kind=definition.type.kind,
                options=definition.type.options,
                position=definition.position,
                content=field.content if field is not None else "",
                field_id=field.id if field is not None else None,
            )
        )
    return views
