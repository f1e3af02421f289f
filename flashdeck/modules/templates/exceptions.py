"""Errors raised when resolving templates and their fields."""

from uuid import UUID

from flashdeck.shared.errors import NotFoundError


class TemplateNotFoundError(NotFoundError):
    """Template not found."""

    def __init__(self, template_id: UUID) -> None:
        self.template_id = template_id
        super().__init__(
            f"Template with ID {template_id} not found",
            details={"resource_type": "template", "resource_id": str(template_id)},
        )


class TemplateFieldNotFoundError(NotFoundError):
    """Template field not found."""

    def __init__(self, template_field_id: UUID, template_id: UUID | None = None) -> None:
        self.template_field_id = template_field_id
        self.template_id = template_id
        details: dict[str, str] = {
            "resource_type": "template_field",
            "resource_id": str(template_field_id),
        }
        if template_id is not None:
            details["template_id"] = str(template_id)
        super().__init__(
            f"Template field {template_field_id} is not part of the card's template",
            details=details,
        )
