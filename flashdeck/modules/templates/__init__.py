"""Templates module: read-only card template schemas."""

from .exceptions import TemplateFieldNotFoundError, TemplateNotFoundError
from .models import CardTemplate, TemplateField
from .repository import TemplateRepository
from .schema import FieldKind, FieldRole, FieldType, TemplateFieldDef, TemplateSchema

__all__ = [
    "CardTemplate",
    "FieldKind",
    "FieldRole",
    "FieldType",
    "TemplateField",
    "TemplateFieldDef",
    "TemplateFieldNotFoundError",
    "TemplateNotFoundError",
    "TemplateRepository",
    "TemplateSchema",
]
