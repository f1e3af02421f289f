"""Cards module: template-driven card fields."""

from .models import Card, Field
from .duplicates import CardContentLookup, DuplicateDetector
from .reconciler import FieldPayload, FieldReconciler, ResolvedField, overlay_template
from .schemas import CardCreate, CardDetailResponse, CardResponse, CardUpdate, FieldInput
from .service import CardService
from .validation import CardStructureValidator, FieldContentValidator

__all__ = [
    "Card",
    "CardContentLookup",
    "CardCreate",
    "CardDetailResponse",
    "CardResponse",
    "CardService",
    "CardStructureValidator",
    "CardUpdate",
    "DuplicateDetector",
    "Field",
    "FieldContentValidator",
    "FieldInput",
    "FieldPayload",
    "FieldReconciler",
    "ResolvedField",
    "overlay_template",
]
