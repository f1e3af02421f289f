"""SQLAlchemy models for card templates."""

from uuid import UUID

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.core.database import Base
from flashdeck.shared.mixins import IdentityMixin, TimestampMixin

from .schema import FieldKind, FieldRole, FieldType, TemplateFieldDef, TemplateSchema


class CardTemplate(IdentityMixin, TimestampMixin, Base):
    """Card template defining which fields a card has.

    Templates are read-only for the card engine; a card keeps the template
    it was created with.

    Attributes:
        name: Template name (e.g., 'basic', 'vocabulary').
        description: Optional free-form description.
        fields: Ordered field definitions.
    """

    __tablename__ = "card_templates"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    fields: Mapped[list["TemplateField"]] = relationship(
        "TemplateField",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateField.position",
        lazy="selectin",
    )

    def to_schema(self) -> TemplateSchema:
        """Convert to the in-memory schema used by the card engine."""
        return TemplateSchema(
            template_id=self.id,
            fields=tuple(item.to_definition() for item in self.fields),
        )


class TemplateField(IdentityMixin, Base):
    """Field definition for a card template.

    Attributes:
        template_id: Reference to the parent template.
        name: Field name (e.g., 'Front', 'Back', 'Part of speech').
        role: Role on the card ('front', 'back', 'hint', 'extra').
        kind: Content kind ('text', 'enum', 'multi_tag').
        options: Allowed values for enumerated kinds.
        position: Display order of the field.
    """

    __tablename__ = "template_fields"

    template_id: Mapped[UUID] = mapped_column(
        ForeignKey("card_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[FieldRole] = mapped_column(
        SQLEnum(FieldRole, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    kind: Mapped[FieldKind] = mapped_column(
        SQLEnum(FieldKind, values_callable=lambda x: [e.value for e in x]),
        default=FieldKind.TEXT,
        nullable=False,
    )
    options: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        default=list,
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    template: Mapped["CardTemplate"] = relationship(
        "CardTemplate",
        back_populates="fields",
    )

    __table_args__ = (
        UniqueConstraint("template_id", "position", name="uq_template_fields_position"),
    )

    def to_definition(self) -> TemplateFieldDef:
        return TemplateFieldDef(
            id=self.id,
            name=self.name,
            role=self.role,
            position=self.position,
            type=FieldType(self.kind, tuple(self.options or ())),
        )
