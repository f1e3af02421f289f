"""Unit tests for field content and card structure validators."""

from uuid import uuid4

import pytest

from flashdeck.modules.cards.exceptions import CardStructureError, InvalidFieldContentError
from flashdeck.modules.cards.validation import CardStructureValidator, FieldContentValidator
from flashdeck.modules.templates.schema import FieldRole, FieldType, TemplateFieldDef, TemplateSchema
from flashdeck.shared.errors import InvalidInputError


def _definition(field_type: FieldType) -> TemplateFieldDef:
    return TemplateFieldDef(uuid4(), "Field", FieldRole.EXTRA, 0, field_type)


class TestFieldContentValidator:
    @pytest.fixture
    def validator(self):
        return FieldContentValidator()

    @pytest.mark.parametrize("content", ["anything", "", "  ", "noun"])
    def test_text_accepts_anything(self, validator, content):
        assert validator.validate(_definition(FieldType.text()), content) == content

    def test_text_none_becomes_empty(self, validator):
        assert validator.validate(_definition(FieldType.text()), None) == ""

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.enum(["a", "b"]), FieldType.multi_tag(["a", "b"])],
    )
    def test_enumerated_member_accepted(self, validator, field_type):
        assert validator.validate(_definition(field_type), "b") == "b"

    @pytest.mark.parametrize(
        "field_type",
        [FieldType.enum(["a", "b"]), FieldType.multi_tag(["a", "b"])],
    )
    def test_enumerated_non_member_rejected(self, validator, field_type):
        with pytest.raises(InvalidFieldContentError) as exc_info:
            validator.validate(_definition(field_type), "c")

        assert exc_info.value.allowed_options == ["a", "b"]
        assert isinstance(exc_info.value, InvalidInputError)

    @pytest.mark.parametrize("options", [None, []])
    def test_enumerated_without_options_rejects_everything(self, validator, options):
        with pytest.raises(InvalidFieldContentError) as exc_info:
            validator.validate(_definition(FieldType.enum(options)), "a")

        assert exc_info.value.allowed_options == []

    def test_enumerated_none_rejected(self, validator):
        with pytest.raises(InvalidFieldContentError):
            validator.validate(_definition(FieldType.enum(["a"])), None)


class TestCardStructureValidator:
    @pytest.fixture
    def validator(self):
        return CardStructureValidator()

    def test_front_only_fails(self, validator):
        with pytest.raises(CardStructureError) as exc_info:
            validator.validate([FieldRole.FRONT, FieldRole.FRONT])

        assert exc_info.value.missing_roles == ["back"]
        assert exc_info.value.status_code == 422

    def test_front_and_back_pass_with_extras(self, validator):
        validator.validate([FieldRole.FRONT, FieldRole.HINT, FieldRole.BACK, FieldRole.EXTRA])

    def test_empty_card_missing_both(self, validator):
        with pytest.raises(CardStructureError) as exc_info:
            validator.validate([])

        assert exc_info.value.missing_roles == ["back", "front"]

    def test_unknown_roles_ignored(self, validator):
        validator.validate([None, FieldRole.FRONT, FieldRole.BACK])


class TestTemplateSchema:
    def test_fields_ordered_by_position(self):
        back = TemplateFieldDef(uuid4(), "Back", FieldRole.BACK, 1)
        front = TemplateFieldDef(uuid4(), "Front", FieldRole.FRONT, 0)

        schema = TemplateSchema(uuid4(), (back, front))

        assert list(schema) == [front, back]
        assert schema.get(back.id) is back
        assert front.id in schema
        assert schema.get(uuid4()) is None
