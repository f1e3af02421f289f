"""Unit tests for field reconciliation and the template overlay."""

from dataclasses import dataclass
from uuid import UUID, uuid4

import pytest

from flashdeck.modules.cards.exceptions import InvalidFieldContentError
from flashdeck.modules.cards.reconciler import FieldPayload, FieldReconciler, overlay_template
from flashdeck.modules.templates.exceptions import TemplateFieldNotFoundError
from flashdeck.modules.templates.schema import FieldKind, FieldRole


@dataclass
class StoredField:
    id: UUID
    template_field_id: UUID
    content: str


@pytest.fixture
def reconciler():
    return FieldReconciler()


def _ids(schema):
    front, back, hint, pos = schema.fields
    return front.id, back.id, hint.id, pos.id


class TestReconcile:
    def test_new_card_fields_are_created(self, reconciler, basic_schema):
        front, back, _, _ = _ids(basic_schema)

        result = reconciler.reconcile(
            [],
            basic_schema,
            [FieldPayload(front, "hola"), FieldPayload(back, "hello")],
        )

        assert [f.content for f in result.fields] == ["hola", "hello"]
        assert all(f.is_new for f in result.fields)
        assert result.roles == {FieldRole.FRONT, FieldRole.BACK}
        assert len(result.created) == 2

    def test_last_write_wins_within_submission(self, reconciler, basic_schema):
        front, back, _, _ = _ids(basic_schema)

        result = reconciler.reconcile(
            [],
            basic_schema,
            [
                FieldPayload(front, "first"),
                FieldPayload(back, "back"),
                FieldPayload(front, "second"),
            ],
        )

        fronts = [f for f in result.fields if f.template_field_id == front]
        assert len(fronts) == 1
        assert fronts[0].content == "second"

    def test_existing_field_updated_in_place(self, reconciler, basic_schema):
        front, back, _, _ = _ids(basic_schema)
        stored_front = StoredField(uuid4(), front, "old")
        stored_back = StoredField(uuid4(), back, "kept")

        result = reconciler.reconcile(
            [stored_front, stored_back],
            basic_schema,
            [FieldPayload(front, "new")],
        )

        by_template = {f.template_field_id: f for f in result.fields}
        assert by_template[front].field_id == stored_front.id
        assert by_template[front].content == "new"
        assert by_template[front].changed is True
        assert by_template[back].content == "kept"
        assert by_template[back].changed is False
        assert len(result.updated) == 1
        assert result.created == ()

    def test_missing_field_appended_after_existing(self, reconciler, basic_schema):
        front, back, hint, _ = _ids(basic_schema)
        stored = [StoredField(uuid4(), front, "f"), StoredField(uuid4(), back, "b")]

        result = reconciler.reconcile(stored, basic_schema, [FieldPayload(hint, "h")])

        assert [f.template_field_id for f in result.fields] == [front, back, hint]
        assert result.fields[-1].is_new

    def test_unknown_template_field(self, reconciler, basic_schema):
        unknown = uuid4()

        with pytest.raises(TemplateFieldNotFoundError) as exc_info:
            reconciler.reconcile([], basic_schema, [FieldPayload(unknown, "x")])

        assert exc_info.value.template_field_id == unknown
        assert exc_info.value.status_code == 404

    def test_enumerated_content_rejected(self, reconciler, basic_schema):
        _, _, _, pos = _ids(basic_schema)

        with pytest.raises(InvalidFieldContentError) as exc_info:
            reconciler.reconcile([], basic_schema, [FieldPayload(pos, "adverb")])

        assert exc_info.value.allowed_options == ["noun", "verb", "adjective"]
        assert exc_info.value.details["expected"] == ["noun", "verb", "adjective"]

    def test_enumerated_content_accepted(self, reconciler, basic_schema):
        _, _, _, pos = _ids(basic_schema)

        result = reconciler.reconcile([], basic_schema, [FieldPayload(pos, "verb")])

        assert result.fields[0].content == "verb"
        assert result.fields[0].role is FieldRole.EXTRA

    def test_invalid_later_payload_leaves_input_untouched(self, reconciler, basic_schema):
        front, _, _, pos = _ids(basic_schema)
        stored = StoredField(uuid4(), front, "original")

        with pytest.raises(InvalidFieldContentError):
            reconciler.reconcile(
                [stored],
                basic_schema,
                [FieldPayload(front, "changed"), FieldPayload(pos, "bogus")],
            )

        assert stored.content == "original"

    def test_none_text_content_stored_as_empty(self, reconciler, basic_schema):
        _, _, hint, _ = _ids(basic_schema)

        result = reconciler.reconcile([], basic_schema, [FieldPayload(hint, None)])

        assert result.fields[0].content == ""


class TestOverlayTemplate:
    def test_blank_entries_for_missing_fields(self, basic_schema):
        front, back, hint, pos = _ids(basic_schema)
        stored_back = StoredField(uuid4(), back, "hello")
        stored_front = StoredField(uuid4(), front, "hola")

        views = overlay_template(basic_schema, [stored_back, stored_front])

        assert [v.template_field_id for v in views] == [front, back, hint, pos]
        assert [v.content for v in views] == ["hola", "hello", "", ""]
        assert views[0].field_id == stored_front.id
        assert views[2].field_id is None
        assert views[3].kind is FieldKind.ENUM
        assert views[3].options == ("noun", "verb", "adjective")
