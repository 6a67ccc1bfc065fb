"""Tests for template models and the template registry."""

import pytest
from pydantic import ValidationError

from ace.core.constants import MANDATORY_MARK, FieldType
from ace.core.errors import DuplicateTemplateIdError
from ace.templates import FieldDefinition, Template, TemplateRegistry


def make_template(template_id="park-benches", **overrides):
    data = {
        "id": template_id,
        "label": "Park benches",
        "fields": [
            {"fieldKey": "name", "label": "名称", "type": "string", "mandatoryMark": MANDATORY_MARK},
            {"fieldKey": "seats", "label": "Seats", "type": "number"},
        ],
    }
    data.update(overrides)
    return Template.model_validate(data)


class TestBuiltins:
    """The two GIF templates shipped with the process."""

    def test_builtins_in_insertion_order(self, registry):
        ids = [t.id for t in registry.list_templates()]
        assert ids == ["public-facilities", "aed-locations"]

    def test_public_facilities_patterns(self, registry):
        template = registry.get_template("public-facilities")
        assert template.field("localGovernmentCode").pattern == r"^[0-9]{6}$"
        assert template.field("identifier").pattern == r"^[A-Za-z0-9_-]+$"
        assert template.field("postalCode").pattern == r"^[0-9]{7}$"

    def test_enforced_keys_include_mandatory_fields(self, registry):
        template = registry.get_template("public-facilities")
        enforced = template.enforced_keys
        assert "latitude" in enforced
        assert "facilityType" in enforced
        assert "note" not in enforced

    def test_aed_vocabularies(self, registry):
        template = registry.get_template("aed-locations")
        assert template.field("pediatricSupport").options == ("yes", "no")
        assert template.field("availability").type == FieldType.CONTROLLED_VOCABULARY

    def test_unknown_template_is_none(self, registry):
        assert registry.get_template("does-not-exist") is None


class TestAddTemplate:

    def test_add_stamps_generated_at(self, registry):
        added = registry.add_template(make_template())
        assert added.generated_at is not None
        assert registry.get_template("park-benches") == added
        assert len(registry) == 3

    def test_required_defaults_to_false(self, registry):
        added = registry.add_template(make_template())
        assert added.field("seats").required is False

    def test_duplicate_id_leaves_registry_unchanged(self, registry):
        before = registry.list_templates()
        with pytest.raises(DuplicateTemplateIdError, match="already exists"):
            registry.add_template(make_template("public-facilities"))
        assert registry.list_templates() == before

    def test_independent_registries(self):
        first = TemplateRegistry.with_builtins()
        second = TemplateRegistry.with_builtins()
        first.add_template(make_template())
        assert "park-benches" in first
        assert "park-benches" not in second


class TestTemplateModel:
    """Construction-time checks on templates and fields."""

    def test_template_id_must_be_kebab_case(self):
        with pytest.raises(ValidationError):
            make_template("Park Benches")

    def test_duplicate_field_keys_rejected(self):
        with pytest.raises(ValidationError, match="duplicate field keys"):
            make_template(fields=[
                {"fieldKey": "name", "label": "A", "type": "string"},
                {"fieldKey": "name", "label": "B", "type": "string"},
            ])

    def test_vocabulary_needs_options(self):
        with pytest.raises(ValidationError, match="at least one option"):
            FieldDefinition(field_key="kind", label="Kind", type=FieldType.CONTROLLED_VOCABULARY)

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValidationError, match="invalid regular expression"):
            FieldDefinition(field_key="code", label="Code", type=FieldType.STRING, pattern="[0-9")

    def test_templates_are_immutable(self, registry):
        template = registry.get_template("public-facilities")
        with pytest.raises(ValidationError):
            template.label = "changed"

    def test_wire_format_is_camel_case(self, registry):
        dumped = registry.get_template("public-facilities").model_dump(by_alias=True, exclude_none=True)
        assert dumped["oneClickRigor"] is True
        assert dumped["fields"][0]["fieldKey"] == "localGovernmentCode"
        assert dumped["fields"][0]["mandatoryMark"] == MANDATORY_MARK
