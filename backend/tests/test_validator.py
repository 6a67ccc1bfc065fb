"""Tests for record validation against GIF templates."""

import math

import pytest

from ace.core.constants import FieldType, ViolationKind
from ace.core.errors import RecordValidationError
from ace.templates import Template
from ace.validation import RecordValidator, validate_against, validate_coordinates


@pytest.fixture
def validator(registry):
    return RecordValidator(registry)


@pytest.fixture
def library_record():
    return {
        "localGovernmentCode": "131016",
        "identifier": "fac-001",
        "name": "中央図書館",
        "facilityType": "library",
        "latitude": 35.6895,
        "longitude": 139.6917,
        "datasetUpdatedAt": "2024-05-01",
    }


def kinds_for(outcome, field):
    return {v.kind for v in outcome.violations if v.field == field}


class TestHappyPath:

    def test_library_record_passes(self, validator, library_record):
        outcome = validator.validate("public-facilities", library_record)
        assert outcome.ok
        assert outcome.errors == []
        assert outcome.template.id == "public-facilities"
        assert outcome.value["name"] == "中央図書館"

    def test_coordinates_coerced_to_float(self, validator, library_record):
        library_record["latitude"] = 35
        outcome = validator.validate("public-facilities", library_record)
        assert outcome.ok
        assert isinstance(outcome.value["latitude"], float)

    def test_unknown_keys_stripped(self, validator, library_record):
        library_record["color"] = "blue"
        outcome = validator.validate("public-facilities", library_record)
        assert outcome.ok
        assert "color" not in outcome.value

    def test_null_optional_field_is_omitted(self, validator, library_record):
        library_record["note"] = None
        outcome = validator.validate("public-facilities", library_record)
        assert outcome.ok
        assert "note" not in outcome.value

    def test_aed_record(self, validator):
        outcome = validator.validate("aed-locations", {
            "localGovernmentCode": "011002",
            "identifier": "aed_12",
            "name": "札幌市役所",
            "address": "北海道札幌市中央区北1条西2丁目",
            "installationPlace": "1F 正面玄関",
            "pediatricSupport": "yes",
            "availability": "allDays",
            "latitude": 43.0621,
            "longitude": 141.3544,
            "datasetUpdatedAt": "2024-03-31",
        })
        assert outcome.ok, outcome.errors


class TestTemplateResolution:

    def test_unknown_template(self, validator, library_record):
        outcome = validator.validate("no-such-template", library_record)
        assert not outcome.ok
        assert outcome.errors == ["Unknown template: no-such-template"]
        assert outcome.violations[0].kind == ViolationKind.UNKNOWN_TEMPLATE

    def test_non_object_record(self, registry):
        outcome = validate_against(registry.get_template("public-facilities"), ["not", "a", "dict"])
        assert not outcome.ok

    def test_raise_for_errors(self, validator):
        outcome = validator.validate("public-facilities", {})
        with pytest.raises(RecordValidationError) as exc_info:
            outcome.raise_for_errors()
        assert exc_info.value.messages == outcome.errors


class TestMissingFields:

    @pytest.mark.parametrize("missing", [
        "localGovernmentCode", "identifier", "name", "facilityType", "datasetUpdatedAt",
    ])
    def test_missing_mandatory_field_is_named(self, validator, library_record, missing):
        del library_record[missing]
        outcome = validator.validate("public-facilities", library_record)
        assert not outcome.ok
        assert ViolationKind.MISSING_MANDATORY in kinds_for(outcome, missing)
        assert any(error.startswith(f"{missing}: ") for error in outcome.errors)

    def test_latitude_omitted(self, validator, library_record):
        del library_record["latitude"]
        outcome = validator.validate("public-facilities", library_record)
        assert not outcome.ok
        assert kinds_for(outcome, "latitude") == {
            ViolationKind.MISSING_MANDATORY,
            ViolationKind.COORDINATE_PAIR_INCOMPLETE,
        }
        assert "latitude: latitude and longitude must be provided together" in outcome.errors

    def test_longitude_omitted_reported_on_latitude(self, validator, library_record):
        del library_record["longitude"]
        outcome = validator.validate("public-facilities", library_record)
        assert ViolationKind.COORDINATE_PAIR_INCOMPLETE in kinds_for(outcome, "latitude")

    def test_null_counts_as_missing(self, validator, library_record):
        library_record["name"] = None
        outcome = validator.validate("public-facilities", library_record)
        assert ViolationKind.MISSING_MANDATORY in kinds_for(outcome, "name")

    def test_empty_string_fails_mandatory_pass(self, validator, library_record):
        library_record["name"] = ""
        outcome = validator.validate("public-facilities", library_record)
        assert not outcome.ok
        assert outcome.errors == ["name: name is required (標準データセット 区分◎)"]

    def test_mark_applies_without_required(self):
        template = Template.model_validate({
            "id": "marked",
            "label": "Marked",
            "fields": [
                {
                    "fieldKey": "name",
                    "label": "名称",
                    "type": "string",
                    "required": False,
                    "mandatoryMark": "◎",
                },
            ],
        })
        outcome = validate_against(template, {})
        assert not outcome.ok
        assert [(v.field, v.kind) for v in outcome.violations] == [
            ("name", ViolationKind.MISSING_MANDATORY),
        ]
        assert outcome.errors == ["name: name is required (標準データセット 区分◎)"]

    def test_type_errors_are_collected(self, validator, library_record):
        library_record["localGovernmentCode"] = "13101"
        library_record["facilityType"] = "castle"
        library_record["datasetUpdatedAt"] = "2024/05/01"
        outcome = validator.validate("public-facilities", library_record)
        assert {v.field for v in outcome.violations} == {
            "localGovernmentCode", "facilityType", "datasetUpdatedAt",
        }


class TestFieldTypes:

    @pytest.fixture
    def typed_template(self):
        return Template.model_validate({
            "id": "typed",
            "label": "Typed",
            "fields": [
                {"fieldKey": "count", "label": "Count", "type": "number"},
                {"fieldKey": "open", "label": "Open", "type": "boolean"},
                {"fieldKey": "day", "label": "Day", "type": "date"},
                {"fieldKey": "code", "label": "Code", "type": "string", "pattern": "[0-9]{3}"},
            ],
        })

    def test_boolean_is_not_a_number(self, typed_template):
        outcome = validate_against(typed_template, {"count": True})
        assert outcome.errors == ["count: count must be a number"]

    def test_non_finite_number_rejected(self, typed_template):
        outcome = validate_against(typed_template, {"count": math.inf})
        assert not outcome.ok

    def test_boolean_field(self, typed_template):
        assert validate_against(typed_template, {"open": False}).ok
        assert not validate_against(typed_template, {"open": "false"}).ok

    @pytest.mark.parametrize("day", ["2024-13-01", "2024-00-10", "2024-01-32", "24-01-01", "2024-1-01"])
    def test_malformed_dates(self, typed_template, day):
        outcome = validate_against(typed_template, {"day": day})
        assert outcome.violations[0].kind == ViolationKind.PATTERN_MISMATCH

    def test_pattern_must_match_whole_value(self, typed_template):
        assert validate_against(typed_template, {"code": "123"}).ok
        assert not validate_against(typed_template, {"code": "1234"}).ok

    def test_template_without_coordinates_skips_pair_rule(self, typed_template):
        assert validate_against(typed_template, {}).ok


class TestCoordinates:

    def test_bounds_are_inclusive(self, validator, library_record):
        library_record.update(latitude=90.0, longitude=180.0)
        assert validator.validate("public-facilities", library_record).ok
        library_record.update(latitude=-90.0, longitude=-180.0)
        assert validator.validate("public-facilities", library_record).ok

    def test_latitude_just_out_of_bounds(self, validator, library_record):
        library_record["latitude"] = 90.0001
        outcome = validator.validate("public-facilities", library_record)
        assert kinds_for(outcome, "latitude") == {ViolationKind.OUT_OF_BOUNDS}

    def test_longitude_just_out_of_bounds(self, validator, library_record):
        library_record["longitude"] = 180.0001
        outcome = validator.validate("public-facilities", library_record)
        assert kinds_for(outcome, "longitude") == {ViolationKind.OUT_OF_BOUNDS}

    def test_zero_zero_rejected(self, validator, library_record):
        library_record.update(latitude=0, longitude=0)
        outcome = validator.validate("public-facilities", library_record)
        assert not outcome.ok
        assert outcome.violations[0].kind == ViolationKind.ZERO_ZERO_COORDINATE

    def test_single_zero_allowed(self, validator, library_record):
        library_record.update(latitude=0.0, longitude=139.6917)
        assert validator.validate("public-facilities", library_record).ok

    def test_string_coordinate_rejected(self, validator, library_record):
        library_record["latitude"] = "35.6895"
        outcome = validator.validate("public-facilities", library_record)
        assert "latitude: latitude must be a number" in outcome.errors

    def test_validate_coordinates_direct(self):
        assert validate_coordinates(35.0, 139.0) == []
        assert validate_coordinates(None, 139.0) == []
        violations = validate_coordinates(math.nan, 139.0)
        assert violations[0].kind == ViolationKind.TYPE_MISMATCH

    def test_pair_located_by_type_not_key(self):
        template = Template.model_validate({
            "id": "sites",
            "label": "Sites",
            "fields": [
                {"fieldKey": "lat", "label": "Lat", "type": FieldType.LATITUDE},
                {"fieldKey": "lon", "label": "Lon", "type": FieldType.LONGITUDE},
            ],
        })
        outcome = validate_against(template, {"lon": 10.0})
        assert outcome.errors == ["lat: lat and lon must be provided together"]
        assert validate_against(template, {"lat": 0, "lon": 0}).violations[0].field == "lat"
