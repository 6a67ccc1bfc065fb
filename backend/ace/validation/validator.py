"""
Record validation against a template.

Stages run in order and stop at the first one that reports violations:

    1. resolve the template
    2. type / format pass (all field errors collected, plus the
       latitude/longitude pair rule)
    3. mandatory-mark (区分◎) pass
    4. coordinate consistency pass

Per-field checks are plain functions looked up by FieldType in
FIELD_CHECKERS; nothing is compiled per request.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from ace.core.constants import (
    LATITUDE_BOUND,
    LONGITUDE_BOUND,
    FieldType,
    ViolationKind,
)
from ace.core.errors import RecordValidationError
from ace.core.logging import get_logger
from ace.templates.models import FieldDefinition, Template
from ace.templates.registry import TemplateRegistry

logger = get_logger(__name__)

DATE_PATTERN = re.compile(r"[0-9]{4}-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])")
MANDATORY_SUFFIX = "(標準データセット 区分◎)"


@dataclass(frozen=True)
class FieldViolation:
    """One rule broken by one field (or by the record as a whole)."""

    field: str | None
    kind: ViolationKind
    detail: str

    @property
    def message(self) -> str:
        return f"{self.field}: {self.detail}" if self.field else self.detail


@dataclass
class ValidationOutcome:
    """Result of validate(): either a normalized record or violations."""

    ok: bool
    value: dict[str, Any] | None = None
    template: Template | None = None
    violations: list[FieldViolation] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [v.message for v in self.violations]

    def raise_for_errors(self) -> None:
        if not self.ok:
            raise RecordValidationError(self.violations)


# ═══════════════════════════════════════════════════════════
#  Per-type checkers
# ═══════════════════════════════════════════════════════════

Checker = Callable[[FieldDefinition, Any], "FieldViolation | None"]


def _violation(definition: FieldDefinition, kind: ViolationKind, detail: str) -> FieldViolation:
    return FieldViolation(field=definition.field_key, kind=kind, detail=detail)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: int | float) -> bool:
    return isinstance(value, int) or math.isfinite(value)


def _check_string(definition: FieldDefinition, value: Any) -> FieldViolation | None:
    key = definition.field_key
    if not isinstance(value, str):
        return _violation(definition, ViolationKind.TYPE_MISMATCH, f"{key} must be a string")
    pattern = definition.compiled_pattern
    if pattern is not None and pattern.fullmatch(value) is None:
        return _violation(definition, ViolationKind.PATTERN_MISMATCH, f"{key} is not valid")
    return None


def _check_number(definition: FieldDefinition, value: Any) -> FieldViolation | None:
    key = definition.field_key
    if not _is_number(value):
        return _violation(definition, ViolationKind.TYPE_MISMATCH, f"{key} must be a number")
    if not _is_finite(value):
        return _violation(definition, ViolationKind.TYPE_MISMATCH, f"{key} must be a finite number")
    return None


def _check_boolean(definition: FieldDefinition, value: Any) -> FieldViolation | None:
    if not isinstance(value, bool):
        return _violation(
            definition, ViolationKind.TYPE_MISMATCH, f"{definition.field_key} must be a boolean"
        )
    return None


def _check_date(definition: FieldDefinition, value: Any) -> FieldViolation | None:
    key = definition.field_key
    if not isinstance(value, str):
        return _violation(definition, ViolationKind.TYPE_MISMATCH, f"{key} must be a string")
    if DATE_PATTERN.fullmatch(value) is None:
        return _violation(definition, ViolationKind.PATTERN_MISMATCH, f"{key} must be YYYY-MM-DD")
    return None


def _check_vocabulary(definition: FieldDefinition, value: Any) -> FieldViolation | None:
    if value not in definition.options:
        allowed = ", ".join(definition.options)
        return _violation(
            definition,
            ViolationKind.TYPE_MISMATCH,
            f"{definition.field_key} must be one of: {allowed}",
        )
    return None


def _coordinate_checker(bound: float) -> Checker:
    def check(definition: FieldDefinition, value: Any) -> FieldViolation | None:
        key = definition.field_key
        violation = _check_number(definition, value)
        if violation is not None:
            return violation
        if abs(value) > bound:
            return _violation(
                definition, ViolationKind.OUT_OF_BOUNDS, f"{key} must satisfy GIF coordinate bounds"
            )
        return None
    return check


FIELD_CHECKERS: dict[FieldType, Checker] = {
    FieldType.STRING: _check_string,
    FieldType.NUMBER: _check_number,
    FieldType.BOOLEAN: _check_boolean,
    FieldType.DATE: _check_date,
    FieldType.CONTROLLED_VOCABULARY: _check_vocabulary,
    FieldType.LATITUDE: _coordinate_checker(LATITUDE_BOUND),
    FieldType.LONGITUDE: _coordinate_checker(LONGITUDE_BOUND),
}

# Values are stored in their checked form; coordinates always as float.
_COERCERS: dict[FieldType, Callable[[Any], Any]] = {
    FieldType.LATITUDE: float,
    FieldType.LONGITUDE: float,
}


def _is_missing(record: Mapping[str, Any], key: str) -> bool:
    return record.get(key) is None


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


# ═══════════════════════════════════════════════════════════
#  Stages
# ═══════════════════════════════════════════════════════════

def _type_pass(template: Template, record: Mapping[str, Any]) -> tuple[dict[str, Any], list[FieldViolation]]:
    """Stage 2: check every field, then the coordinate pair rule."""
    normalized: dict[str, Any] = {}
    violations: list[FieldViolation] = []

    for definition in template.fields:
        key = definition.field_key
        if _is_missing(record, key):
            if definition.required:
                kind = ViolationKind.MISSING_MANDATORY if definition.mandatory else ViolationKind.MISSING_REQUIRED
                detail = f"{key} is required {MANDATORY_SUFFIX}" if definition.mandatory else f"{key} is required"
                violations.append(_violation(definition, kind, detail))
            continue

        value = record[key]
        violation = FIELD_CHECKERS[definition.type](definition, value)
        if violation is not None:
            violations.append(violation)
            continue
        coerce = _COERCERS.get(definition.type)
        normalized[key] = coerce(value) if coerce else value

    pair_violation = _pair_rule(template, record)
    if pair_violation is not None:
        violations.append(pair_violation)

    return normalized, violations


def _pair_rule(template: Template, record: Mapping[str, Any]) -> FieldViolation | None:
    latitude = template.first_of_type(FieldType.LATITUDE)
    longitude = template.first_of_type(FieldType.LONGITUDE)
    if latitude is None or longitude is None:
        return None
    has_lat = not _is_missing(record, latitude.field_key)
    has_lon = not _is_missing(record, longitude.field_key)
    if has_lat != has_lon:
        return _violation(
            latitude,
            ViolationKind.COORDINATE_PAIR_INCOMPLETE,
            f"{latitude.field_key} and {longitude.field_key} must be provided together",
        )
    return None


def _mandatory_pass(template: Template, normalized: Mapping[str, Any]) -> list[FieldViolation]:
    """Stage 3: every ◎ field present and non-empty, independent of `required`."""
    return [
        _violation(
            definition,
            ViolationKind.MISSING_MANDATORY,
            f"{definition.field_key} is required {MANDATORY_SUFFIX}",
        )
        for definition in template.fields
        if definition.mandatory and _is_empty(normalized.get(definition.field_key))
    ]


def validate_coordinates(
    latitude: float | None,
    longitude: float | None,
    *,
    latitude_key: str = "latitude",
    longitude_key: str = "longitude",
) -> list[FieldViolation]:
    """Stage 4: bounds, finiteness and the (0, 0) "no location" sentinel."""
    if latitude is None or longitude is None:
        return []

    violations = []
    if abs(latitude) > LATITUDE_BOUND:
        violations.append(FieldViolation(
            latitude_key, ViolationKind.OUT_OF_BOUNDS,
            f"{latitude_key} must be within -90 to 90 (GIF core data parts)",
        ))
    if abs(longitude) > LONGITUDE_BOUND:
        violations.append(FieldViolation(
            longitude_key, ViolationKind.OUT_OF_BOUNDS,
            f"{longitude_key} must be within -180 to 180 (GIF core data parts)",
        ))
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        violations.append(FieldViolation(
            latitude_key, ViolationKind.TYPE_MISMATCH, "coordinates must be numeric",
        ))
    if latitude == 0 and longitude == 0:
        violations.append(FieldViolation(
            latitude_key, ViolationKind.ZERO_ZERO_COORDINATE,
            "coordinates cannot both be zero (invalid GIF location)",
        ))
    return violations


def _coordinate_pass(template: Template, normalized: Mapping[str, Any]) -> list[FieldViolation]:
    latitude = template.first_of_type(FieldType.LATITUDE)
    longitude = template.first_of_type(FieldType.LONGITUDE)
    if latitude is None or longitude is None:
        return []
    return validate_coordinates(
        normalized.get(latitude.field_key),
        normalized.get(longitude.field_key),
        latitude_key=latitude.field_key,
        longitude_key=longitude.field_key,
    )


# ═══════════════════════════════════════════════════════════
#  Entry points
# ═══════════════════════════════════════════════════════════

def validate_against(template: Template, record: Any) -> ValidationOutcome:
    """Run stages 2-4 for an already-resolved template."""
    if not isinstance(record, Mapping):
        return ValidationOutcome(
            ok=False,
            template=template,
            violations=[FieldViolation(None, ViolationKind.TYPE_MISMATCH, "record must be an object")],
        )

    normalized, violations = _type_pass(template, record)
    if not violations:
        violations = _mandatory_pass(template, normalized)
    if not violations:
        violations = _coordinate_pass(template, normalized)

    if violations:
        logger.debug(
            "Record rejected",
            template_id=template.id,
            errors=[v.message for v in violations],
        )
        return ValidationOutcome(ok=False, template=template, violations=violations)

    dropped = sorted(set(record) - {f.field_key for f in template.fields})
    if dropped:
        logger.debug("Unknown keys dropped", template_id=template.id, keys=dropped)

    return ValidationOutcome(ok=True, value=normalized, template=template)


class RecordValidator:
    """Validates records against templates held in a registry."""

    def __init__(self, registry: TemplateRegistry) -> None:
        self._registry = registry

    def validate(self, template_id: str, record: Any) -> ValidationOutcome:
        template = self._registry.get_template(template_id)
        if template is None:
            return ValidationOutcome(
                ok=False,
                violations=[FieldViolation(
                    None, ViolationKind.UNKNOWN_TEMPLATE, f"Unknown template: {template_id}",
                )],
            )
        return validate_against(template, record)
