"""
Template and field-definition models.

Wire format is camelCase (``fieldKey``, ``mandatoryMark``, ``oneClickRigor``)
to match the GIF tooling the templates are exchanged with; Python code uses
the snake_case attribute names.
"""

from __future__ import annotations

import re
from datetime import datetime
from functools import cached_property

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ace.core.constants import MANDATORY_MARK, FieldType

TEMPLATE_ID_PATTERN = r"^[a-z0-9-]+$"
FIELD_KEY_PATTERN = r"^[a-zA-Z_][a-zA-Z0-9_]*$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        ignored_types=(cached_property,),
    )


class FieldDefinition(_CamelModel):
    """One typed column of a template."""

    field_key: str = Field(..., min_length=1, pattern=FIELD_KEY_PATTERN)
    label: str = Field(..., min_length=1)
    description: str = ""
    type: FieldType
    required: bool = False
    pattern: str | None = None
    mandatory_mark: str | None = None
    options: tuple[str, ...] = ()

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid regular expression: {exc}") from exc
        return value

    @model_validator(mode="after")
    def _check_options(self) -> FieldDefinition:
        if self.type == FieldType.CONTROLLED_VOCABULARY and not self.options:
            raise ValueError(f"{self.field_key}: controlledVocabulary needs at least one option")
        return self

    @property
    def mandatory(self) -> bool:
        """True for GIF 区分◎ items."""
        return self.mandatory_mark == MANDATORY_MARK

    @cached_property
    def compiled_pattern(self) -> re.Pattern[str] | None:
        return re.compile(self.pattern) if self.pattern else None


class Template(_CamelModel):
    """A named, ordered list of field definitions."""

    id: str = Field(..., min_length=1, pattern=TEMPLATE_ID_PATTERN)
    label: str = Field(..., min_length=1)
    description: str = ""
    one_click_rigor: bool = False
    fields: tuple[FieldDefinition, ...] = Field(..., min_length=1)
    generated_at: datetime | None = None

    @model_validator(mode="after")
    def _check_unique_keys(self) -> Template:
        keys = [f.field_key for f in self.fields]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"duplicate field keys: {', '.join(duplicates)}")
        return self

    def field(self, field_key: str) -> FieldDefinition | None:
        for definition in self.fields:
            if definition.field_key == field_key:
                return definition
        return None

    def first_of_type(self, field_type: FieldType) -> FieldDefinition | None:
        for definition in self.fields:
            if definition.type == field_type:
                return definition
        return None

    @property
    def enforced_keys(self) -> list[str]:
        """Keys that must be supplied: required or mandatory-marked."""
        return [f.field_key for f in self.fields if f.required or f.mandatory]
