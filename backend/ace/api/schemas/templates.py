"""Request schemas for template instantiation and schema confirmation."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ace.core.logging import get_logger
from ace.templates.models import FieldDefinition, Template

logger = get_logger(__name__)


class ApplyTemplateRequest(BaseModel):
    """Optional body of POST /model-templates/{id}/apply."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_id: str | None = Field(None, alias="modelId", min_length=1)
    title: str | None = None


class ConfirmedField(FieldDefinition):
    """Field of a generated schema; an uncompilable pattern is dropped, not rejected."""

    @field_validator("pattern", mode="before")
    @classmethod
    def _drop_invalid_pattern(cls, value: object) -> object:
        if value is None:
            return None
        try:
            re.compile(value)
        except (re.error, TypeError) as exc:
            logger.warning("Dropping invalid field pattern", pattern=str(value), error=str(exc))
            return None
        return value


class ConfirmedTemplate(Template):
    fields: tuple[ConfirmedField, ...] = Field(..., min_length=1)


class ConfirmSchemaRequest(BaseModel):
    """Body of POST /excel-to-schema/confirm."""

    model_config = ConfigDict(populate_by_name=True)

    template_schema: ConfirmedTemplate = Field(..., alias="schema")
