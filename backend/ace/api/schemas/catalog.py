"""Request schemas for the CKAN dataset surface and the asset registry."""

from __future__ import annotations

from typing import Any

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ace.core.constants import AssetType, FileStatus


_any_url = TypeAdapter(AnyUrl)


class _CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DatasetResource(_CamelRequest):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    format: str | None = None
    # "schema" clashes with BaseModel.schema, hence the alias
    resource_schema: Any = Field(None, alias="schema")


class DatasetCreateRequest(_CamelRequest):
    """RESTful dataset body translated to CKAN package_create."""

    name: str = Field(..., min_length=2, max_length=100, pattern=r"^[a-z0-9_-]+$")
    title: str | None = None
    organization: str | None = None
    local_government_code: str | None = Field(None, pattern=r"^[0-9]{6}$")
    dataset_updated_at: str | None = None
    resources: list[DatasetResource] = []


class AssetCreateRequest(_CamelRequest):
    """Descriptor of a heavy 3D / GIS file."""

    dataset_id: str
    title: str
    uri: str
    asset_type: AssetType
    file_status: FileStatus
    checksum: str | None = None
    size_bytes: int | None = Field(None, ge=0)
    description: str | None = None

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str) -> str:
        # Any scheme (s3://, ftp:// ...); the stored value is kept as given
        try:
            _any_url.validate_python(value)
        except ValidationError as exc:
            raise ValueError("must be an absolute URL") from exc
        return value
