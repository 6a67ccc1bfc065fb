"""API schema package."""

from ace.api.schemas.auth import TokenRequest, TokenResponse
from ace.api.schemas.catalog import AssetCreateRequest, DatasetCreateRequest, DatasetResource
from ace.api.schemas.templates import ApplyTemplateRequest, ConfirmSchemaRequest

__all__ = [
    "ApplyTemplateRequest",
    "AssetCreateRequest",
    "ConfirmSchemaRequest",
    "DatasetCreateRequest",
    "DatasetResource",
    "TokenRequest",
    "TokenResponse",
]
