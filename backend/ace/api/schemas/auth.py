"""OAuth token request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TokenRequest(BaseModel):
    """Client-credential token request (camelCase body)."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="clientId", min_length=1)
    client_secret: str = Field(..., alias="clientSecret", min_length=1)
    scope: str = ""


class TokenResponse(BaseModel):
    """Bearer access token response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., ge=1)
    scope: str
