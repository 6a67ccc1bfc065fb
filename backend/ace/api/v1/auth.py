"""OAuth 2.0 token endpoint (client credentials, prototype)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ace.api.deps import get_token_store
from ace.api.schemas.auth import TokenRequest, TokenResponse
from ace.core.security import TokenStore

router = APIRouter(prefix="/oauth", tags=["Auth"])


@router.post("/token", response_model=TokenResponse)
async def issue_token(
    payload: TokenRequest,
    tokens: TokenStore = Depends(get_token_store),
) -> TokenResponse:
    """Exchange client credentials for a bearer token."""
    issued = tokens.issue_token(payload.client_id, payload.client_secret, payload.scope)
    return TokenResponse(
        access_token=issued.access_token,
        token_type=issued.token_type,
        expires_in=issued.expires_in,
        scope=" ".join(issued.scopes),
    )
