"""Shared dependencies for API routes.

Every process-wide object (registry, stores, adapters) lives on
``app.state`` and is handed to routes through these providers, so tests
can build an isolated application per case.
"""

from __future__ import annotations

from fastapi import Depends, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ace.collab.hub import CollaborationHub
from ace.core.errors import InvalidTokenError
from ace.core.security import TokenData, TokenStore
from ace.inference.generator import SchemaGenerator
from ace.integrations.ckan import CkanAdapter
from ace.integrations.orion import OrionPublisher
from ace.stores.assets import AssetStore
from ace.stores.models import ModelStore
from ace.templates.registry import TemplateRegistry

security_scheme = HTTPBearer(auto_error=False)


def get_registry(request: Request) -> TemplateRegistry:
    return request.app.state.registry


def get_model_store(request: Request) -> ModelStore:
    return request.app.state.models


def get_asset_store(request: Request) -> AssetStore:
    return request.app.state.assets


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.tokens


def get_ckan(request: Request) -> CkanAdapter:
    return request.app.state.ckan


def get_orion(request: Request) -> OrionPublisher:
    return request.app.state.orion


def get_schema_generator(request: Request) -> SchemaGenerator:
    return request.app.state.schema_generator


def get_collaboration_hub(websocket: WebSocket) -> CollaborationHub:
    return websocket.app.state.hub


async def get_current_client(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    tokens: TokenStore = Depends(get_token_store),
) -> TokenData:
    """Resolve the bearer token; raises InvalidTokenError / TokenExpiredError."""
    if credentials is None:
        raise InvalidTokenError()
    return tokens.resolve(credentials.credentials)
