"""
Prototype OAuth 2.0 client-credential token issuance.

Tokens are opaque UUIDs kept in memory with a fixed TTL.  There is no
refresh, revocation endpoint or key rotation.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

from ace.core.config import settings
from ace.core.errors import (
    InvalidClientError,
    InvalidScopeError,
    InvalidTokenError,
    TokenExpiredError,
)
from ace.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OAuthClient:
    client_id: str
    client_secret: str
    scopes: tuple[str, ...]


@dataclass(frozen=True)
class TokenData:
    """What a bearer token grants; attached to the request by the guard."""

    client_id: str
    scopes: tuple[str, ...]
    created_at: float


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    expires_in: int
    scopes: tuple[str, ...]
    token_type: str = "Bearer"


@dataclass
class TokenStore:
    """Registered clients and live tokens."""

    ttl_seconds: int = 3600
    clock: Callable[[], float] = time.time
    _clients: dict[str, OAuthClient] = field(default_factory=dict)
    _tokens: dict[str, TokenData] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def from_settings(cls) -> TokenStore:
        store = cls(ttl_seconds=settings.OAUTH_TOKEN_TTL_SECONDS)
        store.register_client(OAuthClient(
            client_id=settings.OAUTH_CLIENT_ID,
            client_secret=settings.OAUTH_CLIENT_SECRET,
            scopes=tuple(settings.OAUTH_SCOPES),
        ))
        return store

    def register_client(self, client: OAuthClient) -> None:
        with self._lock:
            self._clients[client.client_id] = client

    def issue_token(self, client_id: str, client_secret: str, scope: str = "") -> IssuedToken:
        """
        Issue a token for valid client credentials.

        `scope` is a space-separated list; empty means all client scopes.

        Raises:
            InvalidClientError: unknown client or wrong secret.
            InvalidScopeError: a requested scope is not granted to the client.
        """
        with self._lock:
            client = self._clients.get(client_id)
        if client is None or client.client_secret != client_secret:
            logger.warning("Token request rejected", client_id=client_id, reason="invalid_client")
            raise InvalidClientError()

        requested = tuple(scope.split()) if scope else client.scopes
        if not set(requested) <= set(client.scopes):
            logger.warning("Token request rejected", client_id=client_id, reason="invalid_scope")
            raise InvalidScopeError()

        token = str(uuid.uuid4())
        with self._lock:
            now = self.clock()
            expired = [k for k, v in self._tokens.items() if now - v.created_at > self.ttl_seconds]
            for key in expired:
                del self._tokens[key]
            self._tokens[token] = TokenData(
                client_id=client_id,
                scopes=requested,
                created_at=now,
            )
        logger.info("Token issued", client_id=client_id, scopes=list(requested))
        return IssuedToken(access_token=token, expires_in=self.ttl_seconds, scopes=requested)

    def resolve(self, token: str) -> TokenData:
        """
        Look up a bearer token.

        Raises:
            InvalidTokenError: token is unknown.
            TokenExpiredError: token outlived the TTL; it is evicted.
        """
        with self._lock:
            data = self._tokens.get(token)
            if data is None:
                raise InvalidTokenError()
            if self.clock() - data.created_at > self.ttl_seconds:
                del self._tokens[token]
                raise TokenExpiredError()
        return data
