"""Shared result type for outbound adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class IntegrationResult:
    """HTTP status and JSON body to hand back to the API caller as-is."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def build_client(
    timeout: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """One short-lived client per call; `transport` is swapped in by tests."""
    return httpx.AsyncClient(timeout=timeout, transport=transport)
