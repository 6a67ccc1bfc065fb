"""AssetStore: descriptors of heavy 3D / GIS files (DAS abstraction layer)."""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Any

from ace.core.logging import get_logger

logger = get_logger(__name__)


class AssetStore:
    """Append-only list of asset descriptors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._assets: list[dict[str, Any]] = []

    def list_assets(self) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(asset) for asset in self._assets]

    def add_asset(self, fields: dict[str, Any]) -> dict[str, Any]:
        asset = {
            "id": str(uuid.uuid4()),
            **fields,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        with self._lock:
            self._assets.append(asset)
        logger.info("Asset registered", asset_id=asset["id"], asset_type=fields.get("assetType"))
        return dict(asset)
