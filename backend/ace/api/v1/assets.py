"""Asset registry for heavy 3D / GIS files (descriptors only)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from ace.api.deps import get_asset_store, get_current_client
from ace.api.schemas.catalog import AssetCreateRequest
from ace.stores.assets import AssetStore

router = APIRouter(
    prefix="/assets",
    tags=["Assets"],
    dependencies=[Depends(get_current_client)],
)


@router.get("")
async def list_assets(assets: AssetStore = Depends(get_asset_store)) -> dict[str, Any]:
    return {"assets": assets.list_assets()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_asset(
    payload: AssetCreateRequest,
    assets: AssetStore = Depends(get_asset_store),
) -> dict[str, Any]:
    return assets.add_asset(payload.model_dump(mode="json", by_alias=True, exclude_none=True))
