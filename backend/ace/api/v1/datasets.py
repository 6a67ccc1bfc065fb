"""RESTful dataset routes backed by the CKAN Action API."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ace.api.deps import get_ckan, get_current_client
from ace.api.schemas.catalog import DatasetCreateRequest, DatasetResource
from ace.integrations.base import IntegrationResult
from ace.integrations.ckan import CkanAdapter

router = APIRouter(
    prefix="/datasets",
    tags=["Datasets"],
    dependencies=[Depends(get_current_client)],
)


def _respond(result: IntegrationResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post("")
async def create_dataset(
    payload: DatasetCreateRequest,
    ckan: CkanAdapter = Depends(get_ckan),
) -> JSONResponse:
    """package_create"""
    return _respond(await ckan.create_dataset(payload.model_dump(mode="json", by_alias=True)))


@router.get("/{dataset_id}")
async def show_dataset(
    dataset_id: str,
    ckan: CkanAdapter = Depends(get_ckan),
) -> JSONResponse:
    """package_show"""
    return _respond(await ckan.show_dataset(dataset_id))


@router.post("/{dataset_id}/resources")
async def create_resource(
    dataset_id: str,
    payload: DatasetResource,
    ckan: CkanAdapter = Depends(get_ckan),
) -> JSONResponse:
    """resource_create"""
    return _respond(
        await ckan.create_resource(dataset_id, payload.model_dump(mode="json", by_alias=True))
    )
