"""Model schema, item creation/listing and NGSI-LD publishing."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ace.api.deps import get_current_client, get_model_store, get_orion, get_registry
from ace.api.v1.templates import dump_fields
from ace.core.errors import ModelNotFoundError, RecordValidationError
from ace.core.logging import get_logger
from ace.integrations.orion import OrionPublisher
from ace.stores.models import ModelStore
from ace.templates.models import Template
from ace.templates.registry import TemplateRegistry
from ace.validation.validator import validate_against

logger = get_logger(__name__)

router = APIRouter(
    prefix="/models",
    tags=["Models"],
    dependencies=[Depends(get_current_client)],
)


def _resolve_template(model_id: str, models: ModelStore, registry: TemplateRegistry) -> Template:
    """An applied model's template, else a template registered under the same id."""
    model = models.get_model(model_id)
    if model is not None:
        return model.template
    template = registry.get_template(model_id)
    if template is None:
        raise ModelNotFoundError(model_id)
    return template


@router.get("/{model_id}/schema")
async def get_schema(
    model_id: str,
    models: ModelStore = Depends(get_model_store),
    registry: TemplateRegistry = Depends(get_registry),
) -> dict[str, Any]:
    template = _resolve_template(model_id, models, registry)
    return {"modelId": model_id, "schema": dump_fields(template)}


@router.post("/{model_id}/items", status_code=status.HTTP_201_CREATED)
async def create_item(
    model_id: str,
    payload: Any = Body(...),
    models: ModelStore = Depends(get_model_store),
    registry: TemplateRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Validate a record against the model's template and store it."""
    template = _resolve_template(model_id, models, registry)

    outcome = validate_against(template, payload)
    if not outcome.ok:
        logger.info("Item rejected", model_id=model_id, error_count=len(outcome.violations))
        raise RecordValidationError(outcome.violations)

    record = models.add_record(model_id, outcome.value)
    return {"item": record.to_dict()}


@router.get("/{model_id}/items")
async def list_items(
    model_id: str,
    models: ModelStore = Depends(get_model_store),
) -> dict[str, Any]:
    return {"items": [record.to_dict() for record in models.list_records(model_id)]}


@router.post("/{model_id}/items/{item_id}/publish/orion")
async def publish_item(
    model_id: str,
    item_id: str,
    models: ModelStore = Depends(get_model_store),
    registry: TemplateRegistry = Depends(get_registry),
    orion: OrionPublisher = Depends(get_orion),
) -> JSONResponse:
    """Push one stored item to Orion-LD as an NGSI-LD entity."""
    template = _resolve_template(model_id, models, registry)
    record = models.get_record(model_id, item_id)

    result = await orion.publish(model_id, record.to_dict(), template)
    return JSONResponse(status_code=result.status_code, content=result.body)
