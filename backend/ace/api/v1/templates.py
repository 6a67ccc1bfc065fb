"""Template catalog and one-click model instantiation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from ace.api.deps import get_current_client, get_model_store, get_registry
from ace.api.schemas.templates import ApplyTemplateRequest
from ace.core.errors import UnknownTemplateError
from ace.stores.models import ModelStore
from ace.templates.models import Template
from ace.templates.registry import TemplateRegistry

router = APIRouter(
    prefix="/model-templates",
    tags=["Templates"],
    dependencies=[Depends(get_current_client)],
)


def dump_template(template: Template) -> dict[str, Any]:
    return template.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_fields(template: Template) -> list[dict[str, Any]]:
    return dump_template(template)["fields"]


@router.get("")
async def list_templates(registry: TemplateRegistry = Depends(get_registry)) -> dict[str, Any]:
    """List every registered template in registration order."""
    return {"templates": [dump_template(t) for t in registry.list_templates()]}


@router.post("/{template_id}/apply", status_code=status.HTTP_201_CREATED)
async def apply_template(
    template_id: str,
    payload: ApplyTemplateRequest | None = None,
    registry: TemplateRegistry = Depends(get_registry),
    models: ModelStore = Depends(get_model_store),
) -> dict[str, Any]:
    """Instantiate a model with the template's schema enforced on its items."""
    template = registry.get_template(template_id)
    if template is None:
        raise UnknownTemplateError(template_id)

    payload = payload or ApplyTemplateRequest()
    model = models.instantiate(payload.model_id or template.id, template, payload.title)
    return {
        "modelId": model.model_id,
        "title": model.title,
        "schema": dump_fields(template),
        "enforced": template.enforced_keys,
    }
