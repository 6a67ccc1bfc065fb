"""Spreadsheet upload → inferred template schema → confirmed template."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from ace.api.deps import get_current_client, get_registry, get_schema_generator
from ace.api.schemas.templates import ConfirmSchemaRequest
from ace.core.config import settings
from ace.core.constants import SchemaProvider
from ace.core.errors import SpreadsheetError
from ace.core.logging import get_logger
from ace.inference.generator import GenerationResult, SchemaGenerator, generate_rule_based_schema
from ace.inference.spreadsheet import SheetAnalysis, is_allowed_upload, parse_spreadsheet
from ace.templates.models import Template
from ace.templates.registry import TemplateRegistry

logger = get_logger(__name__)

router = APIRouter(
    prefix="/excel-to-schema",
    tags=["Schema inference"],
    dependencies=[Depends(get_current_client)],
)


def _analysis_summary(analysis: SheetAnalysis) -> dict[str, Any]:
    return {
        "filename": analysis.filename,
        "sheetName": analysis.sheet_name,
        "totalRows": analysis.total_rows,
        "columnCount": len(analysis.headers),
        "columns": [
            {
                "header": column.header,
                "inferredType": column.inferred_type.value,
                "distinctCount": column.distinct_count,
                "hasNulls": column.has_nulls,
                "gifMatch": column.gif_match is not None,
            }
            for column in analysis.columns
        ],
    }


@router.post("/analyze")
async def analyze_upload(
    file: UploadFile | None = File(None),
    skip_ai: bool = Query(False, alias="skipAI"),
    strict: bool = Query(False),
    generator: SchemaGenerator = Depends(get_schema_generator),
) -> dict[str, Any]:
    """
    Analyse the first sheet of an upload and propose a template schema.

    `skipAI` forces the rule-based generator; `strict` forces strict LLM mode.
    """
    if file is None:
        raise SpreadsheetError("No file uploaded")

    filename = file.filename or ""
    if not is_allowed_upload(filename, file.content_type):
        raise SpreadsheetError("Only Excel (.xlsx, .xls) and CSV files are allowed")

    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise SpreadsheetError("File size exceeds 10MB limit")

    analysis = parse_spreadsheet(content, filename, file.content_type)

    if skip_ai:
        result = GenerationResult(
            schema=generate_rule_based_schema(analysis),
            ai_generated=False,
            provider=SchemaProvider.RULE_BASED.value,
        )
    else:
        result = await generator.generate(analysis, force_strict=strict)

    return {**result.to_dict(), "analysis": _analysis_summary(analysis)}


@router.post("/confirm", status_code=status.HTTP_201_CREATED)
async def confirm_schema(
    payload: ConfirmSchemaRequest,
    registry: TemplateRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Register a reviewed schema as a new template; 409 on a duplicate id."""
    template = Template.model_validate(
        payload.template_schema.model_dump(by_alias=True, exclude_none=True)
    )
    added = registry.add_template(template)
    return {
        "message": "Template created successfully",
        "template": {
            "id": added.id,
            "label": added.label,
            "fieldCount": len(added.fields),
        },
    }
