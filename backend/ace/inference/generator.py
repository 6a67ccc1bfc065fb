"""
SchemaGenerator: proposes a template schema for an analysed spreadsheet.

The LLM path asks an OpenAI chat model for the schema JSON, retries on
bad answers (escalating gpt-4o-mini to gpt-4o strict on the last retry)
and falls back to the rule-based generator when every attempt fails or
no model is available.  Generated schemas are proposals only; nothing is
registered until the caller confirms.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from ace.core.config import settings
from ace.core.constants import FieldType, SchemaProvider
from ace.core.errors import SchemaInferenceError
from ace.core.logging import get_logger
from ace.core.tracing import traceable_step
from ace.inference.columns import sanitize_field_key
from ace.inference.prompts import SYSTEM_PROMPT, build_user_prompt
from ace.inference.spreadsheet import SheetAnalysis

logger = get_logger(__name__)

_JSON_RESPONSE_MODELS = {SchemaProvider.GPT_4O_MINI, SchemaProvider.GPT_4O}
_FENCED_JSON = re.compile(r"```json\n?([\s\S]*?)\n?```")
_FENCED_ANY = re.compile(r"```\n?([\s\S]*?)\n?```")
_BARE_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class GenerationResult:
    schema: dict[str, Any]
    ai_generated: bool
    provider: str
    strict: bool | None = None
    warning: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "schema": self.schema,
            "aiGenerated": self.ai_generated,
            "provider": self.provider,
        }
        if self.strict is not None:
            body["strict"] = self.strict
        if self.warning:
            body["warning"] = self.warning
        return body


# ═══════════════════════════════════════════════════════════
#  Response parsing and normalisation
# ═══════════════════════════════════════════════════════════

def parse_ai_response(response: str | None) -> dict[str, Any]:
    """Parse model output that may be raw JSON, fenced JSON, or prose around an object."""
    if not response:
        raise SchemaInferenceError("Empty AI response")
    try:
        parsed = json.loads(response)
    except json.JSONDecodeError:
        match = (
            _FENCED_JSON.search(response)
            or _FENCED_ANY.search(response)
            or _BARE_OBJECT.search(response)
        )
        if match is None:
            raise SchemaInferenceError("Could not parse JSON from AI response") from None
        text = match.group(1) if match.groups() else match.group(0)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SchemaInferenceError(f"Could not parse JSON from AI response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise SchemaInferenceError("Schema must be an object")
    return parsed


def normalize_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Check the outer shape and repair field-level problems in place:
    missing or duplicate keys, missing labels, unknown types,
    non-boolean `required`, vocabularies without options.
    """
    if not isinstance(schema.get("id"), str) or not schema["id"]:
        raise SchemaInferenceError("Schema must have a string id")
    if not isinstance(schema.get("label"), str) or not schema["label"]:
        raise SchemaInferenceError("Schema must have a string label")
    fields = schema.get("fields")
    if not isinstance(fields, list) or not fields:
        raise SchemaInferenceError("Schema must have at least one field")

    valid_types = {t.value for t in FieldType}
    seen: set[str] = set()
    normalized = []
    for index, raw in enumerate(fields):
        field = dict(raw) if isinstance(raw, dict) else {}
        base_key = field.get("fieldKey") or f"field{index + 1}"
        key = base_key
        counter = 1
        while key in seen:
            key = f"{base_key}_{counter}"
            counter += 1
        seen.add(key)
        field["fieldKey"] = key

        if not field.get("label"):
            field["label"] = key
        if field.get("type") not in valid_types:
            field["type"] = FieldType.STRING.value
        if field["type"] == FieldType.CONTROLLED_VOCABULARY and not field.get("options"):
            field["type"] = FieldType.STRING.value
        if not isinstance(field.get("required"), bool):
            field["required"] = False
        normalized.append(field)

    schema["fields"] = normalized
    return schema


# ═══════════════════════════════════════════════════════════
#  Rule-based generator
# ═══════════════════════════════════════════════════════════

def _template_id_from_filename(filename: str) -> str:
    stem = re.sub(r"\.[^.]+$", "", filename).lower()
    stem = re.sub(r"[^a-z0-9_\s-]", "", stem)
    stem = re.sub(r"[\s_]+", "-", stem).strip("-")
    return stem[:50].rstrip("-")


def generate_rule_based_schema(analysis: SheetAnalysis) -> dict[str, Any]:
    fields = []
    for column in analysis.columns:
        gif = column.gif_match
        field: dict[str, Any] = {
            "fieldKey": gif.field_key if gif else sanitize_field_key(column.header),
            "label": column.header,
            "description": f'Auto-detected from column "{column.header}"',
            "type": column.inferred_type.value,
            "required": False,
        }
        if gif and gif.pattern:
            field["pattern"] = gif.pattern
        if column.inferred_type == FieldType.CONTROLLED_VOCABULARY and column.distinct_values:
            field["options"] = [str(v) for v in column.distinct_values]
        fields.append(field)

    return normalize_schema({
        "id": _template_id_from_filename(analysis.filename) or "imported-schema",
        "label": re.sub(r"\.[^.]+$", "", analysis.filename) or "Imported schema",
        "description": "Schema generated from Excel file (rule-based)",
        "oneClickRigor": False,
        "fields": fields,
    })


# ═══════════════════════════════════════════════════════════
#  LLM generator
# ═══════════════════════════════════════════════════════════

class SchemaGenerator:
    """Generate a template schema with an LLM, falling back to rules."""

    def __init__(
        self,
        provider: str | None = None,
        client: AsyncOpenAI | None = None,
        max_retries: int | None = None,
        strict_escalation: bool | None = None,
    ) -> None:
        self.provider = provider or settings.SCHEMA_AI_PROVIDER
        self.max_retries = settings.SCHEMA_AI_MAX_RETRIES if max_retries is None else max_retries
        self.strict_escalation = (
            settings.SCHEMA_AI_STRICT_ESCALATION if strict_escalation is None else strict_escalation
        )
        if client is None and settings.OPENAI_API_KEY:
            client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self._client = client

    def _fallback(self, analysis: SheetAnalysis, warning: str) -> GenerationResult:
        logger.warning("Using rule-based schema fallback", reason=warning)
        return GenerationResult(
            schema=generate_rule_based_schema(analysis),
            ai_generated=False,
            provider=SchemaProvider.RULE_BASED.value,
            warning=warning,
        )

    async def generate(self, analysis: SheetAnalysis, force_strict: bool = False) -> GenerationResult:
        if self.provider == SchemaProvider.GEMINI:
            return self._fallback(analysis, "Gemini provider not yet implemented")
        if self._client is None:
            return self._fallback(analysis, "AI generation unavailable: OpenAI API key not configured")

        strict = force_strict or self.provider == SchemaProvider.GPT_4O_STRICT
        model = SchemaProvider.GPT_4O.value if self.provider == SchemaProvider.GPT_4O_STRICT else self.provider
        user_prompt = build_user_prompt(analysis)
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await self._complete(user_prompt, model, strict)
                logger.debug("AI response received", model=model, preview=(response or "")[:500])
                schema = normalize_schema(parse_ai_response(response))
                logger.info(
                    "AI schema generated",
                    model=model,
                    template_id=schema["id"],
                    field_count=len(schema["fields"]),
                )
                return GenerationResult(schema=schema, ai_generated=True, provider=model, strict=strict)
            except (OpenAIError, SchemaInferenceError) as exc:
                last_error = exc
                logger.warning("AI attempt failed", attempt=attempt + 1, model=model, error=str(exc))

                if (
                    attempt == self.max_retries - 1
                    and model == SchemaProvider.GPT_4O_MINI
                    and self.strict_escalation
                ):
                    logger.info("Escalating to GPT-4o strict mode")
                    model = SchemaProvider.GPT_4O.value
                    strict = True

        return self._fallback(
            analysis,
            f"AI generation failed: {last_error}. Used rule-based fallback.",
        )

    @traceable_step(name="infer_template_schema", run_type="llm", tags=["schema", "openai"])
    async def _complete(self, user_prompt: str, model: str, strict: bool) -> str:
        options: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0.0 if strict else settings.LLM_TEMPERATURE,
            "max_tokens": settings.LLM_MAX_TOKENS,
        }
        if model in _JSON_RESPONSE_MODELS:
            options["response_format"] = {"type": "json_object"}

        completion = await self._client.chat.completions.create(**options)
        return completion.choices[0].message.content or ""
