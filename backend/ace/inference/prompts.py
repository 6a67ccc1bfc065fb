"""
LLM prompts for spreadsheet-to-template inference.

All prompt text lives here so it can be iterated on without touching
the generator logic.
"""

from __future__ import annotations

import json

from ace.inference.spreadsheet import SheetAnalysis


# ═══════════════════════════════════════════════════════════
#  System Prompt
# ═══════════════════════════════════════════════════════════

SYSTEM_PROMPT = """
You are a data schema analyst for a GIF-compliant CMS system in Japan.
Your task is to analyze Excel column headers and sample data to generate a structured template schema.

The schema must follow this exact JSON format:
{
  "id": "kebab-case-id",
  "label": "Human readable name (Japanese or English)",
  "description": "Brief description of the template purpose",
  "oneClickRigor": true,
  "fields": [
    {
      "fieldKey": "camelCaseFieldKey",
      "label": "Display Label (日本語 or English)",
      "description": "Field description",
      "type": "string|number|date|controlledVocabulary|latitude|longitude|boolean",
      "required": true|false,
      "pattern": "optional regex pattern as string without delimiters",
      "mandatoryMark": "◎"
    }
  ]
}

Field type mapping rules:
- Text/String columns → "string"
- Numeric columns (integers, decimals) → "number"
- Date columns (YYYY-MM-DD, etc.) → "date"
- Columns with limited distinct values (< 10) → "controlledVocabulary" with "options" array
- Latitude/緯度 columns → "latitude"
- Longitude/経度 columns → "longitude"
- Yes/No, True/False columns → "boolean"

Japanese GIF standard fields to recognize:
- 全国地方公共団体コード → fieldKey: "localGovernmentCode", pattern: "^[0-9]{6}$"
- 緯度 → type: "latitude"
- 経度 → type: "longitude"
- ID/識別子 → pattern: "^[A-Za-z0-9_-]+$"
- 郵便番号 → pattern: "^[0-9]{7}$"

IMPORTANT:
- Return ONLY valid JSON, no markdown code blocks
- Preserve Japanese column names in labels
- Mark fields as required: true if they appear to be mandatory
- For controlledVocabulary, include an "options" array with the distinct values
""".strip()


# ═══════════════════════════════════════════════════════════
#  User Prompt
# ═══════════════════════════════════════════════════════════

def _column_line(column) -> str:
    line = f'- {column.header}: inferred type "{column.inferred_type}"'
    if column.gif_match:
        line += " (GIF standard field)"
    if column.distinct_values:
        shown = ", ".join(str(v) for v in column.distinct_values[:5])
        more = "..." if len(column.distinct_values) > 5 else ""
        line += f", options: [{shown}{more}]"
    if column.sample_values:
        line += f", samples: [{', '.join(str(v) for v in column.sample_values[:3])}]"
    return line


def build_user_prompt(analysis: SheetAnalysis) -> str:
    column_summary = "\n".join(_column_line(c) for c in analysis.columns)
    rows = analysis.sample_data[:5]
    row_lines = "\n".join(
        f"Row {i + 1}: {json.dumps(row, ensure_ascii=False, default=str)}"
        for i, row in enumerate(rows)
    )

    return f"""Analyze this Excel file structure and generate a schema:

File name: {analysis.filename}

Columns ({len(analysis.headers)} total):
{column_summary}

Sample data (first {len(rows)} rows):
{row_lines}

Generate a complete schema JSON following the specified format.
Suggest an appropriate id (kebab-case) and label based on the data content."""
