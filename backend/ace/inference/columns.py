"""
Column analysis for spreadsheet-to-template inference.

Recognises GIF standard headers and guesses a FieldType for every other
column from its header text and sampled values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Sequence

from ace.core.constants import LATITUDE_BOUND, LONGITUDE_BOUND, FieldType
from ace.templates.builtin import (
    IDENTIFIER_PATTERN,
    LOCAL_GOVERNMENT_CODE_PATTERN,
    POSTAL_CODE_PATTERN,
)

_NUMERIC_TEXT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_DATE_LIKE = re.compile(r"[0-9]{4}[-/][0-9]{2}[-/][0-9]{2}")
_BOOLEAN_WORDS = {"yes", "no", "true", "false", "はい", "いいえ", "有", "無"}

# A column is a vocabulary when it has few distinct values relative to rows.
VOCABULARY_MAX_DISTINCT = 10
VOCABULARY_MAX_RATIO = 0.5


@dataclass(frozen=True)
class GifMapping:
    field_key: str
    type: FieldType
    pattern: str | None = None


GIF_FIELD_MAPPINGS: dict[str, GifMapping] = {
    "全国地方公共団体コード": GifMapping("localGovernmentCode", FieldType.STRING, LOCAL_GOVERNMENT_CODE_PATTERN),
    "ID": GifMapping("identifier", FieldType.STRING, IDENTIFIER_PATTERN),
    "名称": GifMapping("name", FieldType.STRING),
    "名称_英語": GifMapping("nameEn", FieldType.STRING),
    "住所": GifMapping("address", FieldType.STRING),
    "郵便番号": GifMapping("postalCode", FieldType.STRING, POSTAL_CODE_PATTERN),
    "電話番号": GifMapping("phoneNumber", FieldType.STRING),
    "緯度": GifMapping("latitude", FieldType.LATITUDE),
    "経度": GifMapping("longitude", FieldType.LONGITUDE),
    "備考": GifMapping("note", FieldType.STRING),
    "データセット_最終更新日": GifMapping("datasetUpdatedAt", FieldType.DATE),
}


@dataclass
class ColumnAnalysis:
    """What was learned about one spreadsheet column."""

    header: str
    index: int
    sample_values: list[Any]
    inferred_type: FieldType
    distinct_count: int
    has_nulls: bool
    distinct_values: list[Any] | None = None
    gif_match: GifMapping | None = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_numeric_text(value: Any) -> bool:
    if _is_number(value):
        return True
    return isinstance(value, str) and _NUMERIC_TEXT.fullmatch(value.strip()) is not None


def _is_date_like(value: Any) -> bool:
    return isinstance(value, str) and _DATE_LIKE.fullmatch(value) is not None


def _is_boolean_like(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.lower() in _BOOLEAN_WORDS


def _all_within(values: Sequence[Any], bound: float) -> bool:
    return all(-bound <= float(v) <= bound for v in values)


def _distinct(values: Sequence[Any]) -> list[Any]:
    return list(dict.fromkeys(values))


def infer_type(values: Sequence[Any], header: str) -> FieldType:
    """Guess the FieldType of a column from its header and sample values."""
    non_empty = [v for v in values if v is not None and v != ""]
    if not non_empty:
        return FieldType.STRING

    gif_match = GIF_FIELD_MAPPINGS.get(header)
    if gif_match:
        return gif_match.type

    header_lower = header.lower()
    if "緯度" in header_lower or "latitude" in header_lower:
        return FieldType.LATITUDE
    if "経度" in header_lower or "longitude" in header_lower:
        return FieldType.LONGITUDE

    if all(_is_number(v) for v in non_empty):
        return FieldType.NUMBER
    if all(_is_numeric_text(v) for v in non_empty):
        if "lat" in header_lower and _all_within(non_empty, LATITUDE_BOUND):
            return FieldType.LATITUDE
        if "lon" in header_lower and _all_within(non_empty, LONGITUDE_BOUND):
            return FieldType.LONGITUDE
        return FieldType.NUMBER
    if all(_is_date_like(v) for v in non_empty):
        return FieldType.DATE
    if all(_is_boolean_like(v) for v in non_empty):
        return FieldType.BOOLEAN

    distinct = _distinct(non_empty)
    if len(distinct) <= VOCABULARY_MAX_DISTINCT and len(distinct) < len(non_empty) * VOCABULARY_MAX_RATIO:
        return FieldType.CONTROLLED_VOCABULARY

    return FieldType.STRING


def analyze_columns(headers: Sequence[str], data_rows: Sequence[Sequence[Any]]) -> list[ColumnAnalysis]:
    """Analyse each column of the sampled rows."""
    columns = []
    for index, header in enumerate(headers):
        values = [
            row[index] for row in data_rows
            if index < len(row) and row[index] is not None
        ]
        inferred = infer_type(values, header)
        distinct = _distinct(values)
        columns.append(ColumnAnalysis(
            header=header,
            index=index,
            sample_values=values[:5],
            inferred_type=inferred,
            distinct_count=len(distinct),
            has_nulls=len(values) < len(data_rows),
            distinct_values=distinct if inferred == FieldType.CONTROLLED_VOCABULARY else None,
            gif_match=GIF_FIELD_MAPPINGS.get(header),
        ))
    return columns


def sanitize_field_key(header: str) -> str:
    """camelCase an arbitrary header into a valid ASCII field key."""
    key = re.sub(r"[^A-Za-z0-9_\s]", "", header)
    key = re.sub(r"\s+(.)", lambda m: m.group(1).upper(), key)
    key = re.sub(r"\s", "", key)
    if key:
        key = key[0].lower() + key[1:]
    if key[:1].isdigit():
        key = f"_{key}"
    return key or "field"
