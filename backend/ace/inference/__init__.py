"""Spreadsheet-to-template schema inference."""

from ace.inference.generator import GenerationResult, SchemaGenerator, generate_rule_based_schema
from ace.inference.spreadsheet import SheetAnalysis, parse_spreadsheet

__all__ = [
    "GenerationResult",
    "SchemaGenerator",
    "SheetAnalysis",
    "generate_rule_based_schema",
    "parse_spreadsheet",
]
