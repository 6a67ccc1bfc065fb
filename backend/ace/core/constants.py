"""Shared constants and enums used across the application."""

from enum import StrEnum


# GIF standard-dataset marker for 区分◎ (mandatory) items
MANDATORY_MARK = "◎"


class FieldType(StrEnum):
    """Value types a template field can declare."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    CONTROLLED_VOCABULARY = "controlledVocabulary"


class ViolationKind(StrEnum):
    """Why a record (or template) was rejected."""

    UNKNOWN_TEMPLATE = "UNKNOWN_TEMPLATE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    MISSING_REQUIRED = "MISSING_REQUIRED"
    MISSING_MANDATORY = "MISSING_MANDATORY"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    COORDINATE_PAIR_INCOMPLETE = "COORDINATE_PAIR_INCOMPLETE"
    ZERO_ZERO_COORDINATE = "ZERO_ZERO_COORDINATE"
    DUPLICATE_TEMPLATE_ID = "DUPLICATE_TEMPLATE_ID"


class AssetType(StrEnum):
    """Heavy-file formats tracked by the asset registry."""

    CITYGML = "CityGML"
    TILES_3D = "3DTiles"
    GEOTIFF = "GeoTIFF"
    OTHER = "Other"


class FileStatus(StrEnum):
    """Publication lifecycle of an asset."""

    DRAFT = "draft"
    PUBLISHED = "published"
    RETIRED = "retired"


class SchemaProvider(StrEnum):
    """Providers accepted by SCHEMA_AI_PROVIDER."""

    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"
    GPT_4O_STRICT = "gpt-4o-strict"
    GEMINI = "gemini"
    RULE_BASED = "rule-based"


class CkanAction(StrEnum):
    """CKAN Action API endpoints used by the adapter."""

    PACKAGE_CREATE = "package_create"
    PACKAGE_SHOW = "package_show"
    RESOURCE_CREATE = "resource_create"


# Latitude / longitude absolute bounds (GIF core data parts)
LATITUDE_BOUND = 90.0
LONGITUDE_BOUND = 180.0
