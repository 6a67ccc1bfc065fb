"""
Built-in GIF standard-dataset templates loaded at process start.

Field lists follow the 推奨データセット definitions; items marked ◎ are
mandatory in the standard and are enforced regardless of `required`.
"""

from __future__ import annotations

from ace.core.constants import MANDATORY_MARK, FieldType
from ace.templates.models import FieldDefinition, Template

LOCAL_GOVERNMENT_CODE_PATTERN = r"^[0-9]{6}$"
IDENTIFIER_PATTERN = r"^[A-Za-z0-9_-]+$"
POSTAL_CODE_PATTERN = r"^[0-9]{7}$"


def _mandatory(field_key: str, label: str, description: str, field_type: FieldType, **extra) -> FieldDefinition:
    return FieldDefinition(
        field_key=field_key,
        label=label,
        description=description,
        type=field_type,
        required=True,
        mandatory_mark=MANDATORY_MARK,
        **extra,
    )


def _optional(field_key: str, label: str, description: str, field_type: FieldType = FieldType.STRING, **extra) -> FieldDefinition:
    return FieldDefinition(
        field_key=field_key,
        label=label,
        description=description,
        type=field_type,
        required=False,
        **extra,
    )


def _common_head(name_description: str) -> list[FieldDefinition]:
    return [
        _mandatory(
            "localGovernmentCode", "全国地方公共団体コード",
            "6-digit local government code (半角数字).", FieldType.STRING,
            pattern=LOCAL_GOVERNMENT_CODE_PATTERN,
        ),
        _mandatory(
            "identifier", "ID", "Record identifier (半角英数字).", FieldType.STRING,
            pattern=IDENTIFIER_PATTERN,
        ),
        _mandatory("name", "名称", name_description, FieldType.STRING),
    ]


def _common_tail() -> list[FieldDefinition]:
    return [
        _mandatory("latitude", "緯度", "GIF Core Data Parts latitude.", FieldType.LATITUDE),
        _mandatory("longitude", "経度", "GIF Core Data Parts longitude.", FieldType.LONGITUDE),
        _mandatory("datasetUpdatedAt", "データセット_最終更新日", "YYYY-MM-DD", FieldType.DATE),
        _optional("note", "備考", "Free-form notes."),
    ]


PUBLIC_FACILITIES = Template(
    id="public-facilities",
    label="公共施設一覧 / Public Facilities List",
    one_click_rigor=True,
    description=(
        "Pre-built GIF-compliant schema for municipal public facilities. "
        "Required items follow the standard recommended dataset."
    ),
    fields=(
        *_common_head("Facility name."),
        _optional("nameEn", "名称_英語", "Facility name (English)."),
        _optional("address", "住所", "Structured address string."),
        _optional("postalCode", "郵便番号", "7-digit postal code.", pattern=POSTAL_CODE_PATTERN),
        _optional("phoneNumber", "電話番号", "Contact phone (半角)."),
        _mandatory(
            "facilityType", "施設分類", "統制語彙による施設分類。",
            FieldType.CONTROLLED_VOCABULARY,
            options=(
                "cityOffice", "library", "communityCenter", "park",
                "gymnasium", "museum", "other",
            ),
        ),
        _optional("administrator", "管理者", "Operating department or organization."),
        *_common_tail(),
    ),
)

AED_LOCATIONS = Template(
    id="aed-locations",
    label="AED設置箇所一覧 / AED Locations List",
    one_click_rigor=True,
    description=(
        "GIF-compliant schema for AED location open data with controlled "
        "vocabularies for mandatory choice fields."
    ),
    fields=(
        *_common_head("Installation name."),
        _mandatory("address", "住所", "Structured address string.", FieldType.STRING),
        _mandatory(
            "installationPlace", "設置場所詳細",
            "Floor, room, or descriptive placement.", FieldType.STRING,
        ),
        _optional("availableHours", "利用可能時間", "Opening hours text (例: 09:00-18:00 / 24H)."),
        _mandatory(
            "pediatricSupport", "小児対応設備の有無",
            "Mandatory controlled vocabulary (yes/no).",
            FieldType.CONTROLLED_VOCABULARY,
            options=("yes", "no"),
        ),
        _optional(
            "availability", "利用可能曜日",
            "統制語彙 (weekday, weekend, holiday, allDays).",
            FieldType.CONTROLLED_VOCABULARY,
            options=("weekday", "weekend", "holiday", "allDays"),
        ),
        _optional("contactPhone", "問い合わせ先電話番号", "Contact phone (半角)."),
        *_common_tail(),
    ),
)


BUILTIN_TEMPLATES: tuple[Template, ...] = (PUBLIC_FACILITIES, AED_LOCATIONS)
