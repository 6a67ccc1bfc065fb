"""Tests for spreadsheet column type inference."""

import pytest

from ace.core.constants import FieldType
from ace.inference.columns import analyze_columns, infer_type, sanitize_field_key


class TestInferType:

    def test_gif_header_wins(self):
        assert infer_type(["131016"], "全国地方公共団体コード") == FieldType.STRING
        assert infer_type(["2024-01-01"], "データセット_最終更新日") == FieldType.DATE

    def test_empty_column_is_string(self):
        assert infer_type([None, ""], "Anything") == FieldType.STRING

    @pytest.mark.parametrize("header", ["緯度(世界測地系)", "Latitude"])
    def test_latitude_by_header(self, header):
        assert infer_type([35.1], header) == FieldType.LATITUDE

    def test_longitude_by_header(self):
        assert infer_type([139.1], "longitude_wgs84") == FieldType.LONGITUDE

    def test_numbers(self):
        assert infer_type([1, 2.5, 3], "Seats") == FieldType.NUMBER

    def test_numeric_text(self):
        assert infer_type(["1", "2.5", "-3"], "Seats") == FieldType.NUMBER

    def test_numeric_text_lat_hint(self):
        assert infer_type(["35.1", "35.2"], "lat") == FieldType.LATITUDE
        assert infer_type(["135.1", "139.2"], "lng_lon") == FieldType.LONGITUDE

    def test_dates(self):
        assert infer_type(["2024-01-01", "2024/02/03"], "Opened") == FieldType.DATE

    def test_booleans(self):
        assert infer_type(["はい", "いいえ", "yes"], "Parking") == FieldType.BOOLEAN

    def test_vocabulary(self):
        values = ["library", "park", "library", "park", "museum", "park", "library"]
        assert infer_type(values, "Kind") == FieldType.CONTROLLED_VOCABULARY

    def test_free_text(self):
        values = ["a", "b", "c", "d"]
        assert infer_type(values, "Memo") == FieldType.STRING


class TestAnalyzeColumns:

    def test_analysis_fields(self):
        headers = ["名称", "Kind"]
        rows = [
            ["図書館", "library"],
            ["公園", "park"],
            ["市役所", "library"],
            ["体育館", None],
            ["美術館", "library"],
            ["児童館", "park"],
            ["分館", "library"],
        ]
        name, kind = analyze_columns(headers, rows)

        assert name.gif_match.field_key == "name"
        assert name.has_nulls is False
        assert name.distinct_count == 7

        assert kind.gif_match is None
        assert kind.has_nulls is True
        assert kind.inferred_type == FieldType.CONTROLLED_VOCABULARY
        assert kind.distinct_values == ["library", "park"]

    def test_short_rows(self):
        (column,) = analyze_columns(["A"], [[], ["x"]])
        assert column.sample_values == ["x"]
        assert column.has_nulls is True


class TestSanitizeFieldKey:

    @pytest.mark.parametrize("header,key", [
        ("Facility Name", "facilityName"),
        ("opening hours (weekday)", "openingHoursWeekday"),
        ("2nd floor", "_2ndFloor"),
        ("施設名", "field"),
        ("snake_case", "snake_case"),
    ])
    def test_sanitize(self, header, key):
        assert sanitize_field_key(header) == key
