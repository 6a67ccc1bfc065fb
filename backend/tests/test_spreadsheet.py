"""Tests for reading uploaded spreadsheets."""

import io
from datetime import datetime

import pytest
import xlrd
from openpyxl import Workbook
from xlrd.sheet import Cell

from ace.core.constants import FieldType
from ace.core.errors import SpreadsheetError
from ace.inference.spreadsheet import SAMPLE_ROWS, is_allowed_upload, parse_spreadsheet


def xlsx_bytes(rows, title="施設"):
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def facility_rows():
    return [
        ["全国地方公共団体コード", "名称", "緯度", "経度", "開館日", None],
        ["131016", "中央図書館", 35.6895, 139.6917, datetime(2024, 5, 1), None],
        ["131016", "区民会館", 35.6901, 139.7001, datetime(2024, 6, 1), None],
    ]


class TestUploadFilter:

    @pytest.mark.parametrize("filename,content_type,allowed", [
        ("list.xlsx", None, True),
        ("LIST.XLS", "application/octet-stream", True),
        ("list.csv", None, True),
        ("upload", "text/csv", True),
        ("notes.txt", "text/plain", False),
    ])
    def test_is_allowed_upload(self, filename, content_type, allowed):
        assert is_allowed_upload(filename, content_type) is allowed


class TestParseXlsx:

    def test_headers_and_columns(self, facility_rows):
        analysis = parse_spreadsheet(xlsx_bytes(facility_rows), "facilities.xlsx")
        assert analysis.sheet_name == "施設"
        assert analysis.headers == ["全国地方公共団体コード", "名称", "緯度", "経度", "開館日"]
        assert analysis.total_rows == 2
        types = [c.inferred_type for c in analysis.columns]
        assert types == [
            FieldType.STRING, FieldType.STRING, FieldType.LATITUDE,
            FieldType.LONGITUDE, FieldType.DATE,
        ]

    def test_dates_become_iso_strings(self, facility_rows):
        analysis = parse_spreadsheet(xlsx_bytes(facility_rows), "facilities.xlsx")
        assert analysis.sample_data[0][4] == "2024-05-01"

    def test_sample_is_capped(self):
        rows = [["名称"]] + [[f"施設{i}"] for i in range(25)]
        analysis = parse_spreadsheet(xlsx_bytes(rows), "many.xlsx")
        assert len(analysis.sample_data) == SAMPLE_ROWS
        assert analysis.total_rows == 25

    def test_header_only_rejected(self):
        with pytest.raises(SpreadsheetError, match="at least one data row"):
            parse_spreadsheet(xlsx_bytes([["名称"]]), "empty.xlsx")

    def test_corrupt_workbook(self):
        with pytest.raises(SpreadsheetError):
            parse_spreadsheet(b"not a zip file", "broken.xlsx")


class TestParseCsv:

    def test_utf8_with_bom(self):
        content = "名称,座席数\n図書館,120\n公民館,80\n".encode("utf-8-sig")
        analysis = parse_spreadsheet(content, "seats.csv")
        assert analysis.headers == ["名称", "座席数"]
        assert analysis.columns[1].inferred_type == FieldType.NUMBER

    def test_shift_jis(self):
        content = "名称,住所\n図書館,千代田区\n".encode("cp932")
        analysis = parse_spreadsheet(content, "sjis.csv")
        assert analysis.headers == ["名称", "住所"]
        assert analysis.sample_data == [["図書館", "千代田区"]]

    def test_blank_lines_dropped(self):
        content = "名称\n\n図書館\n,\n".encode("utf-8")
        analysis = parse_spreadsheet(content, "blank.csv")
        assert analysis.total_rows == 1

    def test_unknown_extension(self):
        with pytest.raises(SpreadsheetError, match="Only Excel"):
            parse_spreadsheet(b"a,b", "data.json")

    def test_reader_chosen_by_content_type(self):
        analysis = parse_spreadsheet(b"a,b\n1,2\n", "upload", "text/csv")
        assert analysis.headers == ["a", "b"]
        assert analysis.sample_data == [["1", "2"]]

    def test_unknown_extension_and_type(self):
        with pytest.raises(SpreadsheetError, match="Only Excel"):
            parse_spreadsheet(b"a,b", "upload", "text/plain")


class FakeSheet:
    name = "施設"

    def __init__(self, cells):
        self._cells = cells
        self.nrows = len(cells)
        self.ncols = len(cells[0])

    def cell(self, r, c):
        return self._cells[r][c]


class FakeBook:
    datemode = 0

    def __init__(self, sheet):
        self._sheet = sheet

    def sheet_by_index(self, index):
        return self._sheet


class TestParseXls:

    def test_date_cells_become_iso_strings(self, monkeypatch):
        cells = [
            [Cell(xlrd.XL_CELL_TEXT, "名称"), Cell(xlrd.XL_CELL_TEXT, "開館日")],
            [Cell(xlrd.XL_CELL_TEXT, "中央図書館"), Cell(xlrd.XL_CELL_DATE, 45413.0)],
        ]
        monkeypatch.setattr(
            xlrd, "open_workbook", lambda file_contents: FakeBook(FakeSheet(cells))
        )
        analysis = parse_spreadsheet(b"xls", "facilities.xls")
        assert analysis.sheet_name == "施設"
        assert analysis.sample_data == [["中央図書館", "2024-05-01"]]
        assert analysis.columns[1].inferred_type == FieldType.DATE
