"""Tests for the row encoders."""

from __future__ import annotations

import csv
import io
import json

import pytest

from mcp_sheets_io.encoders import (
    EMPTY_SHEET_MARKER,
    ExportFormat,
    cell_to_str,
    csv_cell,
    encode,
    encode_json,
    encode_rows,
)
from mcp_sheets_io.models import TabularBlock


def test_text_joins_cells_with_pipes() -> None:
    rows = [["Name", "Qty"], ["Apples", 3]]
    assert encode_rows(rows, ExportFormat.TEXT) == "Name | Qty\nApples | 3"


def test_empty_sheet_marker() -> None:
    assert encode_rows([], ExportFormat.TEXT) == EMPTY_SHEET_MARKER
    assert encode_rows([], ExportFormat.CSV) == EMPTY_SHEET_MARKER


def test_csv_scenario_quotes_commas_and_quotes() -> None:
    rows = [["a", "b"], ["c, d", 'e"f']]
    assert encode_rows(rows, ExportFormat.CSV) == 'a,b\n"c, d","e""f"'


@pytest.mark.parametrize("value", ["x,y", 'say "hi"', "line1\nline2", 'all, "three"\n'])
def test_csv_quoted_cells_parse_back(value: str) -> None:
    encoded = csv_cell(value)
    assert encoded.startswith('"') and encoded.endswith('"')
    parsed = next(csv.reader(io.StringIO(encoded + "\n")))
    assert parsed == [value]


def test_csv_plain_cells_verbatim() -> None:
    assert csv_cell("plain text") == "plain text"
    assert csv_cell(None) == ""
    assert csv_cell(12.5) == "12.5"


def test_ragged_rows_are_kept() -> None:
    rows = [["a"], ["b", "c", "d"], []]
    assert encode_rows(rows, ExportFormat.CSV) == "a\nb,c,d\n"


def test_cell_coercion() -> None:
    assert cell_to_str(None) == ""
    assert cell_to_str(0) == "0"
    assert cell_to_str(True) == "TRUE"
    assert cell_to_str(False) == "FALSE"


def test_json_preserves_sheet_order_and_unicode() -> None:
    body = encode_json({"Zeta": [["ž"]], "Alpha": [["1"]]})
    assert list(json.loads(body)) == ["Zeta", "Alpha"]
    assert "ž" in body
    assert body.startswith("{\n  ")


def test_json_coerces_unserializable_values() -> None:
    class Odd:
        def __str__(self) -> str:
            return "odd"

    assert json.loads(encode_json({"S": [[Odd()]]})) == {"S": [["odd"]]}


@pytest.mark.parametrize("fmt", list(ExportFormat))
def test_encoding_is_deterministic(fmt: ExportFormat) -> None:
    block = TabularBlock("Sheet1", [["a", "b, c"], ['q"x', None]])
    assert encode(block, fmt) == encode(block, fmt)


def test_encode_accepts_format_strings() -> None:
    block = TabularBlock("Sheet1", [["a", "b"]])
    assert encode(block, "csv") == "a,b"
    assert json.loads(encode(block, "json")) == {"Sheet1": [["a", "b"]]}
