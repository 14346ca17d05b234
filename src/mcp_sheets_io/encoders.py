"""Row-to-text encoders for sheet exports."""

import json
from enum import Enum
from typing import Any, Dict, List

from mcp_sheets_io.models import Cell, Row, TabularBlock

EMPTY_SHEET_MARKER = "(Empty sheet)"
TEXT_CELL_SEPARATOR = " | "


class ExportFormat(str, Enum):
    TEXT = "text"
    CSV = "csv"
    JSON = "json"


def cell_to_str(cell: Cell) -> str:
    """Render a cell the way the Sheets UI shows it. None is empty."""
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "TRUE" if cell else "FALSE"
    return str(cell)


def csv_cell(cell: Cell) -> str:
    """Quote a cell iff it contains a comma, a double quote or a newline."""
    text = cell_to_str(cell)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def encode_rows(rows: List[Row], fmt: ExportFormat) -> str:
    """Encode rows as text or csv, one line per row, no trailing newline."""
    if not rows:
        return EMPTY_SHEET_MARKER

    if fmt == ExportFormat.CSV:
        lines = [",".join(csv_cell(c) for c in row) for row in rows]
    else:
        lines = [TEXT_CELL_SEPARATOR.join(cell_to_str(c) for c in row) for row in rows]
    return "\n".join(lines)


def encode(block: TabularBlock, fmt: ExportFormat) -> str:
    """Encode a single sheet. JSON output is the sheet's row array."""
    fmt = ExportFormat(fmt)
    if fmt == ExportFormat.JSON:
        return encode_json({block.sheet_title: block.rows})
    return encode_rows(block.rows, fmt)


def encode_json(sheets: Dict[str, List[Row]]) -> str:
    """Pretty-print a title -> rows mapping, preserving insertion order."""
    return json.dumps(sheets, indent=2, ensure_ascii=False, default=_json_fallback)


def _json_fallback(value: Any) -> str:
    return str(value)
