"""Value types shared by the gateway and the core."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

Cell = Union[str, int, float, bool, None]
Row = List[Cell]


@dataclass(frozen=True)
class SheetDescriptor:
    sheet_id: int
    title: str
    index: int = 0
    row_count: Optional[int] = None
    column_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sheetId": self.sheet_id,
            "title": self.title,
            "index": self.index,
            "rowCount": self.row_count,
            "columnCount": self.column_count,
        }


@dataclass(frozen=True)
class SpreadsheetMeta:
    """Snapshot of spreadsheet properties and its sheets, in sheet order."""
    spreadsheet_id: str
    title: str
    sheets: Tuple[SheetDescriptor, ...] = ()
    locale: Optional[str] = None
    time_zone: Optional[str] = None

    @property
    def sheet_titles(self) -> List[str]:
        return [s.title for s in self.sheets]

    @property
    def sheet_ids(self) -> FrozenSet[int]:
        return frozenset(s.sheet_id for s in self.sheets)

    def find_sheet(self, title: str) -> Optional[SheetDescriptor]:
        """Exact, case-sensitive title lookup."""
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spreadsheetId": self.spreadsheet_id,
            "title": self.title,
            "sheets": [s.to_dict() for s in self.sheets],
            "locale": self.locale,
            "timeZone": self.time_zone,
        }


@dataclass
class TabularBlock:
    sheet_title: str
    rows: List[Row] = field(default_factory=list)
