"""
Multi-sheet export.

Reads every sheet of a spreadsheet in order and renders the whole workbook as
text, csv or json. A failed sheet never fails the export: it is either shown
with an inline marker or left out, depending on the failure policy.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from mcp_sheets_io.encoders import ExportFormat, encode, encode_json
from mcp_sheets_io.errors import PartialSheetError
from mcp_sheets_io.gateway import SheetsGateway
from mcp_sheets_io.models import Row, TabularBlock

logger = logging.getLogger(__name__)

SHEET_ERROR_MARKER = "(Error reading sheet)"


class SheetFailurePolicy(str, Enum):
    INLINE_MARKER = "inline_marker"  # header plus SHEET_ERROR_MARKER
    OMIT = "omit"                    # sheet left out of the output


def default_failure_policy(fmt: ExportFormat) -> SheetFailurePolicy:
    """JSON output must stay pure data, so failed sheets are dropped there."""
    return SheetFailurePolicy.OMIT if fmt == ExportFormat.JSON else SheetFailurePolicy.INLINE_MARKER


@dataclass
class ExportSuccess:
    body: str


@dataclass
class ExportError:
    message: str


ExportResult = Union[ExportSuccess, ExportError]


@dataclass
class SheetResult:
    title: str
    block: Optional[TabularBlock] = None
    body: Optional[str] = None
    error: Optional[PartialSheetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def quote_sheet_title(title: str) -> str:
    """A1 range covering a whole sheet: 'My Sheet' with embedded quotes doubled."""
    return "'" + title.replace("'", "''") + "'"


class MultiSheetExporter:
    def __init__(self, gateway: SheetsGateway, failure_policy: Optional[SheetFailurePolicy] = None):
        self.gateway = gateway
        self.failure_policy = failure_policy

    async def export_all(self, spreadsheet_id: str, fmt: Union[ExportFormat, str] = ExportFormat.TEXT) -> ExportResult:
        try:
            fmt = ExportFormat(fmt)
            meta = await self.gateway.get_metadata(spreadsheet_id)
            results = [await self._read_sheet(spreadsheet_id, title, fmt) for title in meta.sheet_titles if title]
            policy = self.failure_policy or default_failure_policy(fmt)

            if fmt == ExportFormat.JSON:
                return ExportSuccess(self._fold_json(results, policy))
            return ExportSuccess(self._fold_text(meta.title, results, policy))
        except Exception as e:
            return ExportError(str(e))

    async def _read_sheet(self, spreadsheet_id: str, title: str, fmt: ExportFormat) -> SheetResult:
        """Fetch and encode one sheet. Any failure becomes a PartialSheetError result."""
        try:
            response = await self.gateway.get_values(spreadsheet_id, quote_sheet_title(title))
            block = TabularBlock(title, response.get("values") or [])
            body = None if fmt == ExportFormat.JSON else encode(block, fmt)
        except Exception as e:
            logger.warning(f"[export_all] Error reading sheet {title}: {e}")
            return SheetResult(title=title, error=PartialSheetError(title, e))
        return SheetResult(title=title, block=block, body=body)

    @staticmethod
    def _fold_text(spreadsheet_title: str, results: List[SheetResult], policy: SheetFailurePolicy) -> str:
        parts = []
        if spreadsheet_title:
            parts.append(f"Spreadsheet Title: {spreadsheet_title}\n\n")

        for result in results:
            if result.ok:
                parts.append(f"Sheet Name: {result.title}\n{result.body}\n\n")
            elif policy == SheetFailurePolicy.INLINE_MARKER:
                parts.append(f"Sheet Name: {result.title}\n{SHEET_ERROR_MARKER}\n\n")
            else:
                logger.info(f"[export_all] Skipping sheet {result.title} due to error")

        return "".join(parts).rstrip()

    @staticmethod
    def _fold_json(results: List[SheetResult], policy: SheetFailurePolicy) -> str:
        sheets: Dict[str, List[Row]] = {}
        for result in results:
            if result.ok:
                sheets[result.title] = result.block.rows
            elif policy == SheetFailurePolicy.INLINE_MARKER:
                sheets[result.title] = [[SHEET_ERROR_MARKER]]
            else:
                logger.info(f"[export_all] Skipping sheet {result.title} in JSON output due to error")
        return encode_json(sheets)
