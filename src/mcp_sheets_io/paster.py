"""Create-or-update a sheet and paste delimited data into it in one batch."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mcp_sheets_io.errors import InvalidRequestError
from mcp_sheets_io.gateway import SheetsGateway
from mcp_sheets_io.resolver import NewSheet, Resolution, SheetResolver

logger = logging.getLogger(__name__)

PASTE_NORMAL = "PASTE_NORMAL"


def create_sheet_op(title: str, sheet_id: int) -> Dict[str, Any]:
    return {"addSheet": {"properties": {"title": title, "sheetId": sheet_id}}}


def paste_data_op(sheet_id: int, row_index: int, column_index: int,
                  data: str, delimiter: str = ",") -> Dict[str, Any]:
    """PASTE_NORMAL overwrites target cells in place; cells outside the pasted block are left to the backend."""
    return {
        "pasteData": {
            "coordinate": {
                "sheetId": sheet_id,
                "rowIndex": row_index,
                "columnIndex": column_index,
            },
            "data": data,
            "type": PASTE_NORMAL,
            "delimiter": delimiter,
        }
    }


def build_mutations(resolution: Resolution, data: str, start_row: int = 0,
                    start_column: int = 0, delimiter: str = ",") -> List[Dict[str, Any]]:
    """addSheet (new sheets only) followed by exactly one pasteData on the same sheet ID."""
    requests = []
    if isinstance(resolution, NewSheet):
        requests.append(create_sheet_op(resolution.title, resolution.sheet_id))
    requests.append(paste_data_op(resolution.sheet_id, start_row, start_column, data, delimiter))
    return requests


@dataclass
class PasteOutcome:
    sheet_id: int
    created: bool
    message: str


class UpsertPaster:
    def __init__(self, gateway: SheetsGateway, resolver: Optional[SheetResolver] = None):
        self.gateway = gateway
        self.resolver = resolver or SheetResolver()

    async def upsert_paste(self, spreadsheet_id: str, title: str, csv_data: str,
                           start_row: int = 0, start_column: int = 0) -> PasteOutcome:
        if start_row < 0 or start_column < 0:
            raise InvalidRequestError("start_row and start_column must be >= 0")

        meta = await self.gateway.get_metadata(spreadsheet_id)
        resolution = self.resolver.resolve(meta, title)
        created = isinstance(resolution, NewSheet)

        if created:
            logger.info(f'[upsert_paste] Creating new sheet "{title}" with ID: {resolution.sheet_id}')
        else:
            logger.info(f'[upsert_paste] Sheet "{title}" exists (ID: {resolution.sheet_id})')

        await self.gateway.batch_mutate(
            spreadsheet_id,
            build_mutations(resolution, csv_data, start_row, start_column),
        )

        message = (f'Created new sheet "{title}" and populated with data' if created
                   else f'Updated existing sheet "{title}"')
        return PasteOutcome(sheet_id=resolution.sheet_id, created=created, message=message)
