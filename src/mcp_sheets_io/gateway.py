"""
Async gateway over the Google Sheets v4 and Drive v3 services.

All network access goes through here. Blocking `googleapiclient` requests are
executed in a worker thread, and `HttpError`s are translated into the
exceptions in `mcp_sheets_io.errors`.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from mcp_sheets_io.errors import (
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    SheetsError,
    TransportError,
)
from mcp_sheets_io.models import SheetDescriptor, SpreadsheetMeta
from mcp_sheets_io.query import build_drive_search_query

logger = logging.getLogger(__name__)

METADATA_FIELDS = (
    "spreadsheetId,"
    "properties(title,locale,timeZone),"
    "sheets(properties(sheetId,title,index,gridProperties(rowCount,columnCount)))"
)
SEARCH_FIELDS = "nextPageToken, files(id, name)"


def _http_status(exc: HttpError) -> int:
    status = getattr(exc, "status_code", None) or getattr(getattr(exc, "resp", None), "status", None)
    try:
        return int(status)
    except (TypeError, ValueError):
        return 0


def translate_http_error(exc: HttpError) -> SheetsError:
    """Map an API HttpError onto the error taxonomy."""
    status = _http_status(exc)
    message = getattr(exc, "reason", None) or str(exc)

    if status == 404:
        return NotFoundError(message)
    if status in (401, 403):
        return PermissionDeniedError(message)
    if status == 400:
        return InvalidRequestError(message)
    return TransportError(message)


def parse_metadata(data: Dict[str, Any]) -> SpreadsheetMeta:
    """Build a SpreadsheetMeta from a `spreadsheets.get` response."""
    properties = data.get("properties", {})
    sheets = []
    for sheet in data.get("sheets", []):
        props = sheet.get("properties", {})
        grid = props.get("gridProperties", {})
        sheets.append(SheetDescriptor(
            sheet_id=props.get("sheetId", 0),
            title=props.get("title", ""),
            index=props.get("index", 0),
            row_count=grid.get("rowCount"),
            column_count=grid.get("columnCount"),
        ))

    return SpreadsheetMeta(
        spreadsheet_id=data.get("spreadsheetId", ""),
        title=properties.get("title", ""),
        sheets=tuple(sheets),
        locale=properties.get("locale"),
        time_zone=properties.get("timeZone"),
    )


class SheetsGateway:
    """Backend primitives consumed by the exporter, reader and paster."""

    def __init__(self, sheets_service: Any, drive_service: Any, folder_id: Optional[str] = None):
        self.sheets_service = sheets_service
        self.drive_service = drive_service
        self.folder_id = folder_id

    async def _execute(self, request: Any, label: str) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as exc:
            error = translate_http_error(exc)
            logger.debug(f"[{label}] HttpError {_http_status(exc)}: {error}")
            raise error from exc
        except (GoogleAuthError, OSError) as exc:
            raise TransportError(str(exc)) from exc

    async def get_metadata(self, spreadsheet_id: str) -> SpreadsheetMeta:
        request = self.sheets_service.spreadsheets().get(
            spreadsheetId=spreadsheet_id,
            includeGridData=False,
            fields=METADATA_FIELDS,
        )
        data = await self._execute(request, "get_metadata")
        return parse_metadata(data)

    async def get_values(self, spreadsheet_id: str, range_expr: str) -> Dict[str, Any]:
        request = self.sheets_service.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=range_expr,
        )
        data = await self._execute(request, "get_values")
        return {"range": data.get("range", range_expr), "values": data.get("values", [])}

    async def batch_mutate(self, spreadsheet_id: str, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Apply requests as one atomic batchUpdate."""
        if not requests:
            raise InvalidRequestError("requests cannot be empty")
        request = self.sheets_service.spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={"requests": requests},
        )
        return await self._execute(request, "batch_mutate")

    async def search_files(self, mime_type: str, query: Optional[str],
                           page_token: Optional[str] = None, page_size: int = 10) -> Dict[str, Any]:
        q = build_drive_search_query(mime_type, query, self.folder_id)
        logger.info(f"[search_files] Executing Drive API query: {q}")
        request = self.drive_service.files().list(
            q=q,
            pageSize=page_size,
            pageToken=page_token,
            fields=SEARCH_FIELDS,
            spaces='drive',
            includeItemsFromAllDrives=True,
            supportsAllDrives=True,
        )
        data = await self._execute(request, "search_files")
        return {"files": data.get("files", []), "nextPageToken": data.get("nextPageToken")}
