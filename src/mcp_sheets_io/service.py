"""
Tool-boundary operations.

Every method returns the envelope {"content": [{"type": "text", "text": ...}]}
and never raises; failures become a JSON {"error": "..."} text item.
"""

import json
import logging
from typing import Any, Dict, Optional

from mcp_sheets_io import config
from mcp_sheets_io.encoders import ExportFormat
from mcp_sheets_io.errors import InvalidRequestError
from mcp_sheets_io.exporter import ExportError, MultiSheetExporter
from mcp_sheets_io.gateway import SheetsGateway
from mcp_sheets_io.ids import resolve_spreadsheet_id
from mcp_sheets_io.paster import UpsertPaster
from mcp_sheets_io.reader import RangeReader
from mcp_sheets_io.resolver import SheetResolver

logger = logging.getLogger(__name__)

Envelope = Dict[str, Any]


def envelope(text: str) -> Envelope:
    return {"content": [{"type": "text", "text": text}]}


def error_envelope(message: str) -> Envelope:
    return envelope(json.dumps({"error": message}))


def _parse_format(fmt: Optional[str]) -> ExportFormat:
    try:
        return ExportFormat((fmt or ExportFormat.TEXT.value).lower())
    except ValueError:
        raise InvalidRequestError(f"Unknown format: {fmt}. Use text, csv or json") from None


class SheetsService:
    def __init__(self, gateway: SheetsGateway, resolver: Optional[SheetResolver] = None):
        self.gateway = gateway
        self.exporter = MultiSheetExporter(gateway)
        self.reader = RangeReader(gateway)
        self.paster = UpsertPaster(gateway, resolver)

    async def get_text(self, spreadsheet_id: str, format: Optional[str] = "text") -> Envelope:
        logger.info(f"[get_text] Starting for spreadsheet: {spreadsheet_id} with format: {format}")
        try:
            fmt = _parse_format(format)
            sid = resolve_spreadsheet_id(spreadsheet_id)
            result = await self.exporter.export_all(sid, fmt)
        except Exception as e:
            logger.error(f"[get_text] Error: {e}")
            return error_envelope(str(e))

        if isinstance(result, ExportError):
            logger.error(f"[get_text] Error: {result.message}")
            return error_envelope(result.message)

        logger.info(f"[get_text] Finished for spreadsheet: {sid}")
        return envelope(result.body)

    async def get_range(self, spreadsheet_id: str, range: str) -> Envelope:
        logger.info(f"[get_range] Starting for spreadsheet: {spreadsheet_id}, range: {range}")
        try:
            sid = resolve_spreadsheet_id(spreadsheet_id)
            data = await self.reader.read_range(sid, range)
        except Exception as e:
            logger.error(f"[get_range] Error: {e}")
            return error_envelope(str(e))

        logger.info(f"[get_range] Finished for spreadsheet: {sid}")
        return envelope(json.dumps(data))

    async def find(self, query: str, page_token: Optional[str] = None, page_size: int = 10) -> Envelope:
        logger.info(f"[find] Searching for spreadsheets with query: {query}")
        try:
            data = await self.gateway.search_files(
                config.SPREADSHEET_MIME_TYPE, query, page_token=page_token, page_size=page_size)
        except Exception as e:
            logger.error(f"[find] Error: {e}")
            return error_envelope(str(e))

        logger.info(f"[find] Found {len(data['files'])} spreadsheets.")
        return envelope(json.dumps(data))

    async def get_metadata(self, spreadsheet_id: str) -> Envelope:
        logger.info(f"[get_metadata] Starting for spreadsheet: {spreadsheet_id}")
        try:
            sid = resolve_spreadsheet_id(spreadsheet_id)
            meta = await self.gateway.get_metadata(sid)
        except Exception as e:
            logger.error(f"[get_metadata] Error: {e}")
            return error_envelope(str(e))

        logger.info(f"[get_metadata] Finished for spreadsheet: {sid}")
        return envelope(json.dumps(meta.to_dict()))

    async def paste_csv_data(self, spreadsheet_id: str, csv_data: str, title: str,
                             start_row: int = 0, start_column: int = 0) -> Envelope:
        logger.info(f"[paste_csv_data] Starting for spreadsheet: {spreadsheet_id}, sheet: {title}")
        try:
            sid = resolve_spreadsheet_id(spreadsheet_id)
            outcome = await self.paster.upsert_paste(sid, title, csv_data, start_row, start_column)
        except Exception as e:
            logger.error(f"[paste_csv_data] Error: {e}")
            return error_envelope(str(e))

        logger.info(f"[paste_csv_data] Finished for spreadsheet: {sid}")
        return envelope(json.dumps({
            "status": "success",
            "message": outcome.message,
            "sheetId": outcome.sheet_id,
        }))
