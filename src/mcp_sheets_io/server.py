#!/usr/bin/env python
"""
Google Sheets I/O MCP Server
A Model Context Protocol (MCP) server built with FastMCP that exports whole
spreadsheets as text, csv or json and pastes CSV data into named sheets.
"""

import base64
import json
import logging
import os
import sys
from typing import Any, List, Optional
from dataclasses import dataclass
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

# MCP imports
from mcp.server.fastmcp import FastMCP, Context
from mcp.types import TextContent

# Google API imports
from google.oauth2.credentials import Credentials
from google.oauth2 import service_account
from google.auth.transport.requests import Request
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
import google.auth

from mcp_sheets_io import config
from mcp_sheets_io.gateway import SheetsGateway
from mcp_sheets_io.log import setup_logging
from mcp_sheets_io.service import Envelope, SheetsService

logger = logging.getLogger(__name__)


# =============================================================================
# AUTH
# =============================================================================

def load_credentials() -> Any:
    """
    Resolve credentials, first match wins:
    CREDENTIALS_CONFIG (base64 service account JSON), SERVICE_ACCOUNT_PATH,
    TOKEN_PATH (refreshed if expired), installed-app OAuth flow, ADC.
    """
    creds = None

    if config.CREDENTIALS_CONFIG:
        creds = service_account.Credentials.from_service_account_info(
            json.loads(base64.b64decode(config.CREDENTIALS_CONFIG)), scopes=config.SCOPES)
        logger.info("Using service account from CREDENTIALS_CONFIG")

    if not creds and config.SERVICE_ACCOUNT_PATH and os.path.exists(config.SERVICE_ACCOUNT_PATH):
        try:
            creds = service_account.Credentials.from_service_account_file(
                config.SERVICE_ACCOUNT_PATH, scopes=config.SCOPES)
            logger.info("Using service account authentication")
        except Exception as e:
            logger.warning(f"Service account auth failed: {e}")

    if not creds:
        if os.path.exists(config.TOKEN_PATH):
            with open(config.TOKEN_PATH, 'r') as token:
                creds = Credentials.from_authorized_user_info(json.load(token), config.SCOPES)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                try:
                    creds.refresh(Request())
                    with open(config.TOKEN_PATH, 'w') as token:
                        token.write(creds.to_json())
                except Exception as e:
                    logger.warning(f"Token refresh failed: {e}")
                    creds = None
            elif creds and not creds.valid:
                creds = None

            if not creds:
                try:
                    flow = InstalledAppFlow.from_client_secrets_file(config.CREDENTIALS_PATH, config.SCOPES)
                    creds = flow.run_local_server(port=0)
                    with open(config.TOKEN_PATH, 'w') as token:
                        token.write(creds.to_json())
                except Exception as e:
                    logger.warning(f"OAuth flow failed: {e}")
                    creds = None

    if not creds:
        try:
            creds, _ = google.auth.default(scopes=config.SCOPES)
            logger.info("Using application default credentials")
        except Exception as e:
            raise RuntimeError(f"All auth methods failed: {e}") from e

    return creds


# =============================================================================
# LIFESPAN & SERVER SETUP
# =============================================================================

@dataclass
class SpreadsheetContext:
    gateway: SheetsGateway
    service: SheetsService
    folder_id: Optional[str] = None


@asynccontextmanager
async def spreadsheet_lifespan(server: FastMCP) -> AsyncIterator[SpreadsheetContext]:
    """Manage Google API connection lifecycle"""
    creds = load_credentials()

    sheets_service = build('sheets', 'v4', credentials=creds)
    drive_service = build('drive', 'v3', credentials=creds)
    folder_id = config.DRIVE_FOLDER_ID or None
    gateway = SheetsGateway(sheets_service, drive_service, folder_id=folder_id)

    yield SpreadsheetContext(
        gateway=gateway,
        service=SheetsService(gateway),
        folder_id=folder_id,
    )


mcp = FastMCP("Google Sheets I/O",
              dependencies=["google-auth", "google-auth-oauthlib", "google-api-python-client"],
              lifespan=spreadsheet_lifespan,
              host=config.HOST,
              port=config.PORT)


def _service(ctx: Context) -> SheetsService:
    return ctx.request_context.lifespan_context.service


def _to_content(result: Envelope) -> List[TextContent]:
    return [TextContent(type="text", text=item["text"]) for item in result["content"]]


# =============================================================================
# READ TOOLS
# =============================================================================

@mcp.tool()
async def get_text(spreadsheet_id: str, format: str = "text", ctx: Context = None) -> List[TextContent]:
    """
    Export every sheet of a spreadsheet as one text payload.

    Args:
        spreadsheet_id: Spreadsheet ID or Google Sheets URL
        format: "text" (cells joined with " | "), "csv", or "json"
                (object mapping sheet title to its rows)

    Sheets that cannot be read are marked "(Error reading sheet)" in text/csv
    output and left out of json output.
    """
    return _to_content(await _service(ctx).get_text(spreadsheet_id, format))


@mcp.tool()
async def get_range(spreadsheet_id: str, range: str, ctx: Context = None) -> List[TextContent]:
    """
    Read a single range. Returns JSON {"range": ..., "values": [[...], ...]}.

    Args:
        spreadsheet_id: Spreadsheet ID or Google Sheets URL
        range: A1 notation, e.g. "Sheet1!A1:C10" or "'My Sheet'"
    """
    return _to_content(await _service(ctx).get_range(spreadsheet_id, range))


@mcp.tool()
async def find_spreadsheets(query: str, page_token: Optional[str] = None, page_size: int = 10,
                            ctx: Context = None) -> List[TextContent]:
    """
    Search Drive for spreadsheets by name or content.

    Args:
        query: Free text, or a Drive query such as "name contains 'Budget'"
        page_token: nextPageToken from a previous call
        page_size: Maximum number of files to return
    """
    return _to_content(await _service(ctx).find(query, page_token, page_size))


@mcp.tool()
async def get_metadata(spreadsheet_id: str, ctx: Context = None) -> List[TextContent]:
    """Spreadsheet title, locale, time zone and each sheet's ID, index and grid size as JSON."""
    return _to_content(await _service(ctx).get_metadata(spreadsheet_id))


# =============================================================================
# WRITE TOOLS
# =============================================================================

@mcp.tool()
async def paste_csv_data(spreadsheet_id: str, csv_data: str, title: str,
                         start_row: int = 0, start_column: int = 0,
                         ctx: Context = None) -> List[TextContent]:
    """
    Paste CSV data into a sheet, creating the sheet if no sheet has this title.

    Sheet creation and the paste are applied as one batch: either both happen
    or neither does. Existing cells under the pasted block are overwritten.

    Args:
        spreadsheet_id: Spreadsheet ID or Google Sheets URL
        csv_data: Comma-delimited rows separated by newlines
        title: Target sheet title (exact, case-sensitive)
        start_row: 0-based row of the top-left pasted cell
        start_column: 0-based column of the top-left pasted cell
    """
    return _to_content(await _service(ctx).paste_csv_data(
        spreadsheet_id, csv_data, title, start_row, start_column))


def main():
    setup_logging()
    transport = "stdio"
    for i, arg in enumerate(sys.argv):
        if arg == "--transport" and i + 1 < len(sys.argv):
            transport = sys.argv[i + 1]
            break
    logger.info(f"Starting Google Sheets I/O server ({transport})")
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
