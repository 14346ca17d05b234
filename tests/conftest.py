"""Shared test fixtures: in-memory stand-ins for the Sheets and Drive services."""

from __future__ import annotations

import json
import random
from types import SimpleNamespace
from typing import Any

import pytest
from googleapiclient.errors import HttpError

from mcp_sheets_io.gateway import SheetsGateway
from mcp_sheets_io.resolver import SheetResolver
from mcp_sheets_io.service import SheetsService

SPREADSHEET_ID = "1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgVE2upms"


def make_http_error(status: int, message: str = "boom") -> HttpError:
    resp = SimpleNamespace(status=status, reason="Error")
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class FakeRequest:
    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = result
        self.error = error

    def execute(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


class FakeBackend:
    """Spreadsheets keyed by ID, each {"title", "sheets": [{"sheetId", "title", "rows"}]}."""

    def __init__(self) -> None:
        self.spreadsheets: dict[str, dict[str, Any]] = {}
        self.failing_sheets: set[str] = set()
        self.metadata_error: Exception | None = None
        self.batch_error: Exception | None = None
        self.batches: list[dict[str, Any]] = []
        self.value_calls: list[str] = []
        self.files: list[dict[str, str]] = []
        self.list_calls: list[dict[str, Any]] = []

    def add_spreadsheet(self, spreadsheet_id: str, title: str,
                        sheets: list[tuple[int, str, list[list[Any]]]]) -> None:
        self.spreadsheets[spreadsheet_id] = {
            "title": title,
            "sheets": [{"sheetId": sid, "title": t, "rows": rows} for sid, t, rows in sheets],
        }

    def metadata(self, spreadsheet_id: str) -> dict[str, Any]:
        ss = self.spreadsheets[spreadsheet_id]
        return {
            "spreadsheetId": spreadsheet_id,
            "properties": {"title": ss["title"], "locale": "en_US", "timeZone": "Europe/Prague"},
            "sheets": [
                {"properties": {
                    "sheetId": s["sheetId"],
                    "title": s["title"],
                    "index": i,
                    "gridProperties": {"rowCount": 1000, "columnCount": 26},
                }}
                for i, s in enumerate(ss["sheets"])
            ],
        }


def _sheet_title_from_range(range_expr: str) -> str:
    title = range_expr.split("!")[0]
    if title.startswith("'") and title.endswith("'"):
        title = title[1:-1].replace("''", "'")
    return title


class FakeValues:
    def __init__(self, backend: FakeBackend):
        self.backend = backend

    def get(self, spreadsheetId: str, range: str) -> FakeRequest:
        self.backend.value_calls.append(range)
        title = _sheet_title_from_range(range)
        if title in self.backend.failing_sheets:
            return FakeRequest(error=make_http_error(500, f"backend failure on {title}"))
        ss = self.backend.spreadsheets.get(spreadsheetId)
        if ss is None:
            return FakeRequest(error=make_http_error(404, "Requested entity was not found."))
        for sheet in ss["sheets"]:
            if sheet["title"] == title:
                result: dict[str, Any] = {"range": f"'{title}'!A1:Z1000", "majorDimension": "ROWS"}
                if sheet["rows"]:
                    result["values"] = sheet["rows"]
                return FakeRequest(result)
        return FakeRequest(error=make_http_error(400, f"Unable to parse range: {range}"))


class FakeSpreadsheets:
    def __init__(self, backend: FakeBackend):
        self.backend = backend

    def get(self, spreadsheetId: str, **kwargs: Any) -> FakeRequest:
        if self.backend.metadata_error is not None:
            return FakeRequest(error=self.backend.metadata_error)
        if spreadsheetId not in self.backend.spreadsheets:
            return FakeRequest(error=make_http_error(404, "Requested entity was not found."))
        return FakeRequest(self.backend.metadata(spreadsheetId))

    def values(self) -> FakeValues:
        return FakeValues(self.backend)

    def batchUpdate(self, spreadsheetId: str, body: dict[str, Any]) -> FakeRequest:
        if self.backend.batch_error is not None:
            return FakeRequest(error=self.backend.batch_error)
        self.backend.batches.append({"spreadsheetId": spreadsheetId, **body})
        return FakeRequest({"spreadsheetId": spreadsheetId, "replies": [{} for _ in body["requests"]]})


class FakeSheetsService:
    def __init__(self, backend: FakeBackend):
        self.backend = backend

    def spreadsheets(self) -> FakeSpreadsheets:
        return FakeSpreadsheets(self.backend)


class FakeFiles:
    def __init__(self, backend: FakeBackend):
        self.backend = backend

    def list(self, **kwargs: Any) -> FakeRequest:
        self.backend.list_calls.append(kwargs)
        page_size = kwargs.get("pageSize", 10)
        start = int(kwargs.get("pageToken") or 0)
        files = self.backend.files[start:start + page_size]
        result: dict[str, Any] = {"files": files}
        if start + page_size < len(self.backend.files):
            result["nextPageToken"] = str(start + page_size)
        return FakeRequest(result)


class FakeDriveService:
    def __init__(self, backend: FakeBackend):
        self.backend = backend

    def files(self) -> FakeFiles:
        return FakeFiles(self.backend)


@pytest.fixture
def backend() -> FakeBackend:
    backend = FakeBackend()
    backend.add_spreadsheet(SPREADSHEET_ID, "Quarterly Report", [
        (0, "Sheet1", [["a", "b"], ["c, d", 'e"f']]),
        (1234, "Empty", []),
        (42, "Totals", [["Total", "10"]]),
    ])
    return backend


@pytest.fixture
def gateway(backend: FakeBackend) -> SheetsGateway:
    return SheetsGateway(FakeSheetsService(backend), FakeDriveService(backend))


@pytest.fixture
def resolver() -> SheetResolver:
    return SheetResolver(rng=random.Random(1234))


@pytest.fixture
def service(gateway: SheetsGateway, resolver: SheetResolver) -> SheetsService:
    return SheetsService(gateway, resolver)
