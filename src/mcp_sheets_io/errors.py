"""Exceptions raised by the Sheets I/O core."""

from typing import Optional


class SheetsError(Exception):
    """Base class for spreadsheet backend and core failures."""


class TransportError(SheetsError):
    """Network, auth-refresh or unexpected backend failure."""


class NotFoundError(SheetsError):
    """Spreadsheet, sheet or range does not exist."""


class PermissionDeniedError(SheetsError):
    """Caller is not allowed to read or modify the spreadsheet."""


class InvalidRequestError(SheetsError):
    """Backend rejected the request, or arguments were malformed."""


class PartialSheetError(SheetsError):
    """
    One sheet could not be read during a multi-sheet export.

    Never propagated past the exporter: rendered inline or dropped.
    """

    def __init__(self, sheet_title: str, cause: Optional[BaseException] = None):
        self.sheet_title = sheet_title
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Error reading sheet '{sheet_title}'{detail}")
