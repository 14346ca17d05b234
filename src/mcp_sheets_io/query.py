"""Drive search query construction."""

import re
from typing import Optional

# Caller already wrote Drive query language; pass it through
_DRIVE_SYNTAX = re.compile(
    r"\b(?:name|fullText|mimeType|modifiedTime|createdTime|viewedByMeTime|trashed|starred)\s*(?:contains\b|!=|<=|>=|=|<|>)"
    r"|\bin\s+(?:parents|owners|writers|readers)\b",
    re.IGNORECASE,
)


def _escape(term: str) -> str:
    return term.replace("\\", "\\\\").replace("'", "\\'")


def is_drive_query(query: str) -> bool:
    return bool(_DRIVE_SYNTAX.search(query))


def build_drive_search_query(mime_type: str, query: Optional[str], folder_id: Optional[str] = None) -> str:
    """
    Build a Drive `files.list` query restricted to one MIME type.

    Examples:
        ("application/vnd.google-apps.spreadsheet", "budget")
            -> "mimeType='application/vnd.google-apps.spreadsheet' and trashed = false
                and (name contains 'budget' or fullText contains 'budget')"
        (mime, "name contains 'Q3'") -> "... and (name contains 'Q3')"
    """
    parts = [f"mimeType='{mime_type}'", "trashed = false"]

    if folder_id:
        parts.append(f"'{_escape(folder_id)}' in parents")

    query = (query or "").strip()
    if query:
        if is_drive_query(query):
            parts.append(f"({query})")
        else:
            term = _escape(query)
            parts.append(f"(name contains '{term}' or fullText contains '{term}')")

    return " and ".join(parts)
