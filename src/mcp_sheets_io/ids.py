"""Document ID extraction from raw IDs and Google URLs."""

import re
from typing import Optional

# Drive file IDs: letters, digits, '-' and '_'
_ID_CHARS = r'[A-Za-z0-9_-]'
_PATH_ID = re.compile(r'/d/(' + _ID_CHARS + r'{10,})')
_QUERY_ID = re.compile(r'[?&]id=(' + _ID_CHARS + r'{10,})')
_BARE_ID = re.compile(r'^' + _ID_CHARS + r'{10,}$')


def extract_doc_id(value: str) -> Optional[str]:
    """
    Pull a document ID out of a user-supplied reference.

    Examples:
        "https://docs.google.com/spreadsheets/d/1AbC.../edit#gid=0" -> "1AbC..."
        "https://drive.google.com/open?id=1AbC..." -> "1AbC..."
        "1AbC..." -> "1AbC..."

    Returns None when nothing resembling an ID is found.
    """
    if not value:
        return None

    value = value.strip()

    match = _PATH_ID.search(value) or _QUERY_ID.search(value)
    if match:
        return match.group(1)

    if _BARE_ID.match(value):
        return value

    return None


def resolve_spreadsheet_id(value: str) -> str:
    """Extracted ID if one is found, the raw value otherwise."""
    return extract_doc_id(value) or value
