"""Small helpers shared by the service layer."""

from datetime import datetime, timezone
from typing import Optional
from urllib.parse import unquote


def to_unix_timestamp(value: Optional[datetime]) -> Optional[int]:
    """
    Convert a datetime to integer unix seconds.

    Naive datetimes are treated as UTC: SQLite hands timestamps back without
    tzinfo even when they were written timezone-aware.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def normalize_search_term(raw: Optional[str]) -> Optional[str]:
    """
    Percent-decode and trim a search term from the query string.

    Starlette has already decoded the query string once; clients that encode
    the term before building the URL send it double-encoded, so one more
    pass is applied. Returns None when nothing is left after trimming.
    """
    if raw is None:
        return None
    term = unquote(raw).strip()
    return term or None
