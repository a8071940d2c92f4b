"""Clock helpers."""

from datetime import datetime, UTC


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    SQLite drops tzinfo on round-trip, so stored and compared timestamps are
    kept naive and always in UTC.
    """
    return datetime.now(UTC).replace(tzinfo=None)
