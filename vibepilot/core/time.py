"""UTC datetime utilities.

Returns **naive** UTC datetimes (no tzinfo), compatible with SQLAlchemy
``DateTime`` columns on both SQLite and PostgreSQL without ``timezone=True``.
"""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def expiry_from_seconds(seconds: int | None) -> datetime | None:
    """Convert an OAuth ``expires`` value into a naive UTC timestamp.

    Deezer reports ``0`` for tokens granted with ``offline_access``; those
    never expire, so no timestamp is stored.
    """
    if not seconds:
        return None
    return utcnow() + timedelta(seconds=seconds)
