from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current UTC time without tzinfo.

    Timestamp columns are naive and hold UTC, which keeps comparisons and
    cursor round-trips identical on PostgreSQL and SQLite.
    """
    return datetime.now(UTC).replace(tzinfo=None)
