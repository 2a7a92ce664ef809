"""Opaque keyset cursors for newest-first listings.

A cursor pins the last row of a page by ``(created_at, id)`` so rows sharing
a timestamp are neither skipped nor repeated on the next page.
"""

import base64
from datetime import datetime
from uuid import UUID

_SEPARATOR = "|"


def encode_cursor(created_at: datetime, row_id: UUID) -> str:
    raw = f"{created_at.isoformat()}{_SEPARATOR}{row_id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Decode a cursor produced by ``encode_cursor``.

    Raises:
        ValueError: If the cursor is malformed
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        created_at, row_id = raw.split(_SEPARATOR)
        return datetime.fromisoformat(created_at), UUID(row_id)
    except (ValueError, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
