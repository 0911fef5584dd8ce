"""Composite keyset cursors for newest-first listings.

Cursor format: {"ts": "<created_at ISO>", "id": "<record id>"}, Base64 JSON.
Record ids are random, so the timestamp leads and the id only breaks ties.
"""

import base64
import json
from datetime import UTC, datetime


def cursor_encode(created_at: datetime, record_id: str) -> str:
    """Encode composite cursor from the last record in a page."""
    payload = {"ts": created_at.isoformat(), "id": record_id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime | None, str | None]:
    """Decode composite cursor -> (created_at, id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        ts = datetime.fromisoformat(data["ts"])
        record_id = str(data["id"])
    except (ValueError, KeyError, TypeError):
        return None, None
    # Stored timestamps are UTC; a naive cursor is read as UTC.
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts, record_id


def is_after_cursor(
    created_at: datetime,
    record_id: str,
    cursor_ts: datetime | None,
    cursor_id: str | None,
) -> bool:
    """True if the record sorts after the cursor in (created_at DESC, id DESC) order."""
    if cursor_ts is None or cursor_id is None:
        return True
    return created_at < cursor_ts or (created_at == cursor_ts and record_id < cursor_id)
