# marketplace_chat/api/schemas/_datetime_serializer.py
from datetime import datetime

from marketplace_chat.core.clock import as_utc


def serialize_dt(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    # SQLite hands back naive values; everything is stored as UTC
    return as_utc(dt).isoformat()
