"""
Timestamp helpers
Activity timestamps are always timezone-aware
"""
from datetime import datetime, timezone
from typing import Optional

from core.exceptions import InvalidTimestampException


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime], field: str = "timestamp") -> Optional[datetime]:
    """Reject naive datetimes; None passes through"""
    if value is None:
        return None
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise InvalidTimestampException(f"{field} must be timezone-aware", field=field)
    return value
