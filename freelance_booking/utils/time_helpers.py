from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_HOUR = 3600


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp as ISO-8601 in UTC."""
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
