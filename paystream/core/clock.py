from datetime import datetime, timezone
from typing import Callable, Optional

UTC = timezone.utc

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current time in UTC, timezone-aware."""
    return datetime.now(UTC)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is in UTC. Naive datetimes (as SQLite returns them) are assumed UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
