from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Horodatage courant, toujours en UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Rattache UTC aux dates naïves (SQLite les retourne sans fuseau)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
