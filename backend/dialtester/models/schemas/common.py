"""
Shared schema types.
"""
from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import AfterValidator


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from stores without tz support."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


def to_utc(value: datetime) -> datetime:
    """Normalize any datetime to an aware UTC instant."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
