from datetime import datetime
from typing import Optional


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored dates are naive local time; aware input is converted on the way in."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
