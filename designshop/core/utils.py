from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Horodatage UTC naïf, le format stocké en base."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Ramène un datetime avec fuseau en UTC naïf ; les valeurs naïves sont considérées déjà en UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
