from datetime import datetime, timezone


def to_naive_utc(v):
    """Timestamps are stored naive in UTC; aware inputs are converted."""
    if isinstance(v, datetime) and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


def empty_to_none(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None
