from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC 'now', matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """
    Aware datetimes are converted to UTC and stripped of tzinfo;
    naive ones are assumed to be UTC already.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
