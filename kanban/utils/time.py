from datetime import datetime, timezone


def get_time_stamp():
    return datetime.now(timezone.utc)


def to_utc_aware(dt: datetime) -> datetime:
    """Naive values are taken as UTC, aware ones are converted to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
