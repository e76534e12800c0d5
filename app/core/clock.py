from datetime import datetime, timezone


def utcnow() -> datetime:
    # naive UTC, the form every DateTime column stores
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
