from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC wall-clock time as a naive datetime, matching stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
