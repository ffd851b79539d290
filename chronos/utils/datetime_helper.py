"""Date/time formatting helpers"""
from datetime import datetime, timezone


def ensure_utc(dt: datetime) -> datetime:
    """
    Make a datetime timezone-aware.

    Args:
        dt: datetime (naive values are interpreted as UTC)

    Returns:
        Aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_epoch_ms(dt: datetime) -> int:
    return int(ensure_utc(dt).timestamp() * 1000)


def format_remaining(seconds: int) -> str:
    """Render a countdown as MM:SS (minutes may exceed 59)"""
    seconds = max(0, seconds)
    minutes, rest = divmod(seconds, 60)
    return f"{minutes:02d}:{rest:02d}"

