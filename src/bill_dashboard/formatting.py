"""Human-readable formatting for sizes, times and durations."""

from datetime import datetime, timezone

SIZE_UNITS = ["B", "KB", "MB", "GB"]

TimeLike = datetime | int | float | str


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def format_file_size(size: int) -> str:
    """Format a byte count using binary multiples.

    Whole bytes are shown without decimals, larger units with one
    decimal place: ``1536 -> "1.5 KB"``, ``1048576 -> "1.0 MB"``.
    """
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{size} B"
    return f"{value:.1f} {SIZE_UNITS[unit]}"


def to_datetime(value: TimeLike) -> datetime:
    """Convert epoch milliseconds, an ISO string or a datetime to an aware datetime.

    Raises:
        ValueError: If a string cannot be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_time_ago(value: TimeLike, now: TimeLike | None = None) -> str:
    """Format a point in time relative to now.

    Buckets are "Just now" under a minute, then minutes, hours and days.
    Strings that are not timestamps (e.g. "Unknown") are returned as is.
    """
    try:
        dt = to_datetime(value)
    except (ValueError, OverflowError, OSError):
        return str(value)
    current = to_datetime(now) if now is not None else datetime.now(timezone.utc)

    minutes = int((current - dt).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_duration(seconds: float) -> str:
    """Format an elapsed duration, e.g. ``"45s"``, ``"3m 12s"``, ``"2h 5m"``."""
    total_seconds = max(0, int(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"


def format_clock(timestamp: int, tz: timezone | None = None) -> str:
    """Format epoch milliseconds as a 12-hour clock time like ``"3:05 PM"``."""
    try:
        dt = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    except (ValueError, OverflowError, OSError):
        return "-"
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
