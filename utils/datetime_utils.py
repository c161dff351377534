"""
Timezone-aware datetime helpers.

All functions return timezone-aware datetime objects in UTC.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get the current UTC time as a timezone-aware datetime object.
    
    Returns:
        datetime: Current UTC time with timezone information
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime object is timezone-aware and in UTC.
    
    SQLite hands back naive datetimes, which are assumed to be UTC.
    
    Args:
        dt: Datetime object (may be naive or timezone-aware)
        
    Returns:
        datetime: Timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_utc_iso(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as an ISO 8601 string in UTC.
    
    Args:
        dt: Datetime to format (defaults to current UTC time)
        
    Returns:
        str: ISO 8601 formatted string with UTC timezone
    """
    utc_dt = ensure_utc(dt) if dt else utc_now()
    return utc_dt.isoformat()
