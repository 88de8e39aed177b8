"""
Centralized date/time utilities

"Today" for due date bucketing is evaluated in the configured task
timezone (TASK_TIMEZONE). Podio timestamps are UTC.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from podio_tasks.config.settings import settings
from podio_tasks.utils.error_handler import ValidationFailed

PODIO_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_task_timezone(name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve the timezone used for due date boundaries
    
    Args:
        name: IANA timezone name, defaults to settings.TASK_TIMEZONE
        
    Returns:
        ZoneInfo instance
        
    Raises:
        ValidationFailed: If the timezone name is unknown
    """
    tz_name = name or settings.TASK_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationFailed(f"Unknown task timezone '{tz_name}'") from e


def get_current_datetime(tz: Optional[ZoneInfo] = None) -> datetime:
    """
    Get current datetime in the task timezone
    
    Returns:
        Current timezone-aware datetime
    """
    return datetime.now(tz or get_task_timezone())


def get_current_date(tz: Optional[ZoneInfo] = None) -> date:
    """
    Get today's date in the task timezone
    
    Returns:
        Current calendar date
    """
    return get_current_datetime(tz).date()


def parse_podio_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a Podio timestamp into an aware UTC datetime
    
    Accepts "YYYY-MM-DD HH:MM:SS" (UTC, as Podio sends it), ISO 8601
    strings and datetime objects. Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif not isinstance(value, str):
        raise ValueError(f"Expected a timestamp string, got {type(value).__name__}")
    else:
        try:
            dt = datetime.strptime(value, PODIO_DATETIME_FORMAT)
        except ValueError:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
