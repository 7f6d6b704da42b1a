# File: utils/dt_utils.py
"""Date and time utilities for StaffBoard.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Functions:
    - set_default_timezone / get_default_timezone: Configure local timezone
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_local: Get current datetime in local timezone
    - dt_now_iso: Get current datetime as ISO string
    - dt_parse_date: Parse date strings and date objects
    - dt_days_in_month: Number of days in a given month
    - sunday_weekday: Weekday number with 0=Sunday
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
import logging
from zoneinfo import ZoneInfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    return datetime.now(tz or DEFAULT_TIME_ZONE).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    return datetime.now(tz or DEFAULT_TIME_ZONE)


def dt_now_iso(tz: ZoneInfo | None = None) -> str:
    """Return the current local datetime as an ISO 8601 string.

    Example:
        "2025-04-07T14:30:00-05:00"
    """
    return dt_now_local(tz).isoformat()


# ==============================================================================
# Parsing and Calendar Helpers
# ==============================================================================


def dt_parse_date(value: str | date | None) -> date | None:
    """Safely parse a date string (or date/datetime) into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "2025/04/07"
    - date and datetime objects (datetime is truncated to its date)

    Returns:
        datetime.date or None if parsing fails.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None

    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        pass

    try:
        return datetime.strptime(value.strip(), "%Y/%m/%d").date()
    except ValueError:
        _LOGGER.debug("Unable to parse date string '%s'", value)
        return None


def dt_days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def sunday_weekday(day: date) -> int:
    """Return the weekday of a date numbered 0=Sunday .. 6=Saturday."""
    # date.weekday() is 0=Monday .. 6=Sunday
    return (day.weekday() + 1) % 7
