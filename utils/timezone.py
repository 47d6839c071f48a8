# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

"""
Timezone utilities for resolving "now" and "today" in the parish timezone
"""
from datetime import date, datetime
from typing import Optional

import pytz

import config


def get_parish_timezone(tz_name: Optional[str] = None):
    """Get the pytz zone for the parish (falls back to the configured zone)"""
    return pytz.timezone(tz_name or config.PARISH_TIMEZONE)


def is_valid_timezone(tz_name: str) -> bool:
    """Check that a name is a known IANA timezone"""
    if not tz_name or not isinstance(tz_name, str):
        return False
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False


def get_parish_time(tz_name: Optional[str] = None) -> datetime:
    """Get current time in the parish timezone"""
    return datetime.now(get_parish_timezone(tz_name))


def get_parish_today(tz_name: Optional[str] = None) -> date:
    """Get the current calendar date in the parish timezone"""
    return get_parish_time(tz_name).date()


def today_provider(tz_name: Optional[str] = None):
    """Build a zero-argument callable returning today's date for a parish"""
    def _today() -> date:
        return get_parish_today(tz_name)
    return _today


def get_timezone_offset(tz_name: Optional[str] = None) -> str:
    """Get current parish offset from UTC"""
    offset = get_parish_time(tz_name).strftime('%z')
    return f"UTC{offset[:3]}:{offset[3:]}"
