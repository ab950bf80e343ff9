"""
Time helpers for schedule answers.
All "minute of day" values are counted from local midnight in Kyiv.
"""

from datetime import datetime
from typing import Optional

import pytz

KYIV_TZ = pytz.timezone('Europe/Kyiv')


def minutes_to_clock(minutes: int) -> str:
    """Formats minutes since midnight as H:MM (no leading zero on hours)."""
    return f"{minutes // 60}:{minutes % 60:02d}"


def now_minute_of_day(now: Optional[datetime] = None) -> int:
    """
    Returns the current minute of day in Kyiv.

    Args:
        now: Optional moment to convert instead of the system clock.
             Naive values are treated as UTC.
    """
    if now is None:
        local = datetime.now(KYIV_TZ)
    else:
        if now.tzinfo is None:
            now = pytz.utc.localize(now)
        local = now.astimezone(KYIV_TZ)
    return local.hour * 60 + local.minute


def format_duration(minutes: int) -> str:
    """Renders a duration as 'H ч M мин', 'H ч' or 'M мин'."""
    hours, rest = divmod(minutes, 60)
    if hours > 0 and rest > 0:
        return f"{hours} ч {rest} мин"
    if hours > 0:
        return f"{hours} ч"
    return f"{rest} мин"
