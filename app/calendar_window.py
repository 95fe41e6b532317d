from datetime import datetime
from typing import Optional

from app.local_date import ParsedMonth, format_date_with_offset


def resolve_calendar_window(
    month: ParsedMonth,
    habit_created_at: datetime,
    now: datetime,
    offset_minutes: int = 0,
) -> Optional[tuple[str, str]]:
    """Clip a month to the days the habit existed and that are not in the future.

    Returns ``(start, end)`` inclusive, or None when nothing is left to show.
    """
    habit_created_on = format_date_with_offset(habit_created_at, offset_minutes)
    today = format_date_with_offset(now, offset_minutes)

    start = max(month.start_date, habit_created_on)
    end = min(month.end_date, today)
    if end < start:
        return None
    return start, end
