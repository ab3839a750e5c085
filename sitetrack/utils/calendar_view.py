"""
Month calendar of project logs.

The calendar shows one month but loads a three month window (the month
before and after included) so navigating does not refetch every time.
"""
import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Tuple


def fetch_window(year: int, month: int) -> Tuple[datetime, datetime]:
    """From the first day of the previous month to the end of the next month."""
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    first = date(year, month, 1)
    previous_month_start = (first - timedelta(days=1)).replace(day=1)
    next_month_start = first + timedelta(days=calendar.monthrange(year, month)[1])
    next_month_end = next_month_start.replace(
        day=calendar.monthrange(next_month_start.year, next_month_start.month)[1]
    )
    return datetime.combine(previous_month_start, time.min), datetime.combine(next_month_end, time.max)


def group_logs_by_day(logs: Iterable[Any]) -> Dict[str, List[Any]]:
    grouped: Dict[str, List[Any]] = {}
    for log in logs:
        grouped.setdefault(log.date.date().isoformat(), []).append(log)
    return grouped


def build_calendar(logs: Iterable[Any], year: int, month: int) -> Dict[str, Any]:
    days_in_month = calendar.monthrange(year, month)[1]
    # calendar.weekday is Monday=0; the grid starts on Sunday
    first_weekday = (calendar.weekday(year, month, 1) + 1) % 7
    return {
        "year": year,
        "month": month,
        "days_in_month": days_in_month,
        "first_weekday": first_weekday,
        "logs_by_date": group_logs_by_day(logs),
    }
