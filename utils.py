import calendar
from datetime import date, timedelta
from typing import Optional

from constants import CERTIFIED_ONLY_WEEKDAYS, WEEKEND_SERVICE_WEEKDAYS, WEEKDAY_SHORT


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday(year: int, month: int, day: int) -> int:
    """Weekday of a day of the month, 0 = Monday ... 6 = Sunday."""
    return date(year, month, day).weekday()


def weekday_label(year: int, month: int, day: int) -> str:
    return WEEKDAY_SHORT[weekday(year, month, day)]


def is_weekend_service_day(year: int, month: int, day: int) -> bool:
    """Friday, Saturday and Sunday are all weekend service days."""
    return weekday(year, month, day) in WEEKEND_SERVICE_WEEKDAYS


def is_friday(year: int, month: int, day: int) -> bool:
    return weekday(year, month, day) == 4


def is_tuesday_or_thursday(year: int, month: int, day: int) -> bool:
    return weekday(year, month, day) in CERTIFIED_ONLY_WEEKDAYS


def weekend_block_key(year: int, month: int, day: int) -> Optional[date]:
    """Return the Friday that anchors the Fri/Sat/Sun block containing this day.

    Returns None for Monday..Thursday. The key may fall in the previous month
    (a Sunday on the 1st belongs to the block of the last Friday before it).
    """
    d = date(year, month, day)
    wd = d.weekday()
    if wd not in WEEKEND_SERVICE_WEEKDAYS:
        return None
    return d - timedelta(days=wd - 4)


def month_days(year: int, month: int) -> range:
    return range(1, days_in_month(year, month) + 1)
