"""Tests for calendar helpers in utils.py."""

from datetime import date

from utils import (
    days_in_month,
    is_friday,
    is_tuesday_or_thursday,
    is_weekend_service_day,
    month_days,
    weekday,
    weekday_label,
    weekend_block_key,
)


class TestMonthLength:
    """Tests for days_in_month."""

    def test_thirty_day_month(self):
        """June has 30 days."""
        assert days_in_month(2026, 6) == 30

    def test_leap_february(self):
        """February 2028 is a leap month."""
        assert days_in_month(2028, 2) == 29

    def test_common_february(self):
        """February 2026 has 28 days."""
        assert days_in_month(2026, 2) == 28

    def test_month_days_range(self):
        """month_days covers 1..N inclusive."""
        assert list(month_days(2026, 6)) == list(range(1, 31))


class TestWeekdays:
    """Tests for weekday classification."""

    def test_weekday_monday_is_zero(self):
        """1 June 2026 is a Monday."""
        assert weekday(2026, 6, 1) == 0
        assert weekday_label(2026, 6, 1) == "Mon"

    def test_weekend_service_days(self):
        """Friday, Saturday and Sunday are weekend service days."""
        assert [d for d in range(1, 8) if is_weekend_service_day(2026, 6, d)] == [5, 6, 7]

    def test_friday(self):
        """Only the 5th is a Friday in the first June week."""
        assert is_friday(2026, 6, 5)
        assert not is_friday(2026, 6, 6)

    def test_tuesdays_and_thursdays(self):
        """Tue/Thu days of June 2026."""
        days = [d for d in month_days(2026, 6) if is_tuesday_or_thursday(2026, 6, d)]
        assert days == [2, 4, 9, 11, 16, 18, 23, 25, 30]


class TestWeekendBlockKey:
    """Tests for weekend_block_key."""

    def test_weekday_has_no_key(self):
        """Monday to Thursday do not belong to any block."""
        for day in (1, 2, 3, 4):
            assert weekend_block_key(2026, 6, day) is None

    def test_block_shares_friday_key(self):
        """Fri, Sat and Sun map to the same Friday."""
        keys = {weekend_block_key(2026, 6, d) for d in (5, 6, 7)}
        assert keys == {date(2026, 6, 5)}

    def test_next_block_differs(self):
        """Consecutive weekends have different keys."""
        assert weekend_block_key(2026, 6, 7) != weekend_block_key(2026, 6, 12)

    def test_key_may_fall_in_previous_month(self):
        """1 March 2026 is a Sunday anchored on Friday 27 February."""
        assert weekend_block_key(2026, 3, 1) == date(2026, 2, 27)

    def test_saturday_first_of_month(self):
        """1 February 2025 is a Saturday anchored on Friday 31 January."""
        assert weekend_block_key(2025, 2, 1) == date(2025, 1, 31)
