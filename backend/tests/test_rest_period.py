"""Unit tests for daily and weekly rest period validation."""

import pytest
from datetime import date, datetime, timedelta, timezone

from compliance.config import ComplianceConfig
from compliance.types import RestScope
from compliance.validators import RestPeriodValidator

MONDAY = date(2024, 1, 15)


@pytest.fixture
def validator():
    return RestPeriodValidator()


@pytest.fixture
def twelve_hour_week(make_shift):
    """Seven consecutive 08:00-20:00 shifts, no day off."""
    return [make_shift(day, "08:00", "20:00", id=f"d{day}") for day in range(7)]


class TestDailyRest:
    """Test the 11-hour rest between consecutive shifts."""

    def test_short_turnaround_is_one_violation(self, validator, make_shift):
        """22:00 close followed by a 06:00 open leaves only 8 hours."""
        closing = make_shift(0, "14:00", "22:00", id="close")
        opening = make_shift(1, "06:00", "14:00", id="open")

        violations = validator.validate_daily_rest(opening, [closing])

        assert len(violations) == 1
        v = violations[0]
        assert v.scope == RestScope.DAILY
        assert v.actual_rest_hours == 8.0
        assert v.required_rest_hours == 11.0
        assert v.affected_shift_ids == ("close", "open")
        assert "8.0 hours" in v.message

    def test_both_neighbours_checked_independently(self, validator, make_shift):
        before = make_shift(0, "14:00", "22:00", id="before")
        new = make_shift(1, "06:00", "12:00", id="new")
        after = make_shift(1, "18:00", "23:00", id="after")

        violations = validator.validate_daily_rest(new, [after, before])

        assert [v.actual_rest_hours for v in violations] == [8.0, 6.0]
        assert violations[0].affected_shift_ids == ("before", "new")
        assert violations[1].affected_shift_ids == ("new", "after")

    def test_exactly_minimum_rest_is_compliant(self, validator, make_shift):
        closing = make_shift(0, "14:00", "22:00")
        opening = make_shift(1, "09:00", "17:00")

        assert validator.validate_daily_rest(opening, [closing]) == []

    def test_fractional_rest_is_not_truncated(self, validator, make_shift):
        closing = make_shift(0, "14:00", "22:00")
        opening = make_shift(1, "06:30", "14:00")

        violations = validator.validate_daily_rest(opening, [closing])

        assert violations[0].actual_rest_hours == 8.5

    def test_no_neighbours(self, validator, make_shift):
        assert validator.validate_daily_rest(make_shift(0, "08:00", "16:00"), []) == []

    def test_other_employees_shifts_ignored(self, validator, make_shift):
        colleague = make_shift(0, "14:00", "22:00", user_id="u2")
        opening = make_shift(1, "06:00", "14:00", user_id="u1")

        assert validator.validate_daily_rest(opening, [colleague]) == []

    def test_configured_minimum(self, make_shift):
        validator = RestPeriodValidator(ComplianceConfig(min_daily_rest=8.0))
        closing = make_shift(0, "14:00", "22:00")
        opening = make_shift(1, "06:00", "14:00")

        assert validator.validate_daily_rest(opening, [closing]) == []

    def test_idempotent(self, validator, make_shift):
        closing = make_shift(0, "14:00", "22:00", id="a")
        opening = make_shift(1, "06:00", "14:00", id="b")

        first = validator.validate_daily_rest(opening, [closing])
        second = validator.validate_daily_rest(opening, [closing])

        assert first == second


class TestWeeklyRest:
    """Test the 35-hour continuous rest per rolling 7 days."""

    def test_weekend_off_is_compliant(self, validator, workweek):
        """Mon-Fri 8h shifts leave 56 hours from Friday 16:00 to Monday."""
        violations = validator.validate_weekly_rest("u1", workweek, MONDAY, MONDAY)

        assert violations == []

    def test_seven_twelve_hour_days_violate(self, validator, twelve_hour_week):
        violations = validator.validate_weekly_rest("u1", twelve_hour_week, MONDAY, MONDAY)

        assert len(violations) == 1
        v = violations[0]
        assert v.scope == RestScope.WEEKLY
        assert v.actual_rest_hours == 12.0
        assert v.actual_rest_hours < v.required_rest_hours == 35.0
        assert v.affected_shift_ids == tuple(f"d{day}" for day in range(7))
        assert "2024-01-15" in v.message

    def test_one_violation_per_failing_window(self, validator, twelve_hour_week):
        """Windows starting Mon and Tue lack a 35-hour block; from Wed on the week has ended."""
        violations = validator.validate_weekly_rest(
            "u1", twelve_hour_week, MONDAY, MONDAY + timedelta(days=2)
        )

        assert len(violations) == 2
        assert [v.actual_rest_hours for v in violations] == [12.0, 28.0]

    def test_windows_without_shifts_are_skipped(self, validator, make_shift):
        shifts = [make_shift(0, "08:00", "16:00")]

        violations = validator.validate_weekly_rest(
            "u1", shifts, MONDAY + timedelta(days=10), MONDAY + timedelta(days=12)
        )

        assert violations == []

    def test_no_shifts_for_user(self, validator, workweek):
        assert validator.validate_weekly_rest("u9", workweek, MONDAY, MONDAY) == []

    def test_longest_rest_with_no_shifts_is_whole_window(self):
        start = datetime(2024, 1, 15, tzinfo=timezone.utc)

        assert RestPeriodValidator.longest_rest_period([], start, start + timedelta(days=7)) == 168.0

    def test_longest_rest_ignores_overlaps(self, make_shift):
        """A shift nested in a longer one must not open a gap."""
        start = datetime(2024, 1, 15, tzinfo=timezone.utc)
        outer = make_shift(0, "08:00", "20:00")
        inner = make_shift(0, "10:00", "12:00")

        longest = RestPeriodValidator.longest_rest_period(
            [outer, inner], start, start + timedelta(days=1)
        )

        assert longest == 8.0

    def test_longest_rest_picks_middle_gap(self, make_shift):
        start = datetime(2024, 1, 15, tzinfo=timezone.utc)
        shifts = [make_shift(0, "02:00", "10:00"), make_shift(2, "18:00", "23:00")]

        longest = RestPeriodValidator.longest_rest_period(shifts, start, start + timedelta(days=3))

        assert longest == 56.0


class TestAllRestPeriods:
    def test_daily_violations_come_first(self, validator, twelve_hour_week, make_shift):
        existing = twelve_hour_week[:6]
        new = make_shift(6, "06:00", "18:00", id="new")

        violations = validator.validate_all_rest_periods(new, existing, MONDAY, MONDAY)

        assert violations[0].scope == RestScope.DAILY
        assert violations[0].actual_rest_hours == 10.0
        assert violations[-1].scope == RestScope.WEEKLY

    def test_compliant_week(self, validator, workweek):
        violations = validator.validate_all_rest_periods(
            workweek[2], workweek[:2] + workweek[3:], MONDAY, MONDAY
        )

        assert violations == []
