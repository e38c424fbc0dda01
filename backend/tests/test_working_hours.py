"""Unit tests for daily/weekly hour caps and overtime ceilings."""

import pytest
from datetime import date, timedelta

from compliance.config import ComplianceConfig
from compliance.types import HoursScope, Period
from compliance.validators import WorkingHoursValidator


@pytest.fixture
def validator():
    return WorkingHoursValidator()


class TestShiftHours:
    def test_break_is_deducted(self, make_shift):
        shift = make_shift(0, "08:00", "16:30", break_minutes=30)

        assert WorkingHoursValidator.shift_hours(shift) == 8.0

    def test_zero_break_is_not_deducted(self, make_shift):
        shift = make_shift(0, "08:00", "16:30")

        assert WorkingHoursValidator.shift_hours(shift) == 8.5

    def test_overnight_shift(self, make_shift):
        shift = make_shift(0, "22:00", "06:00")

        assert WorkingHoursValidator.shift_hours(shift) == 8.0

    def test_overtime_is_relative_to_daily_cap(self, validator, make_shift):
        assert validator.overtime_hours(make_shift(0, "08:00", "20:00")) == 3.0
        assert validator.overtime_hours(make_shift(0, "08:00", "16:00")) == 0.0


class TestDailyHours:
    """Test the 9-hour daily cap."""

    def test_long_single_shift_fires_both_checks(self, validator, make_shift):
        """An 11h shift breaks the single-shift and the calendar-day check."""
        shift = make_shift(0, "07:00", "18:00")

        violations = validator.validate_daily_hours(shift, [])

        assert len(violations) == 2
        assert all(v.scope == HoursScope.DAILY for v in violations)
        assert violations[0].actual_hours == 11.0
        assert violations[0].affected_period == Period(shift.start_time, shift.end_time)
        assert violations[0].message.startswith("Single shift exceeds daily limit")
        day_start = shift.start_time.replace(hour=0)
        assert violations[1].affected_period == Period(day_start, day_start + timedelta(days=1))
        assert violations[1].message.startswith("Total daily hours exceed limit")

    def test_split_shifts_summed_per_day(self, validator, make_shift):
        morning = make_shift(0, "06:00", "11:00")
        evening = make_shift(0, "13:00", "18:00")

        violations = validator.validate_daily_hours(evening, [morning])

        assert len(violations) == 1
        assert violations[0].actual_hours == 10.0
        assert violations[0].limit_hours == 9.0

    def test_exactly_at_cap_with_break(self, validator, make_shift):
        shift = make_shift(0, "08:00", "17:30", break_minutes=30)

        assert validator.validate_daily_hours(shift, []) == []

    def test_other_days_and_users_excluded(self, validator, make_shift):
        shift = make_shift(0, "08:00", "16:00")
        existing = [
            make_shift(1, "06:00", "11:00"),
            make_shift(0, "17:00", "22:00", user_id="u2"),
        ]

        assert validator.validate_daily_hours(shift, existing) == []


class TestWeeklyHours:
    """Test the 40-hour cap over the 7 days following the shift."""

    def test_full_workweek_is_at_cap(self, validator, workweek):
        assert validator.validate_weekly_hours(workweek[0], workweek[1:]) == []

    def test_saturday_extra_exceeds_cap(self, validator, workweek, make_shift):
        saturday = make_shift(5, "08:00", "12:00")
        new = workweek[0]

        violations = validator.validate_weekly_hours(new, workweek[1:] + [saturday])

        assert len(violations) == 1
        v = violations[0]
        assert v.scope == HoursScope.WEEKLY
        assert v.actual_hours == 44.0
        assert v.excess_hours == 4.0
        assert v.affected_period == Period(new.start_time, new.start_time + timedelta(days=7))

    def test_window_starts_at_shift(self, validator, workweek):
        """Shifts before the new shift's start are outside its window."""
        assert validator.validate_weekly_hours(workweek[4], workweek[:4]) == []


class TestOvertimeLimits:
    """Test weekly, 4-week and yearly overtime ceilings."""

    def test_weekly_overtime(self, validator, make_shift):
        shifts = [make_shift(day, "08:00", "20:00") for day in range(4)]

        violations = validator.validate_overtime_limits("u1", shifts, shifts[0].start_time)

        assert len(violations) == 1
        assert violations[0].scope == HoursScope.OVERTIME_WEEKLY
        assert violations[0].actual_hours == 12.0
        assert violations[0].limit_hours == 10.0
        assert violations[0].is_overtime

    def test_four_week_overtime(self, validator, make_shift):
        shifts = [make_shift(day, "08:00", "20:00") for day in range(0, 27, 3)]

        violations = validator.validate_overtime_limits("u1", shifts, shifts[0].start_time)

        assert [v.scope for v in violations] == [HoursScope.OVERTIME_4WEEKS]
        assert violations[0].actual_hours == 27.0

    def test_yearly_horizon_includes_one_year_back(self, make_shift):
        validator = WorkingHoursValidator(ComplianceConfig(max_overtime_per_year=5.0))
        reference = make_shift(0, "08:00", "20:00")
        a_year_ago = make_shift(date(2023, 1, 15), "08:00", "20:00")

        violations = validator.validate_overtime_limits(
            "u1", [a_year_ago, reference], reference.start_time
        )

        assert [v.scope for v in violations] == [HoursScope.OVERTIME_YEARLY]
        assert violations[0].actual_hours == 6.0

    def test_yearly_horizon_excludes_older_shifts(self, make_shift):
        validator = WorkingHoursValidator(ComplianceConfig(max_overtime_per_year=5.0))
        reference = make_shift(0, "08:00", "20:00")
        too_old = make_shift(date(2023, 1, 14), "08:00", "20:00")

        violations = validator.validate_overtime_limits(
            "u1", [too_old, reference], reference.start_time
        )

        assert violations == []

    def test_other_users_ignored(self, validator, make_shift):
        shifts = [make_shift(day, "08:00", "20:00", user_id="u2") for day in range(4)]

        assert validator.validate_overtime_limits("u1", shifts, shifts[0].start_time) == []


class TestAllWorkingHours:
    def test_order_is_daily_weekly_overtime(self, make_shift):
        validator = WorkingHoursValidator(ComplianceConfig(max_overtime_per_week=2.0))
        shift = make_shift(0, "08:00", "20:00")

        violations = validator.validate_all_working_hours(shift, [])

        assert [v.scope for v in violations] == [
            HoursScope.DAILY,
            HoursScope.DAILY,
            HoursScope.OVERTIME_WEEKLY,
        ]

    def test_idempotent(self, validator, workweek, make_shift):
        saturday = make_shift(5, "06:00", "18:00")
        existing = workweek[1:] + [saturday]

        first = validator.validate_all_working_hours(workweek[0], existing)
        second = validator.validate_all_working_hours(workweek[0], existing)

        assert first == second
        assert len(first) == 1
