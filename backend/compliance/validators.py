"""Compliance validators for labor law enforcement.

Each validator is a pure function of its inputs and the ComplianceConfig it
was built with. Violations are returned as lists, an empty list meaning the
input is compliant.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from utils import as_datetime, hours_between, start_of_day, utc_now

from .config import ComplianceConfig, DEFAULT_COMPLIANCE_CONFIG
from .types import (
    HoursScope,
    Period,
    PublishValidation,
    RestPeriodViolation,
    RestScope,
    ShiftData,
    WorkingHoursViolation,
)


def _by_start(shifts: Iterable[ShiftData]) -> list[ShiftData]:
    return sorted(shifts, key=lambda s: s.start_time)


def _shift_ids(shifts: Iterable[ShiftData]) -> tuple[str, ...]:
    return tuple(s.id for s in shifts if s.id)


class BaseValidator:
    """Base class for compliance validators."""

    def __init__(self, config: Optional[ComplianceConfig] = None):
        self.config = config or DEFAULT_COMPLIANCE_CONFIG


class RestPeriodValidator(BaseValidator):
    """Validates daily (11h) and weekly (35h) continuous rest (§ 10-8)."""

    def validate_daily_rest(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
    ) -> list[RestPeriodViolation]:
        """Check the rest before and after a new shift independently."""
        violations: list[RestPeriodViolation] = []
        min_rest = self.config.min_daily_rest

        same_user = [s for s in existing_shifts if s.user_id == new_shift.user_id]
        ordered = _by_start(same_user + [new_shift])
        index = next(i for i, s in enumerate(ordered) if s is new_shift)

        neighbours = []
        if index > 0:
            neighbours.append((ordered[index - 1], new_shift))
        if index < len(ordered) - 1:
            neighbours.append((new_shift, ordered[index + 1]))

        for earlier, later in neighbours:
            rest_hours = hours_between(earlier.end_time, later.start_time)
            if rest_hours < min_rest:
                violations.append(RestPeriodViolation(
                    scope=RestScope.DAILY,
                    required_rest_hours=min_rest,
                    actual_rest_hours=rest_hours,
                    affected_shift_ids=_shift_ids([earlier, later]),
                    message=(
                        f"Insufficient daily rest: {rest_hours:.1f} hours between shifts "
                        f"(minimum {min_rest:g} hours required)"
                    ),
                ))

        return violations

    def validate_weekly_rest(
        self,
        user_id: str,
        shifts: list[ShiftData],
        period_start: date | datetime,
        period_end: date | datetime,
    ) -> list[RestPeriodViolation]:
        """
        Check every rolling 7-day window for one continuous rest block.

        Windows start at period_start and advance one day at a time while the
        window start is not after period_end.
        """
        violations: list[RestPeriodViolation] = []
        min_rest = self.config.min_weekly_rest

        user_shifts = _by_start(s for s in shifts if s.user_id == user_id)
        if not user_shifts:
            return violations

        tzinfo = user_shifts[0].start_time.tzinfo
        window_start = as_datetime(period_start, tzinfo)
        last_start = as_datetime(period_end, tzinfo)

        while window_start <= last_start:
            window_end = window_start + timedelta(days=7)
            window_shifts = [
                s for s in user_shifts
                if window_start <= s.start_time <= window_end
                or window_start <= s.end_time <= window_end
            ]

            if window_shifts:
                longest_rest = self.longest_rest_period(window_shifts, window_start, window_end)
                if longest_rest < min_rest:
                    violations.append(RestPeriodViolation(
                        scope=RestScope.WEEKLY,
                        required_rest_hours=min_rest,
                        actual_rest_hours=longest_rest,
                        affected_shift_ids=_shift_ids(window_shifts),
                        message=(
                            f"Insufficient weekly rest: {longest_rest:.1f} hours of continuous rest "
                            f"in 7-day period starting {window_start.date().isoformat()} "
                            f"(minimum {min_rest:g} hours required)"
                        ),
                    ))

            window_start += timedelta(days=1)

        return violations

    @staticmethod
    def longest_rest_period(
        shifts: list[ShiftData],
        period_start: datetime,
        period_end: datetime,
    ) -> float:
        """Longest gap with no work inside [period_start, period_end], in hours."""
        if not shifts:
            return hours_between(period_start, period_end)

        ordered = _by_start(shifts)
        longest = max(0.0, hours_between(period_start, ordered[0].start_time))

        # Track the latest end seen so overlapping shifts never open a gap.
        latest_end = ordered[0].end_time
        for shift in ordered[1:]:
            longest = max(longest, hours_between(latest_end, shift.start_time))
            latest_end = max(latest_end, shift.end_time)

        return max(longest, hours_between(latest_end, period_end))

    def validate_all_rest_periods(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
        period_start: date | datetime,
        period_end: date | datetime,
    ) -> list[RestPeriodViolation]:
        """Daily rest violations first, then weekly."""
        violations = self.validate_daily_rest(new_shift, existing_shifts)
        violations.extend(self.validate_weekly_rest(
            new_shift.user_id,
            existing_shifts + [new_shift],
            period_start,
            period_end,
        ))
        return violations


class WorkingHoursValidator(BaseValidator):
    """Validates daily/weekly hour caps and overtime ceilings (§ 10-4, § 10-6)."""

    @staticmethod
    def shift_hours(shift: ShiftData) -> float:
        return shift.worked_hours

    def overtime_hours(self, shift: ShiftData) -> float:
        """Hours beyond the daily cap; overtime is measured per shift."""
        return max(0.0, shift.worked_hours - self.config.max_daily_hours)

    def validate_daily_hours(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
    ) -> list[WorkingHoursViolation]:
        """Check the shift alone and the calendar-day total against the daily cap."""
        violations: list[WorkingHoursViolation] = []
        limit = self.config.max_daily_hours
        new_hours = new_shift.worked_hours

        if new_hours > limit:
            violations.append(WorkingHoursViolation(
                scope=HoursScope.DAILY,
                limit_hours=limit,
                actual_hours=new_hours,
                affected_period=Period(new_shift.start_time, new_shift.end_time),
                message=(
                    f"Single shift exceeds daily limit: {new_hours:.1f} hours "
                    f"(maximum {limit:g} hours)"
                ),
            ))

        day_start = start_of_day(new_shift.start_time)
        day_end = day_start + timedelta(days=1)
        total_hours = new_hours + sum(
            s.worked_hours for s in existing_shifts
            if s.user_id == new_shift.user_id and day_start <= s.start_time < day_end
        )

        if total_hours > limit:
            violations.append(WorkingHoursViolation(
                scope=HoursScope.DAILY,
                limit_hours=limit,
                actual_hours=total_hours,
                affected_period=Period(day_start, day_end),
                message=(
                    f"Total daily hours exceed limit: {total_hours:.1f} hours "
                    f"(maximum {limit:g} hours)"
                ),
            ))

        return violations

    def validate_weekly_hours(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
    ) -> list[WorkingHoursViolation]:
        """Sum hours over the 7 days starting at the new shift's start."""
        violations: list[WorkingHoursViolation] = []
        limit = self.config.max_weekly_hours

        week_start = new_shift.start_time
        week_end = week_start + timedelta(days=7)
        total_hours = new_shift.worked_hours + sum(
            s.worked_hours for s in existing_shifts
            if s.user_id == new_shift.user_id and week_start <= s.start_time < week_end
        )

        if total_hours > limit:
            violations.append(WorkingHoursViolation(
                scope=HoursScope.WEEKLY,
                limit_hours=limit,
                actual_hours=total_hours,
                affected_period=Period(week_start, week_end),
                message=(
                    f"Weekly hours exceed limit: {total_hours:.1f} hours "
                    f"(maximum {limit:g} hours)"
                ),
            ))

        return violations

    def validate_overtime_limits(
        self,
        user_id: str,
        all_shifts: list[ShiftData],
        reference_date: datetime,
    ) -> list[WorkingHoursViolation]:
        """Check accumulated overtime over the weekly, 4-week and yearly horizons."""
        violations: list[WorkingHoursViolation] = []
        user_shifts = [s for s in all_shifts if s.user_id == user_id]

        horizons = [
            (
                HoursScope.OVERTIME_WEEKLY,
                "Weekly",
                reference_date,
                reference_date + timedelta(days=7),
                False,
                self.config.max_overtime_per_week,
            ),
            (
                HoursScope.OVERTIME_4WEEKS,
                "4-week",
                reference_date,
                reference_date + timedelta(days=28),
                False,
                self.config.max_overtime_per_4_weeks,
            ),
            (
                HoursScope.OVERTIME_YEARLY,
                "Yearly",
                reference_date - relativedelta(years=1),
                reference_date,
                True,
                self.config.max_overtime_per_year,
            ),
        ]

        for scope, label, start, end, end_inclusive, limit in horizons:
            in_horizon = [
                s for s in user_shifts
                if start <= s.start_time and (s.start_time <= end if end_inclusive else s.start_time < end)
            ]
            overtime = sum(self.overtime_hours(s) for s in in_horizon)

            if overtime > limit:
                violations.append(WorkingHoursViolation(
                    scope=scope,
                    limit_hours=limit,
                    actual_hours=overtime,
                    affected_period=Period(start, end),
                    message=(
                        f"{label} overtime exceeds limit: {overtime:.1f} hours "
                        f"(maximum {limit:g} hours)"
                    ),
                ))

        return violations

    def validate_all_working_hours(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
    ) -> list[WorkingHoursViolation]:
        """Daily, then weekly, then overtime violations."""
        violations = self.validate_daily_hours(new_shift, existing_shifts)
        violations.extend(self.validate_weekly_hours(new_shift, existing_shifts))
        violations.extend(self.validate_overtime_limits(
            new_shift.user_id,
            existing_shifts + [new_shift],
            new_shift.start_time,
        ))
        return violations


class PublishValidator(BaseValidator):
    """Validates the roster publication deadline (the 14-day rule, § 10-2)."""

    @staticmethod
    def _as_date(value: date | datetime) -> date:
        return value.date() if isinstance(value, datetime) else value

    def validate_publish(
        self,
        roster_start: date | datetime,
        publish_date: Optional[date | datetime] = None,
    ) -> PublishValidation:
        """
        Check a (proposed) publication date against the deadline.

        Late publication is allowed but flagged; the roster can always be
        published.
        """
        deadline_days = self.config.publish_deadline_days
        roster_start = self._as_date(roster_start)
        publish_date = self._as_date(publish_date or utc_now())

        days_until_start = (roster_start - publish_date).days
        publish_deadline = roster_start - timedelta(days=deadline_days)
        is_late = publish_deadline < publish_date

        warnings: list[str] = []
        if is_late:
            warnings.append(
                f"COMPLIANCE WARNING: Publishing {deadline_days - days_until_start} days late. "
                f"The roster should have been published by {publish_deadline.isoformat()}. "
                f"This violates the {deadline_days}-day rule."
            )
        elif days_until_start < 7:
            warnings.append(
                f"Only {days_until_start} days until roster starts. "
                "Consider publishing rosters earlier for better planning."
            )

        return PublishValidation(
            can_publish=True,
            days_until_start=days_until_start,
            is_late=is_late,
            publish_deadline=publish_deadline,
            deadline_days=deadline_days,
            warnings=warnings,
        )

    def was_published_on_time(self, roster_start: date | datetime, publish_date: date | datetime) -> bool:
        return self.get_publish_timing_days(roster_start, publish_date) >= 0

    def get_publish_timing_days(self, roster_start: date | datetime, publish_date: date | datetime) -> int:
        """Days early (positive) or late (negative) relative to the deadline."""
        days_before_start = (self._as_date(roster_start) - self._as_date(publish_date)).days
        return days_before_start - self.config.publish_deadline_days

    def get_publish_timing_status(self, roster_start: date | datetime, publish_date: date | datetime) -> str:
        timing_days = self.get_publish_timing_days(roster_start, publish_date)
        if timing_days > 0:
            return f"Published {timing_days} days early"
        if timing_days < 0:
            return f"Published {abs(timing_days)} days late (VIOLATION)"
        return "Published exactly on deadline"
