"""Compliance engine that orchestrates the validators and the cost calculator."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from utils import as_datetime, start_of_day

from .config import ComplianceConfig, DEFAULT_COMPLIANCE_CONFIG
from .cost_calculator import LaborCostCalculator
from .types import (
    ComplianceWarning,
    HoursScope,
    LaborCost,
    RestPeriodViolation,
    ShiftData,
    WarningCode,
    WorkingHoursViolation,
)
from .validators import RestPeriodValidator, WorkingHoursValidator
from .visual import VisualComplianceIndicator, for_compliance_status

# Share of a cap at which a shift is flagged as close to the limit
NEAR_LIMIT_RATIO = 0.9


@dataclass
class ShiftCheckResult:
    """Everything the engine knows about one shift in its schedule."""
    shift: ShiftData
    rest_violations: list[RestPeriodViolation] = field(default_factory=list)
    hours_violations: list[WorkingHoursViolation] = field(default_factory=list)
    warnings: list[ComplianceWarning] = field(default_factory=list)
    labor_cost: Optional[LaborCost] = None

    @property
    def violations(self) -> list:
        return [*self.rest_violations, *self.hours_violations]

    @property
    def is_valid(self) -> bool:
        return not self.rest_violations and not self.hours_violations

    @property
    def status(self) -> str:
        if not self.is_valid:
            return "violation"
        if self.warnings:
            return "warning"
        return "compliant"

    @property
    def violates_rest_period(self) -> bool:
        return len(self.rest_violations) > 0

    @property
    def violates_daily_limit(self) -> bool:
        return any(v.scope == HoursScope.DAILY for v in self.hours_violations)

    @property
    def violates_weekly_limit(self) -> bool:
        return any(v.scope == HoursScope.WEEKLY for v in self.hours_violations)

    @property
    def is_overtime(self) -> bool:
        if self.labor_cost is not None and self.labor_cost.overtime_hours > 0:
            return True
        return any(v.is_overtime for v in self.hours_violations)

    @property
    def visual_indicator(self) -> VisualComplianceIndicator:
        return for_compliance_status(len(self.violations), len(self.warnings))

    def to_dict(self) -> dict:
        return {
            "shift": self.shift.to_dict(),
            "is_valid": self.is_valid,
            "status": self.status,
            "violations": [v.to_dict() for v in self.violations],
            "warnings": [w.to_dict() for w in self.warnings],
            "labor_cost": self.labor_cost.to_dict() if self.labor_cost else None,
            "violates_rest_period": self.violates_rest_period,
            "violates_daily_limit": self.violates_daily_limit,
            "violates_weekly_limit": self.violates_weekly_limit,
            "is_overtime": self.is_overtime,
            "visual_indicator": self.visual_indicator.to_dict(),
        }


class ComplianceEngine:
    """
    Main engine for running compliance validation.

    Holds one validator of each kind built from the same config. The engine
    keeps no state between calls.
    """

    def __init__(
        self,
        config: Optional[ComplianceConfig] = None,
        near_limit_ratio: float = NEAR_LIMIT_RATIO,
    ):
        self.config = config or DEFAULT_COMPLIANCE_CONFIG
        self.near_limit_ratio = near_limit_ratio
        self.rest_validator = RestPeriodValidator(self.config)
        self.hours_validator = WorkingHoursValidator(self.config)
        self.cost_calculator = LaborCostCalculator(self.config)

    def check_shift(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
        period_start: date | datetime,
        period_end: date | datetime,
    ) -> ShiftCheckResult:
        """
        Run all validations for a shift against the employee's other shifts.

        Args:
            new_shift: The shift under evaluation
            existing_shifts: The employee's other shifts, excluding new_shift
            period_start: First day a weekly rest window may start on
            period_end: Last day a weekly rest window may start on

        Returns:
            ShiftCheckResult with violations, near-limit warnings and cost
        """
        rest_violations = self.rest_validator.validate_all_rest_periods(
            new_shift, existing_shifts, period_start, period_end
        )
        hours_violations = self.hours_validator.validate_all_working_hours(
            new_shift, existing_shifts
        )

        return ShiftCheckResult(
            shift=new_shift,
            rest_violations=rest_violations,
            hours_violations=hours_violations,
            warnings=self.near_limit_warnings(new_shift, existing_shifts, hours_violations),
            labor_cost=self.cost_calculator.calculate_shift_cost(new_shift),
        )

    def check_shift_in_schedule(
        self,
        shift: ShiftData,
        schedule: list[ShiftData],
        period_start: date | datetime | None = None,
        period_end: date | datetime | None = None,
    ) -> ShiftCheckResult:
        """
        Check a shift that is already part of a schedule.

        Weekly rest is evaluated for the 7-day windows that contain the
        shift's start day and start inside [period_start, period_end - 6 days].
        Without a period, the days spanned by the employee's schedule are used.
        """
        others = [s for s in schedule if s is not shift and s.user_id == shift.user_id]
        tzinfo = shift.start_time.tzinfo
        own = [shift, *others]

        if period_start is None:
            first_day = start_of_day(min(s.start_time for s in own))
        else:
            first_day = start_of_day(as_datetime(period_start, tzinfo))
        if period_end is None:
            last_day = start_of_day(max(s.end_time for s in own))
        else:
            last_day = start_of_day(as_datetime(period_end, tzinfo))

        last_window_start = max(first_day, last_day - timedelta(days=6))
        shift_day = start_of_day(shift.start_time)
        window_from = max(first_day, shift_day - timedelta(days=6))
        window_to = max(window_from, min(last_window_start, shift_day))
        return self.check_shift(shift, others, window_from, window_to)

    def check_roster(
        self,
        shifts: list[ShiftData],
        period_start: date | datetime,
        period_end: date | datetime,
    ) -> list[ShiftCheckResult]:
        """Check every shift against the rest of its employee's shifts, in input order."""
        results = []
        for shift in shifts:
            others = [s for s in shifts if s is not shift and s.user_id == shift.user_id]
            results.append(self.check_shift(shift, others, period_start, period_end))
        return results

    def near_limit_warnings(
        self,
        new_shift: ShiftData,
        existing_shifts: list[ShiftData],
        hours_violations: list[WorkingHoursViolation],
    ) -> list[ComplianceWarning]:
        """Flag daily and rolling weekly totals that are close to, but within, the caps."""
        warnings: list[ComplianceWarning] = []
        breached = {v.scope for v in hours_violations}

        if HoursScope.DAILY not in breached:
            daily_limit = self.config.max_daily_hours
            hours = new_shift.worked_hours
            if hours >= daily_limit * self.near_limit_ratio:
                warnings.append(ComplianceWarning(
                    code=WarningCode.NEAR_DAILY_LIMIT,
                    limit_hours=daily_limit,
                    actual_hours=hours,
                    message=f"Shift is close to the daily limit: {hours:.1f} of {daily_limit:g} hours",
                ))

        if HoursScope.WEEKLY not in breached:
            weekly_limit = self.config.max_weekly_hours
            week_end = new_shift.start_time + timedelta(days=7)
            weekly_hours = new_shift.worked_hours + sum(
                s.worked_hours for s in existing_shifts
                if s.user_id == new_shift.user_id
                and new_shift.start_time <= s.start_time < week_end
            )
            if weekly_hours >= weekly_limit * self.near_limit_ratio:
                warnings.append(ComplianceWarning(
                    code=WarningCode.NEAR_WEEKLY_LIMIT,
                    limit_hours=weekly_limit,
                    actual_hours=weekly_hours,
                    message=(
                        f"Rolling 7-day total is close to the weekly limit: "
                        f"{weekly_hours:.1f} of {weekly_limit:g} hours"
                    ),
                ))

        return warnings
