"""Labor cost calculation with the statutory overtime premium.

Overtime is every worked hour above the daily cap of the active
ComplianceConfig and is paid at ``hourly_rate * overtime_multiplier``.
Components are summed from unrounded values and rounded half-up to two
decimals once, at the point of output. Total hours and total cost are the
sums of the rounded components.
"""

from dataclasses import dataclass
from typing import Optional

from utils import round_half_up

from .config import ComplianceConfig, DEFAULT_COMPLIANCE_CONFIG
from .types import CostVariance, LaborCost, ShiftData, WeeklyCostEstimate


# Norwegian law requires a premium of at least 40%
OVERTIME_MULTIPLIER = 1.4


@dataclass(frozen=True)
class _CostBreakdown:
    """Unrounded cost components of one or more shifts."""
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    regular_cost: float = 0.0
    overtime_cost: float = 0.0

    def __add__(self, other: "_CostBreakdown") -> "_CostBreakdown":
        return _CostBreakdown(
            total_hours=self.total_hours + other.total_hours,
            regular_hours=self.regular_hours + other.regular_hours,
            overtime_hours=self.overtime_hours + other.overtime_hours,
            regular_cost=self.regular_cost + other.regular_cost,
            overtime_cost=self.overtime_cost + other.overtime_cost,
        )


class LaborCostCalculator:
    """Converts shifts into regular/overtime hours and cost."""

    def __init__(
        self,
        config: Optional[ComplianceConfig] = None,
        overtime_multiplier: float = OVERTIME_MULTIPLIER,
    ):
        if overtime_multiplier < OVERTIME_MULTIPLIER:
            raise ValueError(
                f"overtime_multiplier must be at least the statutory {OVERTIME_MULTIPLIER}, "
                f"got {overtime_multiplier}"
            )
        self.config = config or DEFAULT_COMPLIANCE_CONFIG
        self.overtime_multiplier = overtime_multiplier

    def _breakdown(self, shift: ShiftData) -> _CostBreakdown:
        total_hours = shift.worked_hours
        rate = shift.hourly_rate or 0.0

        regular_hours = min(total_hours, self.config.max_daily_hours)
        overtime_hours = max(0.0, total_hours - self.config.max_daily_hours)

        return _CostBreakdown(
            total_hours=total_hours,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            regular_cost=regular_hours * rate,
            overtime_cost=overtime_hours * rate * self.overtime_multiplier,
        )

    def _to_labor_cost(self, breakdown: _CostBreakdown, hourly_rate: float) -> LaborCost:
        regular_hours = round_half_up(breakdown.regular_hours)
        overtime_hours = round_half_up(breakdown.overtime_hours)
        regular_cost = round_half_up(breakdown.regular_cost)
        overtime_cost = round_half_up(breakdown.overtime_cost)
        return LaborCost(
            hourly_rate=round_half_up(hourly_rate),
            total_hours=round_half_up(regular_hours + overtime_hours),
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            regular_cost=regular_cost,
            overtime_cost=overtime_cost,
            total_cost=round_half_up(regular_cost + overtime_cost),
            overtime_multiplier=self.overtime_multiplier,
        )

    def calculate_shift_cost(self, shift: ShiftData) -> LaborCost:
        """Labor cost for a single shift."""
        return self._to_labor_cost(self._breakdown(shift), shift.hourly_rate or 0.0)

    def calculate_total_cost(self, shifts: list[ShiftData]) -> LaborCost:
        """
        Element-wise sum of the per-shift breakdowns.

        The reported hourly rate is the average rate weighted by worked hours.
        """
        total = _CostBreakdown()
        weighted_rate = 0.0
        for shift in shifts:
            total += self._breakdown(shift)
            weighted_rate += (shift.hourly_rate or 0.0) * shift.worked_hours

        average_rate = weighted_rate / total.total_hours if total.total_hours > 0 else 0.0
        return self._to_labor_cost(total, average_rate)

    @staticmethod
    def calculate_variance(budgeted: float, actual: float) -> CostVariance:
        """Budget vs actual; a positive variance means over budget."""
        variance = actual - budgeted
        variance_percentage = (variance / budgeted) * 100 if budgeted > 0 else 0.0

        return CostVariance(
            variance=round_half_up(variance),
            variance_percentage=round_half_up(variance_percentage, 1),
            is_over_budget=variance > 0,
        )

    def estimate_weekly_cost(self, shifts: list[ShiftData]) -> WeeklyCostEstimate:
        """Estimate the labor cost of a week's schedule."""
        cost = self.calculate_total_cost(shifts)
        return WeeklyCostEstimate(
            estimated_cost=cost.total_cost,
            regular_cost=cost.regular_cost,
            overtime_cost=cost.overtime_cost,
            total_hours=cost.total_hours,
        )
