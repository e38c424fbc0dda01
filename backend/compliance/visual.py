"""Color-coded compliance indicators for presentation layers.

Only threshold classification lives here; the validators never depend on it.
"""

from dataclasses import dataclass, field

from .errors import UnknownViolationTypeError
from .types import (
    HoursScope,
    PublishValidation,
    RestPeriodViolation,
    Violation,
    WorkingHoursViolation,
)

STATUS_COLORS = {"compliant": "green", "warning": "yellow", "violation": "red"}
STATUS_ICONS = {"compliant": "check", "warning": "alert", "violation": "error"}


@dataclass
class QuickFix:
    action: str
    description: str
    impact: str
    auto_applicable: bool = False

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "description": self.description,
            "impact": self.impact,
            "auto_applicable": self.auto_applicable,
        }


@dataclass
class VisualComplianceIndicator:
    status: str  # "compliant", "warning", "violation"
    severity: str  # "low", "medium", "high", "critical"
    message: str
    quick_fixes: list[QuickFix] = field(default_factory=list)

    @property
    def color(self) -> str:
        return STATUS_COLORS[self.status]

    @property
    def icon(self) -> str:
        return STATUS_ICONS[self.status]

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "color": self.color,
            "icon": self.icon,
            "severity": self.severity,
            "message": self.message,
            "quick_fixes": [f.to_dict() for f in self.quick_fixes],
        }


def severity_for_hours(hours: float) -> str:
    """Tier a rest shortfall or an hours excess."""
    if hours > 5:
        return "critical"
    if hours > 2:
        return "high"
    return "medium"


def severity_for_count(violations: int) -> str:
    if violations > 5:
        return "critical"
    if violations > 2:
        return "high"
    return "medium"


def for_rest_period_violation(violation: RestPeriodViolation) -> VisualComplianceIndicator:
    shortfall = violation.shortfall_hours
    return VisualComplianceIndicator(
        status="violation",
        severity=severity_for_hours(shortfall),
        message=violation.message,
        quick_fixes=[
            QuickFix(
                action="add_rest_time",
                description=f"Add {shortfall:g} hours rest between shifts",
                impact=f"Extends rest period to {violation.required_rest_hours:g} hours",
            ),
            QuickFix(
                action="reschedule_shift",
                description="Move shift to later time slot",
                impact="Ensures compliance with rest requirements",
            ),
        ],
    )


def for_working_hours_violation(violation: WorkingHoursViolation) -> VisualComplianceIndicator:
    excess = violation.excess_hours
    quick_fixes = []

    if violation.scope == HoursScope.DAILY:
        quick_fixes.append(QuickFix(
            action="reduce_shift_duration",
            description=f"Reduce shift by {excess:.1f} hours",
            impact=f"Brings daily hours to {violation.limit_hours:g}h limit",
            auto_applicable=True,
        ))
    elif violation.scope == HoursScope.WEEKLY:
        quick_fixes.append(QuickFix(
            action="redistribute_hours",
            description="Redistribute hours across week",
            impact="Balances workload while maintaining coverage",
        ))

    return VisualComplianceIndicator(
        status="violation",
        severity=severity_for_hours(excess),
        message=violation.message,
        quick_fixes=quick_fixes,
    )


def for_violation(violation: Violation) -> VisualComplianceIndicator:
    if isinstance(violation, RestPeriodViolation):
        return for_rest_period_violation(violation)
    if isinstance(violation, WorkingHoursViolation):
        return for_working_hours_violation(violation)
    raise UnknownViolationTypeError(f"Unknown violation type: {type(violation).__name__}")


def for_publish_validation(validation: PublishValidation) -> VisualComplianceIndicator:
    deadline_days = validation.deadline_days

    if validation.is_late:
        return VisualComplianceIndicator(
            status="violation",
            severity="critical",
            message=f"Publishing {validation.days_late} days late (violates {deadline_days}-day rule)",
            quick_fixes=[QuickFix(
                action="acknowledge_violation",
                description="Acknowledge late publication and document reason",
                impact="Creates audit trail for compliance review",
            )],
        )

    if validation.days_until_start < deadline_days + 2:
        return VisualComplianceIndicator(
            status="warning",
            severity="medium",
            message=(
                f"Only {validation.days_until_start} days until roster starts "
                f"(close to {deadline_days}-day deadline)"
            ),
        )

    return VisualComplianceIndicator(
        status="compliant",
        severity="low",
        message=(
            f"Publishing {validation.days_until_start} days early "
            f"(compliant with {deadline_days}-day rule)"
        ),
    )


def for_compliance_status(violations: int, warnings: int) -> VisualComplianceIndicator:
    if violations > 0:
        return VisualComplianceIndicator(
            status="violation",
            severity=severity_for_count(violations),
            message=f"{violations} compliance violation{'s' if violations > 1 else ''} detected",
        )

    if warnings > 0:
        return VisualComplianceIndicator(
            status="warning",
            severity="low",
            message=f"{warnings} warning{'s' if warnings > 1 else ''} to review",
        )

    return VisualComplianceIndicator(
        status="compliant",
        severity="low",
        message="Fully compliant with working time regulations",
    )


def for_roster_summary(
    total_shifts: int,
    shifts_with_violations: int,
    shifts_with_warnings: int,
    is_late_publication: bool,
) -> VisualComplianceIndicator:
    if is_late_publication or shifts_with_violations > 0:
        issues = []
        if is_late_publication:
            issues.append("late publication")
        if shifts_with_violations > 0:
            issues.append(f"{shifts_with_violations} shift violations")
        return VisualComplianceIndicator(
            status="violation",
            severity="high",
            message=f"Compliance issues: {', '.join(issues)}",
        )

    if shifts_with_warnings > 0:
        compliance_rate = (total_shifts - shifts_with_warnings) / total_shifts * 100
        return VisualComplianceIndicator(
            status="warning",
            severity="medium",
            message=(
                f"{shifts_with_warnings}/{total_shifts} shifts have warnings "
                f"({compliance_rate:.0f}% compliant)"
            ),
        )

    return VisualComplianceIndicator(
        status="compliant",
        severity="low",
        message=f"All {total_shifts} shifts compliant",
    )
