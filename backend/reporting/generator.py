"""Compliance report generation for labour inspections.

A report covers one organization and a date range. It lists every planned
shift per employee with its evaluation, planned vs actual hours and the
violations found, plus an overview for the whole organization.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Optional

from compliance.audit import AuditLogger
from compliance.config import ComplianceConfig, DEFAULT_COMPLIANCE_CONFIG
from compliance.engine import ComplianceEngine, ShiftCheckResult
from compliance.errors import OrganizationNotFoundError
from compliance.types import (
    RestPeriodViolation,
    ShiftData,
    VIOLATION_CODES,
    Violation,
)
from compliance.validators import PublishValidator
from schemas import (
    ComplianceReport,
    EmployeeWorkSummary,
    ReportOverview,
    ShiftSummary,
    ViolationDetail,
)
from utils import round_half_up, utc_now

from .repository import (
    ActualHoursRecord,
    EmployeeInfo,
    OrganizationInfo,
    ReportStore,
    RosterRecord,
    ShiftRepository,
)

logger = logging.getLogger(__name__)

VIOLATION_LABELS = {
    "REST_PERIOD_DAILY": "Daily rest period violation",
    "REST_PERIOD_WEEKLY": "Weekly rest period violation",
    "WORKING_HOURS_DAILY": "Daily hours limit exceeded",
    "WORKING_HOURS_WEEKLY": "Weekly hours limit exceeded",
    "WORKING_HOURS_OVERTIME_WEEKLY": "Weekly overtime limit exceeded",
    "WORKING_HOURS_OVERTIME_4WEEKS": "4-week overtime limit exceeded",
    "WORKING_HOURS_OVERTIME_YEARLY": "Yearly overtime limit exceeded",
}


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _measured(violation: Violation) -> tuple[float, float]:
    """(limit, actual) of a violation, whichever shape it has."""
    if isinstance(violation, RestPeriodViolation):
        return violation.required_rest_hours, violation.actual_rest_hours
    return violation.limit_hours, violation.actual_hours


def _severity_key(violation: Violation) -> float:
    if isinstance(violation, RestPeriodViolation):
        return violation.shortfall_hours
    return violation.excess_hours


def worst_per_code(violations: list[Violation]) -> list[Violation]:
    """
    Keep the most severe violation of each code, ordered by first occurrence.

    Weekly checks run for several overlapping windows around a shift and may
    report the same breach more than once.
    """
    worst: dict[str, Violation] = {}
    for violation in violations:
        current = worst.get(violation.code)
        if current is None or _severity_key(violation) > _severity_key(current):
            worst[violation.code] = violation
    return list(worst.values())


class ComplianceReportGenerator:
    """Builds ComplianceReport objects from repository snapshots."""

    def __init__(
        self,
        repository: ShiftRepository,
        config: Optional[ComplianceConfig] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.config = config or DEFAULT_COMPLIANCE_CONFIG
        self.audit_logger = audit_logger
        self.clock = clock

    async def generate_report(
        self,
        org_id: str,
        start_date: date | datetime,
        end_date: date | datetime,
        generated_by: Optional[str] = None,
    ) -> ComplianceReport:
        """
        Fetch everything in range for an organization and build its report.

        Raises:
            OrganizationNotFoundError: If the organization does not exist
        """
        start_date = _as_date(start_date)
        end_date = _as_date(end_date)

        organization = await self.repository.get_organization(org_id)
        if organization is None:
            raise OrganizationNotFoundError(f"Organization not found: {org_id}")

        shifts = await self.repository.find_shifts_in_range(org_id, start_date, end_date)
        actual_hours = await self.repository.find_actual_hours_in_range(org_id, start_date, end_date)
        rosters = await self.repository.find_rosters_in_range(org_id, start_date, end_date)

        user_ids = sorted({s.user_id for s in shifts} | {r.user_id for r in actual_hours})
        employees = await self.repository.find_employees(org_id, user_ids)

        report = self.build_report(
            organization, shifts, actual_hours, rosters, employees, start_date, end_date
        )
        logger.info(
            "Generated compliance report for %s (%s to %s): %d shifts, %d violations",
            org_id, report.period_start, report.period_end,
            report.overview.total_shifts, report.overview.total_violations,
        )

        if self.audit_logger is not None:
            await self.audit_logger.log_report_generated(
                organization_id=org_id,
                period_start=report.period_start,
                period_end=report.period_end,
                total_violations=report.overview.total_violations,
                user_id=generated_by,
            )

        return report

    def build_report(
        self,
        organization: OrganizationInfo,
        shifts: list[ShiftData],
        actual_hours: list[ActualHoursRecord],
        rosters: list[RosterRecord],
        employees: list[EmployeeInfo],
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> ComplianceReport:
        """Assemble a report from an in-memory snapshot. Performs no I/O."""
        config = organization.config or self.config
        engine = ComplianceEngine(config)

        shifts_by_user: dict[str, list[ShiftData]] = defaultdict(list)
        for shift in sorted(shifts, key=lambda s: (s.start_time, s.id or "")):
            shifts_by_user[shift.user_id].append(shift)

        actual_by_user: dict[str, list[ActualHoursRecord]] = defaultdict(list)
        for record in sorted(actual_hours, key=lambda r: (r.date, r.id or "")):
            actual_by_user[record.user_id].append(record)

        employees_by_id = {e.user_id: e for e in employees}
        user_ids = sorted(set(shifts_by_user) | set(actual_by_user))

        summaries: list[EmployeeWorkSummary] = []
        details: list[tuple[tuple, ViolationDetail]] = []
        results: list[ShiftCheckResult] = []

        for user_id in user_ids:
            employee = employees_by_id.get(user_id)
            if employee is None:
                logger.warning("Skipping user %s: no employee record found", user_id)
                continue

            user_shifts = shifts_by_user.get(user_id, [])
            user_actual = actual_by_user.get(user_id, [])
            actual_by_day: dict[date, ActualHoursRecord] = {}
            for record in user_actual:
                actual_by_day.setdefault(record.date, record)

            employee_details: list[tuple[tuple, ViolationDetail]] = []
            shift_rows: list[ShiftSummary] = []
            matched_days: set[date] = set()

            for shift in user_shifts:
                result = engine.check_shift_in_schedule(
                    shift, user_shifts, start_date, end_date
                )
                results.append(result)
                shift_day = shift.start_time.date()

                # Actual hours belong to the first shift of the day only
                actual = None
                if shift_day not in matched_days and shift_day in actual_by_day:
                    actual = round_half_up(actual_by_day[shift_day].total_hours)
                    matched_days.add(shift_day)

                violations = worst_per_code(result.violations)
                for violation in violations:
                    limit, measured = _measured(violation)
                    employee_details.append((
                        (shift_day, shift.start_time, employee.full_name, user_id, violation.code),
                        ViolationDetail(
                            date=shift_day.isoformat(),
                            user_id=user_id,
                            employee_name=employee.full_name,
                            shift_id=shift.id,
                            code=violation.code,
                            description=violation.message,
                            severity="VIOLATION",
                            limit=limit,
                            actual=round_half_up(measured),
                        ),
                    ))
                for warning in result.warnings:
                    employee_details.append((
                        (shift_day, shift.start_time, employee.full_name, user_id, warning.code.value),
                        ViolationDetail(
                            date=shift_day.isoformat(),
                            user_id=user_id,
                            employee_name=employee.full_name,
                            shift_id=shift.id,
                            code=warning.code.value,
                            description=warning.message,
                            severity="WARNING",
                            limit=warning.limit_hours,
                            actual=round_half_up(warning.actual_hours),
                        ),
                    ))

                shift_rows.append(ShiftSummary(
                    shift_id=shift.id,
                    date=shift_day.isoformat(),
                    start_time=shift.start_time.strftime("%H:%M"),
                    end_time=shift.end_time.strftime("%H:%M"),
                    planned_hours=round_half_up(shift.worked_hours),
                    actual_hours=actual,
                    is_overtime=result.is_overtime,
                    status=result.status,
                    violations=[VIOLATION_LABELS[v.code] for v in violations],
                ))

            summaries.append(EmployeeWorkSummary(
                user_id=user_id,
                employee_name=employee.full_name,
                employee_number=employee.employee_number,
                department=employee.department,
                total_planned_hours=round_half_up(sum(s.worked_hours for s in user_shifts)),
                total_actual_hours=round_half_up(sum(r.total_hours for r in user_actual)),
                total_overtime_hours=round_half_up(sum(r.overtime_hours for r in user_actual)),
                violations=[d for _, d in employee_details if d.severity == "VIOLATION"],
                shifts=shift_rows,
            ))
            details.extend(employee_details)

        details.sort(key=lambda item: item[0])
        summaries.sort(key=lambda e: (e.employee_name, e.user_id))

        reported_shifts = [r.shift for r in results]
        violation_details = [d for _, d in details if d.severity == "VIOLATION"]

        violations_by_type = {code: 0 for code in VIOLATION_CODES}
        for detail in violation_details:
            violations_by_type[detail.code] += 1

        total_shifts = len(results)
        violation_shifts = sum(1 for r in results if r.status == "violation")
        warning_shifts = sum(1 for r in results if r.status == "warning")
        compliance_rate = (
            round_half_up((total_shifts - violation_shifts) / total_shifts * 100, 1)
            if total_shifts else 100.0
        )

        overview = ReportOverview(
            total_employees=len(summaries),
            total_shifts=total_shifts,
            compliant_shifts=total_shifts - violation_shifts - warning_shifts,
            warning_shifts=warning_shifts,
            violation_shifts=violation_shifts,
            compliance_rate=compliance_rate,
            total_planned_hours=round_half_up(sum(s.worked_hours for s in reported_shifts)),
            total_actual_hours=round_half_up(sum(
                r.total_hours for uid in user_ids if uid in employees_by_id
                for r in actual_by_user.get(uid, [])
            )),
            total_overtime_hours=round_half_up(sum(
                r.overtime_hours for uid in user_ids if uid in employees_by_id
                for r in actual_by_user.get(uid, [])
            )),
            total_violations=len(violation_details),
            total_warnings=len(details) - len(violation_details),
            late_publications=self.count_late_publications(rosters, config),
            total_labor_cost=engine.cost_calculator.calculate_total_cost(reported_shifts).total_cost,
        )

        return ComplianceReport(
            generated_at=self.clock().isoformat(),
            period_start=_as_date(start_date).isoformat(),
            period_end=_as_date(end_date).isoformat(),
            organization_id=organization.id,
            organization_name=organization.name,
            organization_number=organization.org_number,
            overview=overview,
            violations_by_type=violations_by_type,
            details=[d for _, d in details],
            employees=summaries,
        )

    @staticmethod
    def count_late_publications(rosters: list[RosterRecord], config: ComplianceConfig) -> int:
        """Published rosters that missed the publication deadline."""
        validator = PublishValidator(config)
        return sum(
            1 for roster in rosters
            if roster.published_at is not None
            and validator.validate_publish(roster.start_date, roster.published_at).is_late
        )


async def save_report(
    store: ReportStore,
    org_id: str,
    report: ComplianceReport,
    generated_by: Optional[str] = None,
) -> str:
    """Persist a report and return its id. Store errors propagate."""
    report_id = await store.save(org_id, report, generated_by)
    logger.info("Saved compliance report %s for %s", report_id, org_id)
    return report_id
