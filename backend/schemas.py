from typing import Literal

from pydantic import BaseModel, field_validator

from compliance.types import VIOLATION_CODES, WarningCode

REPORT_CODES = VIOLATION_CODES + tuple(w.value for w in WarningCode)


class ShiftSummary(BaseModel):
    """One planned shift with its evaluation."""
    shift_id: str | None = None
    date: str  # ISO date string: "2025-01-20"
    start_time: str  # "HH:MM"
    end_time: str
    planned_hours: float
    actual_hours: float | None = None
    is_overtime: bool = False
    status: str  # "compliant", "warning", "violation"
    violations: list[str] = []


class ViolationDetail(BaseModel):
    """A single violation or warning row, flat for export."""
    date: str  # ISO date string
    user_id: str
    employee_name: str
    shift_id: str | None = None
    code: str  # "REST_PERIOD_DAILY", "WORKING_HOURS_WEEKLY", "NEAR_DAILY_LIMIT", ...
    description: str
    severity: Literal["WARNING", "VIOLATION"]
    limit: float
    actual: float

    @field_validator("code")
    @classmethod
    def known_code(cls, value: str) -> str:
        if value not in REPORT_CODES:
            raise ValueError(f"Unknown violation type: {value!r}")
        return value


class EmployeeWorkSummary(BaseModel):
    user_id: str
    employee_name: str
    employee_number: str | None = None
    department: str | None = None
    total_planned_hours: float
    total_actual_hours: float
    total_overtime_hours: float
    violations: list[ViolationDetail] = []
    shifts: list[ShiftSummary] = []


class ReportOverview(BaseModel):
    total_employees: int
    total_shifts: int
    compliant_shifts: int
    warning_shifts: int
    violation_shifts: int
    compliance_rate: float  # percent of shifts without violations, 1 decimal
    total_planned_hours: float
    total_actual_hours: float
    total_overtime_hours: float
    total_violations: int
    total_warnings: int
    late_publications: int
    total_labor_cost: float


class ComplianceReport(BaseModel):
    """Working time report for labour inspection, immutable once produced."""
    generated_at: str
    period_start: str  # ISO date string: "2025-01-01"
    period_end: str
    organization_id: str
    organization_name: str
    organization_number: str | None = None
    overview: ReportOverview
    violations_by_type: dict[str, int]
    details: list[ViolationDetail] = []
    employees: list[EmployeeWorkSummary] = []

    model_config = {"frozen": True}
