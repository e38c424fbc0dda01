"""Collaborator interfaces for report generation, plus in-memory fakes.

The report generator only talks to these protocols. Production adapters
backed by MongoDB live in ``db.repository``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol

from compliance.config import ComplianceConfig
from compliance.types import ShiftData


@dataclass(frozen=True)
class OrganizationInfo:
    id: str
    name: str
    org_number: Optional[str] = None
    config: Optional[ComplianceConfig] = None


@dataclass(frozen=True)
class EmployeeInfo:
    user_id: str
    first_name: str
    last_name: str
    employee_number: Optional[str] = None
    department: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class ActualHoursRecord:
    """Clocked hours for one employee on one day."""
    user_id: str
    date: date
    total_hours: float
    overtime_hours: float = 0.0
    id: Optional[str] = None


@dataclass(frozen=True)
class RosterRecord:
    id: str
    start_date: date
    end_date: date
    published_at: Optional[datetime] = None


class ShiftRepository(Protocol):
    async def get_organization(self, org_id: str) -> Optional[OrganizationInfo]: ...

    async def find_shifts_in_range(self, org_id: str, start: date, end: date) -> list[ShiftData]: ...

    async def find_actual_hours_in_range(
        self, org_id: str, start: date, end: date
    ) -> list[ActualHoursRecord]: ...

    async def find_rosters_in_range(self, org_id: str, start: date, end: date) -> list[RosterRecord]: ...

    async def find_employees(self, org_id: str, user_ids: list[str]) -> list[EmployeeInfo]: ...


class ReportStore(Protocol):
    async def save(self, org_id: str, report, generated_by: Optional[str]) -> str: ...


class InMemoryShiftRepository:
    """Dict-backed repository keyed by organization id."""

    def __init__(
        self,
        organizations: Optional[list[OrganizationInfo]] = None,
        shifts: Optional[dict[str, list[ShiftData]]] = None,
        actual_hours: Optional[dict[str, list[ActualHoursRecord]]] = None,
        rosters: Optional[dict[str, list[RosterRecord]]] = None,
        employees: Optional[dict[str, list[EmployeeInfo]]] = None,
    ):
        self.organizations = {o.id: o for o in organizations or []}
        self.shifts = shifts or {}
        self.actual_hours = actual_hours or {}
        self.rosters = rosters or {}
        self.employees = employees or {}

    async def get_organization(self, org_id: str) -> Optional[OrganizationInfo]:
        return self.organizations.get(org_id)

    async def find_shifts_in_range(self, org_id: str, start: date, end: date) -> list[ShiftData]:
        return [
            s for s in self.shifts.get(org_id, [])
            if start <= s.start_time.date() <= end
        ]

    async def find_actual_hours_in_range(
        self, org_id: str, start: date, end: date
    ) -> list[ActualHoursRecord]:
        return [r for r in self.actual_hours.get(org_id, []) if start <= r.date <= end]

    async def find_rosters_in_range(self, org_id: str, start: date, end: date) -> list[RosterRecord]:
        return [
            r for r in self.rosters.get(org_id, [])
            if r.start_date >= start and r.end_date <= end
        ]

    async def find_employees(self, org_id: str, user_ids: list[str]) -> list[EmployeeInfo]:
        wanted = set(user_ids)
        return [e for e in self.employees.get(org_id, []) if e.user_id in wanted]


class InMemoryReportStore:
    def __init__(self):
        self.reports: dict[str, dict] = {}

    async def save(self, org_id: str, report, generated_by: Optional[str]) -> str:
        report_id = f"report-{len(self.reports) + 1}"
        self.reports[report_id] = {
            "organization_id": org_id,
            "report": report,
            "generated_by": generated_by,
        }
        return report_id
