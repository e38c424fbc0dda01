"""MongoDB adapters for the report generator and the audit trail."""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from compliance.audit import AuditEvent, DEFAULT_RETENTION_YEARS
from compliance.config import ComplianceConfig
from compliance.types import ShiftData
from reporting.repository import (
    ActualHoursRecord,
    EmployeeInfo,
    OrganizationInfo,
    RosterRecord,
)
from utils import as_datetime, utc_now

from .models import (
    ActualHoursDoc,
    AuditLogDoc,
    ComplianceReportDoc,
    EmployeeDoc,
    OrganizationDoc,
    RosterDoc,
    ShiftDoc,
)


def _day_range(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open [start 00:00, end+1 00:00) covering both dates."""
    return as_datetime(start), as_datetime(end) + timedelta(days=1)


def _to_shift_data(doc: ShiftDoc) -> ShiftData:
    return ShiftData(
        id=doc.shift_id,
        user_id=doc.user_id,
        start_time=doc.start_time,
        end_time=doc.end_time,
        break_minutes=doc.break_minutes,
        hourly_rate=doc.hourly_rate or 0.0,
    )


class MongoShiftRepository:
    """ShiftRepository backed by Beanie documents. Requires init_db()."""

    async def get_organization(self, org_id: str) -> Optional[OrganizationInfo]:
        doc = await OrganizationDoc.find_one({"org_id": org_id})
        if doc is None:
            return None
        return OrganizationInfo(
            id=doc.org_id,
            name=doc.name,
            org_number=doc.org_number,
            config=ComplianceConfig.from_doc(doc),
        )

    async def find_shifts_in_range(self, org_id: str, start: date, end: date) -> list[ShiftData]:
        range_start, range_end = _day_range(start, end)
        docs = await ShiftDoc.find({
            "organization_id": org_id,
            "start_time": {"$gte": range_start, "$lt": range_end},
        }).to_list()
        return [_to_shift_data(d) for d in docs]

    async def find_actual_hours_in_range(
        self, org_id: str, start: date, end: date
    ) -> list[ActualHoursRecord]:
        range_start, range_end = _day_range(start, end)
        docs = await ActualHoursDoc.find({
            "organization_id": org_id,
            "date": {"$gte": range_start, "$lt": range_end},
        }).to_list()
        return [
            ActualHoursRecord(
                id=str(d.id) if d.id is not None else None,
                user_id=d.user_id,
                date=d.date.date(),
                total_hours=d.total_hours,
                overtime_hours=d.overtime_hours,
            )
            for d in docs
        ]

    async def find_rosters_in_range(self, org_id: str, start: date, end: date) -> list[RosterRecord]:
        range_start, range_end = _day_range(start, end)
        docs = await RosterDoc.find({
            "organization_id": org_id,
            "start_date": {"$gte": range_start},
            "end_date": {"$lt": range_end},
        }).to_list()
        return [
            RosterRecord(
                id=d.roster_id,
                start_date=d.start_date.date(),
                end_date=d.end_date.date(),
                published_at=d.published_at,
            )
            for d in docs
        ]

    async def find_employees(self, org_id: str, user_ids: list[str]) -> list[EmployeeInfo]:
        docs = await EmployeeDoc.find({
            "organization_id": org_id,
            "user_id": {"$in": list(user_ids)},
        }).to_list()
        return [
            EmployeeInfo(
                user_id=d.user_id,
                first_name=d.first_name,
                last_name=d.last_name,
                employee_number=d.employee_number,
                department=d.department,
            )
            for d in docs
        ]


class MongoReportStore:
    """Stores reports with a retention date stamped at save time."""

    def __init__(
        self,
        retention_years: int = DEFAULT_RETENTION_YEARS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.retention_years = retention_years
        self.clock = clock

    async def save(self, org_id: str, report, generated_by: Optional[str]) -> str:
        generated_at = self.clock()
        doc = ComplianceReportDoc(
            organization_id=org_id,
            start_date=as_datetime(date.fromisoformat(report.period_start)),
            end_date=as_datetime(date.fromisoformat(report.period_end)),
            generated_by=generated_by,
            generated_at=generated_at,
            retain_until=generated_at + relativedelta(years=self.retention_years),
            data=report.model_dump(mode="json"),
        )
        await doc.insert()
        return str(doc.id)


class MongoAuditSink:
    async def write(self, event: AuditEvent) -> None:
        doc = AuditLogDoc(
            action=event.action,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            user_id=event.user_id,
            user_email=event.user_email,
            roster_id=event.roster_id,
            details=event.details,
            occurred_at=event.occurred_at or utc_now(),
            retain_until=event.retain_until,
        )
        await doc.insert()
