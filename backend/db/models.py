from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel

from utils import utc_now


class OrganizationDoc(Document):
    org_id: Indexed(str, unique=True)
    name: str
    org_number: Optional[str] = None  # Organisasjonsnummer, shown on reports
    # Compliance overrides, None keeps the statutory default
    max_daily_hours: Optional[float] = None
    max_weekly_hours: Optional[float] = None
    min_daily_rest: Optional[float] = None
    min_weekly_rest: Optional[float] = None
    publish_deadline_days: Optional[int] = None
    max_overtime_per_week: Optional[float] = None
    max_overtime_per_4_weeks: Optional[float] = None
    max_overtime_per_year: Optional[float] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "organizations"


class EmployeeDoc(Document):
    user_id: Indexed(str, unique=True)
    organization_id: Indexed(str)
    first_name: str
    last_name: str
    employee_number: Optional[str] = None
    department: Optional[str] = None
    hourly_rate: Optional[float] = None
    disabled: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "employees"


class RosterDoc(Document):
    roster_id: Indexed(str, unique=True)
    organization_id: str
    start_date: datetime
    end_date: datetime
    status: str = "DRAFT"  # "DRAFT", "PUBLISHED", "ARCHIVED"
    published_at: Optional[datetime] = None
    is_late_publication: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "rosters"
        indexes = [
            IndexModel([("organization_id", 1), ("start_date", 1), ("end_date", 1)]),
        ]


class ShiftDoc(Document):
    """A planned shift. Compliance flags are a cache of the last evaluation."""
    shift_id: Indexed(str, unique=True)
    organization_id: str
    roster_id: Optional[str] = None
    user_id: str
    start_time: datetime
    end_time: datetime
    break_minutes: int = 0
    hourly_rate: Optional[float] = None
    violates_rest_period: bool = False
    violates_daily_limit: bool = False
    violates_weekly_limit: bool = False
    is_overtime: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "shifts"
        indexes = [
            IndexModel([("organization_id", 1), ("start_time", 1)]),
            IndexModel([("user_id", 1), ("start_time", 1)]),
        ]


class ActualHoursDoc(Document):
    """Clocked hours for one employee on one day."""
    organization_id: str
    user_id: str
    date: datetime  # Midnight of the worked day
    total_hours: float
    overtime_hours: float = 0.0
    created_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "actual_hours"
        indexes = [
            IndexModel([("organization_id", 1), ("date", 1)]),
            IndexModel([("user_id", 1), ("date", 1)]),
        ]


class ComplianceReportDoc(Document):
    """
    Stored compliance report. Reports must be kept for at least two years;
    retain_until is stamped at save time.
    """
    organization_id: str
    report_type: str = "ARBEIDSTILSYNET"
    start_date: datetime
    end_date: datetime
    generated_by: Optional[str] = None
    generated_at: datetime = Field(default_factory=utc_now)
    retain_until: datetime
    data: dict = {}  # Full report as exported to JSON

    class Settings:
        name = "compliance_reports"
        indexes = [
            IndexModel([("organization_id", 1), ("generated_at", -1)]),
        ]


class AuditLogDoc(Document):
    action: str  # "SHIFT_VALIDATED", "ROSTER_PUBLISHED", "REPORT_GENERATED", ...
    entity_type: str
    entity_id: str
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    roster_id: Optional[str] = None
    details: dict = {}
    occurred_at: datetime = Field(default_factory=utc_now)
    retain_until: Optional[datetime] = None

    class Settings:
        name = "audit_logs"
        indexes = [
            IndexModel([("entity_type", 1), ("entity_id", 1)]),
            IndexModel([("occurred_at", -1)]),
            IndexModel([("retain_until", 1)]),
        ]
