import pytest
from datetime import date, datetime, timedelta, timezone

from compliance.config import ComplianceConfig
from compliance.types import ShiftData
from reporting.repository import (
    ActualHoursRecord,
    EmployeeInfo,
    InMemoryShiftRepository,
    OrganizationInfo,
    RosterRecord,
)


# 2024-01-15 is a Monday
MONDAY = date(2024, 1, 15)
FIXED_NOW = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    """Statutory defaults."""
    return ComplianceConfig()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_shift():
    """Factory to create ShiftData from a day offset and HH:MM strings."""
    def _make_shift(
        day: int | date,
        start: str,
        end: str,
        user_id: str = "u1",
        break_minutes: int = 0,
        hourly_rate: float = 0.0,
        id: str = None,
    ) -> ShiftData:
        base = MONDAY + timedelta(days=day) if isinstance(day, int) else day
        start_h, start_m = (int(p) for p in start.split(":"))
        end_h, end_m = (int(p) for p in end.split(":"))
        start_time = datetime(base.year, base.month, base.day, start_h, start_m, tzinfo=timezone.utc)
        end_time = datetime(base.year, base.month, base.day, end_h, end_m, tzinfo=timezone.utc)
        # End before start means the shift runs past midnight
        if end_time <= start_time:
            end_time += timedelta(days=1)
        return ShiftData(
            id=id,
            user_id=user_id,
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
            hourly_rate=hourly_rate,
        )
    return _make_shift


@pytest.fixture
def workweek(make_shift):
    """Mon-Fri 08:00-16:00 for one employee, weekend off."""
    return [
        make_shift(day, "08:00", "16:00", id=f"s{day}", hourly_rate=200.0)
        for day in range(5)
    ]


@pytest.fixture
def organization():
    return OrganizationInfo(id="org-1", name="Kaffebaren AS", org_number="912345678")


@pytest.fixture
def employees():
    return [
        EmployeeInfo(user_id="u1", first_name="Kari", last_name="Nordmann",
                     employee_number="E001", department="Bar"),
        EmployeeInfo(user_id="u2", first_name="Ola", last_name="Hansen",
                     employee_number="E002", department="Kitchen"),
    ]


@pytest.fixture
def report_dataset(make_shift, organization, employees):
    """Two employees over one week: Kari works a clean week, Ola has a short turnaround."""
    shifts = [
        make_shift(day, "08:00", "16:00", user_id="u1", id=f"k{day}", hourly_rate=200.0)
        for day in range(5)
    ] + [
        make_shift(0, "14:00", "22:00", user_id="u2", id="o0", hourly_rate=180.0),
        make_shift(1, "06:00", "14:00", user_id="u2", id="o1", hourly_rate=180.0),
    ]
    actual_hours = [
        ActualHoursRecord(user_id="u1", date=MONDAY, total_hours=8.25, overtime_hours=0.0, id="a1"),
        ActualHoursRecord(user_id="u2", date=MONDAY, total_hours=8.0, overtime_hours=0.0, id="a2"),
        ActualHoursRecord(user_id="u2", date=MONDAY + timedelta(days=1), total_hours=9.5,
                          overtime_hours=0.5, id="a3"),
    ]
    rosters = [
        RosterRecord(id="r1", start_date=MONDAY, end_date=MONDAY + timedelta(days=6),
                     published_at=datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc)),
    ]
    return {
        "organization": organization,
        "shifts": shifts,
        "actual_hours": actual_hours,
        "rosters": rosters,
        "employees": employees,
    }


@pytest.fixture
def repository(report_dataset):
    org_id = report_dataset["organization"].id
    return InMemoryShiftRepository(
        organizations=[report_dataset["organization"]],
        shifts={org_id: report_dataset["shifts"]},
        actual_hours={org_id: report_dataset["actual_hours"]},
        rosters={org_id: report_dataset["rosters"]},
        employees={org_id: report_dataset["employees"]},
    )
