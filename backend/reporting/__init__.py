"""Compliance reports for labour inspections."""

from .repository import (
    ActualHoursRecord,
    EmployeeInfo,
    InMemoryReportStore,
    InMemoryShiftRepository,
    OrganizationInfo,
    ReportStore,
    RosterRecord,
    ShiftRepository,
)
from .generator import ComplianceReportGenerator, save_report
from .export import export_as_csv, export_as_json, load_report_json

__all__ = [
    "ActualHoursRecord",
    "EmployeeInfo",
    "InMemoryReportStore",
    "InMemoryShiftRepository",
    "OrganizationInfo",
    "ReportStore",
    "RosterRecord",
    "ShiftRepository",
    "ComplianceReportGenerator",
    "save_report",
    "export_as_csv",
    "export_as_json",
    "load_report_json",
]
