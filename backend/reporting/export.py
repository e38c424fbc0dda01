"""JSON and CSV renderings of a ComplianceReport."""

import pandas as pd

from schemas import ComplianceReport

CSV_COLUMNS = [
    "Employee Name",
    "Employee Number",
    "Department",
    "Date",
    "Start Time",
    "End Time",
    "Planned Hours",
    "Actual Hours",
    "Overtime",
    "Violations",
]


def export_as_json(report: ComplianceReport) -> str:
    """Full-fidelity export; field order is fixed by the schema."""
    return report.model_dump_json(indent=2)


def load_report_json(text: str) -> ComplianceReport:
    return ComplianceReport.model_validate_json(text)


def report_to_dataframe(report: ComplianceReport) -> pd.DataFrame:
    """One row per shift, employees in report order."""
    rows = []
    for employee in report.employees:
        for shift in employee.shifts:
            rows.append([
                employee.employee_name,
                employee.employee_number or "",
                employee.department or "",
                shift.date,
                shift.start_time,
                shift.end_time,
                shift.planned_hours,
                shift.actual_hours,
                "Yes" if shift.is_overtime else "No",
                "; ".join(shift.violations),
            ])
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_as_csv(report: ComplianceReport) -> str:
    df = report_to_dataframe(report)
    return df.to_csv(index=False, lineterminator="\n")
