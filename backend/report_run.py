import argparse
import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from dateutil import parser

from compliance.audit import AuditLogger
from compliance.config import get_compliance_config
from db import init_db, close_db, MongoAuditSink, MongoReportStore, MongoShiftRepository
from reporting import ComplianceReportGenerator, export_as_csv, export_as_json, save_report


logger = logging.getLogger(__name__)

_logging_configured = False


def setup_logging():
    global _logging_configured
    if _logging_configured:
        return

    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(logging.DEBUG)

        console = logging.StreamHandler()
        console.setLevel(logging.INFO)
        console.setFormatter(logging.Formatter('%(name)-12s: %(levelname)-8s %(message)s'))
        root.addHandler(console)

    _logging_configured = True


def report_basename(org_id: str, start_date: date, end_date: date) -> str:
    return f"{org_id}_{start_date.isoformat()}_{end_date.isoformat()}"


async def main(
    org_id: str,
    start_date: date,
    end_date: date,
    output_dir: str = ".",
    save: bool = False,
    generated_by: Optional[str] = None,
) -> list[Path]:
    """
    Generate a compliance report and write it out as JSON and CSV.

    Args:
        org_id: Organization to report on
        start_date: First day of the reporting period
        end_date: Last day of the reporting period
        output_dir: Directory the export files are written to
        save: Also persist the report in the compliance_reports collection
        generated_by: User id recorded on the audit entry and stored report

    Returns:
        Paths of the written files
    """
    setup_logging()

    await init_db()
    try:
        generator = ComplianceReportGenerator(
            MongoShiftRepository(),
            config=get_compliance_config(),
            audit_logger=AuditLogger(MongoAuditSink()),
        )
        report = await generator.generate_report(org_id, start_date, end_date, generated_by)

        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        basename = report_basename(org_id, start_date, end_date)
        json_path = out / f"{basename}.json"
        csv_path = out / f"{basename}.csv"
        json_path.write_text(export_as_json(report), encoding="utf-8")
        csv_path.write_text(export_as_csv(report), encoding="utf-8")
        logger.info(f"Wrote {json_path} and {csv_path}")

        if save:
            report_id = await save_report(MongoReportStore(), org_id, report, generated_by)
            logger.info(f"Stored report as {report_id}")
    finally:
        await close_db()

    return [json_path, csv_path]


def cli(argv: Optional[list[str]] = None):
    arg_parser = argparse.ArgumentParser(description="Generate a working time compliance report")
    arg_parser.add_argument("org_id", help="Organization id")
    arg_parser.add_argument("start_date", help="First day of the period, e.g. 2025-01-01")
    arg_parser.add_argument("end_date", help="Last day of the period, e.g. 2025-01-31")
    arg_parser.add_argument("--output-dir", default=".", help="Where to write the JSON and CSV files")
    arg_parser.add_argument("--save", action="store_true", help="Persist the report in MongoDB")
    arg_parser.add_argument("--generated-by", default=None, help="User id recorded on the report")
    args = arg_parser.parse_args(argv)

    asyncio.run(main(
        args.org_id,
        parser.parse(args.start_date).date(),
        parser.parse(args.end_date).date(),
        output_dir=args.output_dir,
        save=args.save,
        generated_by=args.generated_by,
    ))


if __name__ == '__main__':
    cli()
