from .database import init_db, close_db, DOCUMENT_MODELS
from .models import (
    OrganizationDoc,
    EmployeeDoc,
    RosterDoc,
    ShiftDoc,
    ActualHoursDoc,
    ComplianceReportDoc,
    AuditLogDoc,
)
from .repository import MongoShiftRepository, MongoReportStore, MongoAuditSink

__all__ = [
    "init_db",
    "DOCUMENT_MODELS",
    "close_db",
    "OrganizationDoc",
    "EmployeeDoc",
    "RosterDoc",
    "ShiftDoc",
    "ActualHoursDoc",
    "ComplianceReportDoc",
    "AuditLogDoc",
    "MongoShiftRepository",
    "MongoReportStore",
    "MongoAuditSink",
]
