"""Labor law compliance and cost engine for shift rosters."""

from .errors import (
    ComplianceError,
    InvalidShiftError,
    OrganizationNotFoundError,
    UnknownViolationTypeError,
)
from .config import ComplianceConfig, DEFAULT_COMPLIANCE_CONFIG, get_compliance_config
from .types import (
    ComplianceWarning,
    CostVariance,
    HoursScope,
    LaborCost,
    Period,
    PublishValidation,
    RestPeriodViolation,
    RestScope,
    ShiftData,
    Violation,
    VIOLATION_CODES,
    ViolationType,
    WarningCode,
    WeeklyCostEstimate,
    WorkingHoursViolation,
    violation_from_dict,
)
from .validators import (
    BaseValidator,
    PublishValidator,
    RestPeriodValidator,
    WorkingHoursValidator,
)
from .cost_calculator import LaborCostCalculator, OVERTIME_MULTIPLIER
from .engine import ComplianceEngine, ShiftCheckResult
from .visual import QuickFix, VisualComplianceIndicator
from .audit import AuditEvent, AuditLogger, AuditSink, InMemoryAuditSink

__all__ = [
    "ComplianceError",
    "InvalidShiftError",
    "OrganizationNotFoundError",
    "UnknownViolationTypeError",
    "ComplianceConfig",
    "DEFAULT_COMPLIANCE_CONFIG",
    "get_compliance_config",
    "ComplianceWarning",
    "CostVariance",
    "HoursScope",
    "LaborCost",
    "Period",
    "PublishValidation",
    "RestPeriodViolation",
    "RestScope",
    "ShiftData",
    "Violation",
    "VIOLATION_CODES",
    "ViolationType",
    "WarningCode",
    "WeeklyCostEstimate",
    "WorkingHoursViolation",
    "violation_from_dict",
    "BaseValidator",
    "PublishValidator",
    "RestPeriodValidator",
    "WorkingHoursValidator",
    "LaborCostCalculator",
    "OVERTIME_MULTIPLIER",
    "ComplianceEngine",
    "ShiftCheckResult",
    "QuickFix",
    "VisualComplianceIndicator",
    "AuditEvent",
    "AuditLogger",
    "AuditSink",
    "InMemoryAuditSink",
]
