"""Type definitions for the compliance module."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from dateutil import parser

from .errors import InvalidShiftError, UnknownViolationTypeError


class ViolationType(str, Enum):
    """Discriminant shared by all violation shapes."""
    REST_PERIOD = "REST_PERIOD"
    WORKING_HOURS = "WORKING_HOURS"


class RestScope(str, Enum):
    """Which rest requirement was breached."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"


class HoursScope(str, Enum):
    """Which working-hours limit was exceeded."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    OVERTIME_WEEKLY = "OVERTIME_WEEKLY"
    OVERTIME_4WEEKS = "OVERTIME_4WEEKS"
    OVERTIME_YEARLY = "OVERTIME_YEARLY"


def _parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return parser.isoparse(value)


@dataclass(frozen=True)
class ShiftData:
    """A scheduled work interval for one employee."""
    user_id: str
    start_time: datetime
    end_time: datetime
    break_minutes: int = 0
    hourly_rate: float = 0.0
    id: Optional[str] = None

    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise InvalidShiftError(
                f"Shift {self.id or '<new>'} ends at {self.end_time.isoformat()}, "
                f"not after its start {self.start_time.isoformat()}"
            )
        if isinstance(self.break_minutes, bool) or not isinstance(self.break_minutes, int):
            raise InvalidShiftError(f"break_minutes must be an integer, got {self.break_minutes!r}")
        if self.break_minutes < 0:
            raise InvalidShiftError(f"break_minutes must be non-negative, got {self.break_minutes}")
        if self.break_minutes * 60 > (self.end_time - self.start_time).total_seconds():
            raise InvalidShiftError(
                f"Break of {self.break_minutes} min is longer than the shift itself"
            )
        if self.hourly_rate is None or self.hourly_rate < 0:
            raise InvalidShiftError(f"hourly_rate must be non-negative, got {self.hourly_rate!r}")

    @property
    def duration_hours(self) -> float:
        """Elapsed time between start and end, breaks included."""
        return (self.end_time - self.start_time).total_seconds() / 3600

    @property
    def worked_hours(self) -> float:
        """Paid time: duration minus the unpaid break."""
        return self.duration_hours - self.break_minutes / 60

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftData":
        """Create from a dict with ISO-8601 timestamps."""
        return cls(
            user_id=data["user_id"],
            start_time=_parse_datetime(data["start_time"]),
            end_time=_parse_datetime(data["end_time"]),
            break_minutes=data.get("break_minutes", 0),
            hourly_rate=data.get("hourly_rate") or 0.0,
            id=data.get("id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "break_minutes": self.break_minutes,
            "hourly_rate": self.hourly_rate,
        }


@dataclass(frozen=True)
class Period:
    """A half-open time interval affected by a violation."""
    start: datetime
    end: datetime

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class RestPeriodViolation:
    """Not enough continuous rest around a shift or within a week."""
    scope: RestScope
    required_rest_hours: float
    actual_rest_hours: float
    affected_shift_ids: tuple[str, ...] = ()
    message: str = ""

    type = ViolationType.REST_PERIOD

    @property
    def code(self) -> str:
        return f"{self.type.value}_{self.scope.value}"

    @property
    def shortfall_hours(self) -> float:
        return self.required_rest_hours - self.actual_rest_hours

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "scope": self.scope.value,
            "required_rest_hours": self.required_rest_hours,
            "actual_rest_hours": self.actual_rest_hours,
            "affected_shift_ids": list(self.affected_shift_ids),
            "message": self.message,
        }


@dataclass(frozen=True)
class WorkingHoursViolation:
    """Working time above a daily, weekly or overtime ceiling."""
    scope: HoursScope
    limit_hours: float
    actual_hours: float
    affected_period: Period
    message: str = ""

    type = ViolationType.WORKING_HOURS

    @property
    def code(self) -> str:
        return f"{self.type.value}_{self.scope.value}"

    @property
    def excess_hours(self) -> float:
        return self.actual_hours - self.limit_hours

    @property
    def is_overtime(self) -> bool:
        return self.scope.value.startswith("OVERTIME")

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "scope": self.scope.value,
            "limit_hours": self.limit_hours,
            "actual_hours": self.actual_hours,
            "affected_period": self.affected_period.to_dict(),
            "message": self.message,
        }


Violation = Union[RestPeriodViolation, WorkingHoursViolation]

VIOLATION_CODES: tuple[str, ...] = tuple(
    [f"{ViolationType.REST_PERIOD.value}_{s.value}" for s in RestScope]
    + [f"{ViolationType.WORKING_HOURS.value}_{s.value}" for s in HoursScope]
)


def violation_from_dict(data: dict) -> Violation:
    """Rebuild a violation from its ``to_dict()`` form."""
    kind = data.get("type")
    if kind == ViolationType.REST_PERIOD.value:
        return RestPeriodViolation(
            scope=RestScope(data["scope"]),
            required_rest_hours=data["required_rest_hours"],
            actual_rest_hours=data["actual_rest_hours"],
            affected_shift_ids=tuple(data.get("affected_shift_ids", [])),
            message=data.get("message", ""),
        )
    if kind == ViolationType.WORKING_HOURS.value:
        period = data["affected_period"]
        return WorkingHoursViolation(
            scope=HoursScope(data["scope"]),
            limit_hours=data["limit_hours"],
            actual_hours=data["actual_hours"],
            affected_period=Period(
                start=_parse_datetime(period["start"]),
                end=_parse_datetime(period["end"]),
            ),
            message=data.get("message", ""),
        )
    raise UnknownViolationTypeError(f"Unknown violation type: {kind!r}")


@dataclass(frozen=True)
class LaborCost:
    """Regular/overtime split of worked hours and their cost."""
    hourly_rate: float
    total_hours: float
    regular_hours: float
    overtime_hours: float
    regular_cost: float
    overtime_cost: float
    total_cost: float
    overtime_multiplier: float

    def to_dict(self) -> dict:
        return {
            "hourly_rate": self.hourly_rate,
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "regular_cost": self.regular_cost,
            "overtime_cost": self.overtime_cost,
            "total_cost": self.total_cost,
            "overtime_multiplier": self.overtime_multiplier,
        }


@dataclass(frozen=True)
class CostVariance:
    """Budget vs actual labor cost."""
    variance: float
    variance_percentage: float
    is_over_budget: bool

    def to_dict(self) -> dict:
        return {
            "variance": self.variance,
            "variance_percentage": self.variance_percentage,
            "is_over_budget": self.is_over_budget,
        }


@dataclass(frozen=True)
class WeeklyCostEstimate:
    estimated_cost: float
    regular_cost: float
    overtime_cost: float
    total_hours: float

    def to_dict(self) -> dict:
        return {
            "estimated_cost": self.estimated_cost,
            "breakdown": {
                "regular_cost": self.regular_cost,
                "overtime_cost": self.overtime_cost,
                "total_hours": self.total_hours,
            },
        }


@dataclass
class PublishValidation:
    """Outcome of checking a roster publication against the deadline."""
    can_publish: bool
    days_until_start: int
    is_late: bool
    publish_deadline: date
    deadline_days: int
    warnings: list[str] = field(default_factory=list)

    @property
    def days_late(self) -> int:
        return max(0, self.deadline_days - self.days_until_start)

    def to_dict(self) -> dict:
        return {
            "can_publish": self.can_publish,
            "days_until_start": self.days_until_start,
            "is_late": self.is_late,
            "publish_deadline": self.publish_deadline.isoformat(),
            "deadline_days": self.deadline_days,
            "warnings": list(self.warnings),
        }


class WarningCode(str, Enum):
    """Near-limit conditions that are surfaced but not unlawful."""
    NEAR_DAILY_LIMIT = "NEAR_DAILY_LIMIT"
    NEAR_WEEKLY_LIMIT = "NEAR_WEEKLY_LIMIT"


@dataclass(frozen=True)
class ComplianceWarning:
    code: WarningCode
    limit_hours: float
    actual_hours: float
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "limit_hours": self.limit_hours,
            "actual_hours": self.actual_hours,
            "message": self.message,
        }
