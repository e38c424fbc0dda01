"""Audit trail for compliance decisions.

Audit entries must be retained for at least two years. Writing them is
fire-and-forget: a failing sink is logged and never breaks the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Protocol

from dateutil.relativedelta import relativedelta

from utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_YEARS = 2


@dataclass
class AuditEvent:
    action: str  # "SHIFT_VALIDATED", "ROSTER_PUBLISHED", "REPORT_GENERATED", ...
    entity_type: str
    entity_id: str
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    details: dict = field(default_factory=dict)
    roster_id: Optional[str] = None
    occurred_at: Optional[datetime] = None
    retain_until: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "user_email": self.user_email,
            "details": self.details,
            "roster_id": self.roster_id,
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "retain_until": self.retain_until.isoformat() if self.retain_until else None,
        }


class AuditSink(Protocol):
    async def write(self, event: AuditEvent) -> None: ...


class InMemoryAuditSink:
    """Keeps events in a list; used in tests and local runs."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def write(self, event: AuditEvent) -> None:
        self.events.append(event)


class AuditLogger:
    """Stamps retention on audit events and writes them to a sink."""

    def __init__(
        self,
        sink: AuditSink,
        retention_years: int = DEFAULT_RETENTION_YEARS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.sink = sink
        self.retention_years = retention_years
        self.clock = clock

    async def record(self, event: AuditEvent) -> None:
        """Write an event; sink errors are logged and swallowed."""
        try:
            occurred_at = event.occurred_at or self.clock()
            event.occurred_at = occurred_at
            event.retain_until = occurred_at + relativedelta(years=self.retention_years)
            await self.sink.write(event)
        except Exception:
            logger.exception(
                "Failed to write audit log entry %s for %s %s",
                event.action, event.entity_type, event.entity_id,
            )

    async def log_shift_validated(
        self,
        shift_id: str,
        assigned_to_user_id: str,
        violations: list[str],
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
        roster_id: Optional[str] = None,
    ) -> None:
        await self.record(AuditEvent(
            action="SHIFT_VALIDATED",
            entity_type="Shift",
            entity_id=shift_id,
            user_id=user_id,
            user_email=user_email,
            roster_id=roster_id,
            details={
                "assigned_to_user_id": assigned_to_user_id,
                "violations": violations,
                "has_violations": len(violations) > 0,
            },
        ))

    async def log_roster_published(
        self,
        roster_id: str,
        is_late: bool,
        days_until_start: int,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> None:
        await self.record(AuditEvent(
            action="ROSTER_PUBLISHED",
            entity_type="Roster",
            entity_id=roster_id,
            user_id=user_id,
            user_email=user_email,
            roster_id=roster_id,
            details={
                "is_late": is_late,
                "days_until_start": days_until_start,
                "compliance_status": "VIOLATION" if is_late else "COMPLIANT",
            },
        ))

    async def log_report_generated(
        self,
        organization_id: str,
        period_start: str,
        period_end: str,
        total_violations: int,
        user_id: Optional[str] = None,
    ) -> None:
        await self.record(AuditEvent(
            action="REPORT_GENERATED",
            entity_type="ComplianceReport",
            entity_id=f"{organization_id}:{period_start}:{period_end}",
            user_id=user_id,
            details={
                "organization_id": organization_id,
                "period_start": period_start,
                "period_end": period_end,
                "total_violations": total_violations,
            },
        ))
