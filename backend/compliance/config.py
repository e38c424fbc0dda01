"""Statutory compliance parameters.

Defaults follow the Norwegian Working Environment Act (Arbeidsmiljøloven):
§ 10-4 working hours, § 10-6 overtime, § 10-8 rest periods and the 14-day
roster publication rule of § 10-2.
"""

import os
from dataclasses import asdict, dataclass, fields

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ComplianceConfig:
    """Immutable set of statutory limits in force for one evaluation."""
    # Normal working hours (§ 10-4)
    max_daily_hours: float = 9.0
    max_weekly_hours: float = 40.0

    # Rest periods (§ 10-8)
    min_daily_rest: float = 11.0
    min_weekly_rest: float = 35.0

    # Roster publication (§ 10-2)
    publish_deadline_days: int = 14

    # Overtime ceilings (§ 10-6)
    max_overtime_per_week: float = 10.0
    max_overtime_per_4_weeks: float = 25.0
    max_overtime_per_year: float = 200.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} must be non-negative, got {value}")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_doc(cls, doc) -> "ComplianceConfig":
        """Create from an OrganizationDoc, keeping defaults for unset values."""
        overrides = {
            f.name: getattr(doc, f.name)
            for f in fields(cls)
            if getattr(doc, f.name, None) is not None
        }
        return cls(**overrides)


DEFAULT_COMPLIANCE_CONFIG = ComplianceConfig()

_ENV_VARS = {
    "max_daily_hours": "MAX_DAILY_WORK_HOURS",
    "max_weekly_hours": "MAX_WEEKLY_WORK_HOURS",
    "min_daily_rest": "MIN_DAILY_REST_HOURS",
    "min_weekly_rest": "MIN_WEEKLY_REST_HOURS",
    "publish_deadline_days": "ROSTER_PUBLISH_DEADLINE_DAYS",
    "max_overtime_per_week": "MAX_OVERTIME_PER_WEEK",
    "max_overtime_per_4_weeks": "MAX_OVERTIME_PER_4_WEEKS",
    "max_overtime_per_year": "MAX_OVERTIME_PER_YEAR",
}


def get_compliance_config() -> ComplianceConfig:
    """Read the compliance config from the environment, falling back to defaults."""
    values = {}
    for field_name, env_var in _ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is None or raw == "":
            continue
        try:
            if field_name == "publish_deadline_days":
                values[field_name] = int(raw)
            else:
                values[field_name] = float(raw)
        except ValueError:
            raise ValueError(f"{env_var} must be numeric, got {raw!r}")
    return ComplianceConfig(**values)
