from .time import utc_now, start_of_day, hours_between, as_datetime
from .rounding import round_half_up

__all__ = [
    "utc_now",
    "start_of_day",
    "hours_between",
    "as_datetime",
    "round_half_up",
]
