"""Timezone-aware clocks for the jobs. Jobs take a clock so tests can pin "now"."""
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def zoned_clock(tz_name: str) -> Clock:
    """Clock returning the current time in tz_name, independent of the host timezone."""
    tz = ZoneInfo(tz_name)

    def now() -> datetime:
        return datetime.now(tz)

    return now


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns `moment` (must be timezone-aware)."""
    if moment.tzinfo is None:
        raise ValueError("fixed_clock needs a timezone-aware datetime")
    return lambda: moment
