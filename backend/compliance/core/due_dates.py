"""
GST due-date rules: which returns fall due on which day, per filing frequency.

Filing frequency comes from the vendor's declared turnover bracket. The rule table is
process-wide constant data; nothing mutates it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

MONTHLY = "monthly"
QUARTERLY = "quarterly"
ANNUAL = "annual"

# Quarterly returns are due in the month after each quarter closes
QUARTER_FILING_MONTHS = (1, 4, 7, 10)


@dataclass(frozen=True)
class DueDateRule:
    """One due date. month: None = every month, int = that month only, tuple = any of those months."""

    day: int
    month: int | tuple[int, ...] | None
    description: str

    def matches(self, today: date) -> bool:
        if self.day != today.day:
            return False
        if self.month is None:
            return True
        if isinstance(self.month, tuple):
            return today.month in self.month
        return self.month == today.month


GST_DUE_DATES: dict[str, tuple[DueDateRule, ...]] = {
    MONTHLY: (
        DueDateRule(20, None, "Monthly GST Return (GSTR-1)"),
        DueDateRule(11, None, "Monthly GST Return (GSTR-3B)"),
    ),
    QUARTERLY: (
        DueDateRule(18, QUARTER_FILING_MONTHS, "Quarterly GST Return (GSTR-1)"),
        DueDateRule(22, QUARTER_FILING_MONTHS, "Quarterly GST Return (GSTR-3B)"),
    ),
    ANNUAL: (
        DueDateRule(31, 12, "Annual GST Return (GSTR-9)"),
    ),
}

# Turnover bracket -> filing frequency. Small businesses (and composition scheme) file quarterly.
TURNOVER_FILING_FREQUENCY = {
    "<10L": QUARTERLY,
    "10-40L": QUARTERLY,
    "40L-1Cr": MONTHLY,
    ">1Cr": MONTHLY,
}
TURNOVER_RANGES = tuple(TURNOVER_FILING_FREQUENCY)

# Unrecognized or missing brackets file monthly
DEFAULT_FILING_FREQUENCY = MONTHLY


def classify_filing_frequency(turnover_range: str | None) -> str:
    """Filing frequency for a turnover bracket. Never fails; unknown brackets get DEFAULT_FILING_FREQUENCY."""
    return TURNOVER_FILING_FREQUENCY.get(turnover_range or "", DEFAULT_FILING_FREQUENCY)


def matching_due_dates(today: date, frequency: str) -> list[DueDateRule]:
    """Rules under `frequency` that fall due on `today`, in table order. Unknown frequency -> []."""
    return [rule for rule in GST_DUE_DATES.get(frequency, ()) if rule.matches(today)]
