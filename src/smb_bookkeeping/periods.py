# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for SMB Bookkeeping.

This module defines a Period value object and helpers to derive the VAT
filing windows (quarters), calendar years and filing deadlines.

Windows are expressed as ISO date strings and compared lexicographically
against the ISO dates of the ledger records. Quarter windows always end on
day '31' of their last month, whatever the real month length: this is safe
for string comparison and matches how the data store is queried.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, TypeVar

from .config import DEFAULT_QUARTERS, QuarterDef


@dataclass(frozen=True)
class Period:
    """Inclusive [start, end] window of ISO dates with a readable label."""

    start: str
    end: str
    label: str

    def contains(self, iso_date: str) -> bool:
        return self.start <= iso_date <= self.end


class _Dated(Protocol):
    date: str


D = TypeVar("D", bound=_Dated)


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def quarter_def(
    quarter: int, quarters: Sequence[QuarterDef] = DEFAULT_QUARTERS
) -> QuarterDef:
    """
    Look up a quarter in the quarter table.

    Raises:
        ValueError: if the quarter is not defined.
    """
    for q in quarters:
        if q.quarter == quarter:
            return q
    raise ValueError(f"Unknown quarter: {quarter!r}. Expected 1, 2, 3 or 4.")


def quarter_window(
    year: int,
    quarter: int,
    quarters: Sequence[QuarterDef] = DEFAULT_QUARTERS,
) -> Period:
    """Return the filing window of a quarter: {year}-{mm}-01 .. {year}-{mm}-31."""
    q = quarter_def(quarter, quarters)
    return Period(
        start=f"{year}-{q.start_month}-01",
        end=f"{year}-{q.end_month}-31",
        label=f"{q.name} {year}",
    )


def year_window(year: int) -> Period:
    """Full calendar year."""
    return Period(start=f"{year}-01-01", end=f"{year}-12-31", label=str(year))


def current_quarter(today: Optional[date] = None) -> int:
    """Quarter (1-4) containing ``today``."""
    if today is None:
        today = _today()
    return (today.month - 1) // 3 + 1


def filing_deadline(
    year: int,
    quarter: int,
    quarters: Sequence[QuarterDef] = DEFAULT_QUARTERS,
) -> date:
    """
    Filing deadline of a quarterly VAT return.

    The deadline of Q4 falls in January of the following year.
    """
    q = quarter_def(quarter, quarters)
    month_raw, day_raw = q.deadline.split("-", 1)
    deadline_year = year + 1 if q.deadline_next_year else year
    return date(deadline_year, int(month_raw), int(day_raw))


def filter_by_period(records: Iterable[D], period: Period) -> list[D]:
    """Keep the records whose ``date`` falls in [period.start, period.end]."""
    return [r for r in records if period.contains(r.date)]
