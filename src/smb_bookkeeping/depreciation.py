# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Straight-line depreciation of investments.

The book value is a pure function of the investment and a reference
instant. It must be recomputed on every read: "now" keeps moving.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional

from .models import Investment

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60


def _acquired_at(investment: Investment) -> datetime:
    """Acquisition date as midnight UTC."""
    return datetime.fromisoformat(investment.date[:10]).replace(tzinfo=timezone.utc)


def age_in_years(investment: Investment, now: Optional[datetime] = None) -> float:
    """Fractional years elapsed since acquisition (365.25-day years)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = now - _acquired_at(investment)
    return elapsed.total_seconds() / SECONDS_PER_YEAR


def book_value(investment: Investment, now: Optional[datetime] = None) -> float:
    """
    Current book value of an investment.

    Returns the residual value once the lifespan is over. Before that, the
    purchase value minus linear depreciation, never below the residual
    value (a negative age, e.g. a future acquisition date, is clamped too).

    Args:
        investment: Asset to value.
        now: Reference instant; defaults to the current UTC time. Naive
            datetimes are taken as UTC.
    """
    age = age_in_years(investment, now)
    if age >= investment.lifespan_years:
        return investment.residual_value

    annual = (
        investment.purchase_value - investment.residual_value
    ) / investment.lifespan_years
    return max(investment.residual_value, investment.purchase_value - annual * age)


def book_values(
    investments: Optional[Iterable[Investment]],
    now: Optional[datetime] = None,
) -> list[tuple[Investment, float]]:
    """Pair every investment with its book value at the same instant."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [(inv, book_value(inv, now)) for inv in investments or ()]
