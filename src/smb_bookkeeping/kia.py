# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Small-scale investment deduction (kleinschaligheidsinvesteringsaftrek, KIA).

The deduction is a piecewise function of the total qualifying investment
of a fiscal year. Only investments of at least ``min_item_value`` count
towards that total. With the default (2024) brackets:

    total <  2 801            -> 0
    total <= 69 765           -> 28% of total
    total <= 129 194          -> 19 535 (flat)
    total <= 387 580          -> 19 535 - 7.56% of (total - 129 194)
    total >  387 580          -> 0

Upper bounds are inclusive, so the function jumps at the first bracket
boundary (69 765 * 0.28 = 19 534.20, then 19 535 for 69 766).

The bracket constants come from KiaConfig and are never hardcoded here.
"""

from collections.abc import Iterable
from typing import Optional

from .config import KiaConfig
from .models import Investment, KiaStats
from .periods import filter_by_period, year_window


def kia_deduction(total: float, config: KiaConfig = KiaConfig()) -> float:
    """Return the KIA deduction for a qualifying investment total."""
    if total < config.threshold_min:
        return 0.0
    if total <= config.bracket_1_max:
        return total * config.pct_low
    if total <= config.bracket_2_max:
        return config.fixed_mid
    if total <= config.bracket_3_max:
        excess = total - config.bracket_2_max
        return config.fixed_mid - excess * config.reduction_pct
    return 0.0


def qualifying_investment_total(
    investments: Optional[Iterable[Investment]],
    config: KiaConfig = KiaConfig(),
    year: Optional[int] = None,
) -> float:
    """
    Sum the purchase values of investments that qualify for KIA.

    An investment qualifies when its purchase value is at least
    ``config.min_item_value``. When ``year`` is given, only investments
    acquired in that calendar year are counted; otherwise the whole
    collection is used as supplied.
    """
    items = list(investments or ())
    if year is not None:
        items = filter_by_period(items, year_window(year))
    return sum(
        inv.purchase_value
        for inv in items
        if inv.purchase_value >= config.min_item_value
    )


def compute_kia_stats(
    investments: Optional[Iterable[Investment]],
    year: Optional[int] = None,
    config: KiaConfig = KiaConfig(),
) -> KiaStats:
    """Qualifying total and deduction, optionally for one calendar year."""
    total = qualifying_investment_total(investments, config, year=year)
    return KiaStats(year=year, total=total, deduction=kia_deduction(total, config))
