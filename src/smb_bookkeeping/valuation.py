# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Company valuation and shareholder shares.

The company value is a simple book figure:

    profit + investments - net VAT position + manual correction

A non-finite result (NaN or infinity coming from bad input) is reported
as 0. Shareholder percentages are applied as-is: they are not normalised
when they do not add up to 100.
"""

import math
from collections.abc import Iterable
from typing import Optional

from .models import CompanyValuation, FinancialSummary, Shareholder, ShareholderValue


def company_value(summary: FinancialSummary, manual_correction: float = 0.0) -> float:
    """Company value derived from the summary, clamped to 0 when not finite."""
    value = (
        summary.profit + summary.investments - summary.vat_total + manual_correction
    )
    if not math.isfinite(value):
        return 0.0
    return value


def compute_company_valuation(
    summary: FinancialSummary,
    shareholders: Optional[Iterable[Shareholder]],
    manual_correction: Optional[float] = None,
) -> CompanyValuation:
    """
    Value the company and split it over the shareholders.

    Args:
        summary: Financial summary of the company.
        shareholders: Partners with their default percentage.
        manual_correction: Correction added to the value. Defaults to the
            correction carried by the summary.
    """
    if manual_correction is None:
        manual_correction = summary.manual_correction

    value = company_value(summary, manual_correction)
    holders = list(shareholders or ())

    shares = tuple(
        ShareholderValue(shareholder=sh, value=value * (sh.default_percentage / 100))
        for sh in holders
    )
    return CompanyValuation(
        company_value=value,
        shares=shares,
        total_percentage=sum(sh.default_percentage for sh in holders),
    )
