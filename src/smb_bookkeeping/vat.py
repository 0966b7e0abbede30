# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
VAT (BTW) computations for SMB Bookkeeping.

This module provides:

1. Monetary arithmetic helpers
   ---------------------------
   ``split_vat(amount, vat_included, rate)`` decomposes an amount entered
   by the user into its net, VAT and gross parts. It is used when an
   expense or an invoice is entered "incl. BTW" or "excl. BTW".

2. Quarterly VAT return
   --------------------
   ``compute_vat_report(invoices, expenses, year, quarter)`` buckets the
   lines of the sales invoices dated within the quarter by VAT rate and
   subtracts the input VAT of the expenses of the same quarter:

   - rubriek 1a: turnover and VAT at 21%,
   - rubriek 1b: turnover and VAT at 9%,
   - rubriek 5b: deductible input VAT,
   - total payable (negative for a refund).

   Zero-rated lines are not reported in the return. Sales invoices are
   included regardless of their payment status (drafts included), unlike
   the revenue figures of the financial summary (engine.py).

No rounding is applied here; amounts are rounded for display only.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from .config import DEFAULT_QUARTERS, QuarterDef
from .models import Expense, Invoice, InvoiceType, VatReport, VATRate, VatSplit
from .periods import filter_by_period, quarter_window

logger = logging.getLogger(__name__)


def split_vat(amount: float, vat_included: bool, rate: float) -> VatSplit:
    """
    Split an amount into net, VAT and gross parts.

    Args:
        amount: Amount entered by the user.
        vat_included: True if ``amount`` already includes VAT.
        rate: VAT rate in percent (e.g. 21).

    Returns:
        A VatSplit with ``net + vat == gross`` and ``vat == net * rate / 100``.
    """
    factor = rate / 100
    if vat_included:
        net = amount / (1 + factor)
        return VatSplit(net=net, vat=amount - net, gross=amount)

    vat = amount * factor
    return VatSplit(net=amount, vat=vat, gross=amount + vat)


def compute_vat_report(
    invoices: Optional[Iterable[Invoice]],
    expenses: Optional[Iterable[Expense]],
    year: int,
    quarter: int,
    quarters: Sequence[QuarterDef] = DEFAULT_QUARTERS,
) -> VatReport:
    """
    Compute the VAT return of one quarter.

    Args:
        invoices: All invoices; only SALES invoices in the window are used.
        expenses: All expenses; those in the window provide input VAT.
        year: Calendar year of the return.
        quarter: Quarter number (1-4).
        quarters: Quarter table used to build the date window.

    Returns:
        A VatReport. Empty inputs produce an all-zero report.

    Raises:
        ValueError: if ``quarter`` is not in the quarter table.
    """
    period = quarter_window(year, quarter, quarters)

    sales = [
        inv
        for inv in filter_by_period(invoices or (), period)
        if inv.type == InvoiceType.SALES
    ]

    turnover_high = 0.0
    vat_high = 0.0
    turnover_low = 0.0
    vat_low = 0.0
    for inv in sales:
        for line in inv.lines:
            if line.vat_rate == VATRate.HIGH:
                turnover_high += line.amount
                vat_high += line.amount * line.vat_rate / 100
            if line.vat_rate == VATRate.LOW:
                turnover_low += line.amount
                vat_low += line.amount * line.vat_rate / 100

    vat_deductible = 0.0
    for exp in filter_by_period(expenses or (), period):
        vat_deductible += exp.vat_amount

    logger.debug(
        "VAT return %s: %d sales invoices, deductible %.2f",
        period.label,
        len(sales),
        vat_deductible,
    )

    return VatReport(
        period=f"Q{quarter}",
        year=year,
        turnover_high=turnover_high,
        vat_high=vat_high,
        turnover_low=turnover_low,
        vat_low=vat_low,
        vat_deductible=vat_deductible,
        total_payable=(vat_high + vat_low) - vat_deductible,
    )
