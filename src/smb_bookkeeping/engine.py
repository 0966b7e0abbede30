# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Financial summary engine for SMB Bookkeeping.

This module rolls the ledger records up into the FinancialSummary used by
the dashboard and the valuation view.

Revenue recognition
-------------------
Only SALES invoices whose status is not DRAFT count as revenue and output
VAT. Note that the quarterly VAT return (vat.py) does not apply this status
filter: draft sales invoices dated in the quarter are part of the return.
Both behaviours are kept.

Expenses and investments
------------------------
Expenses and investments are taken unconditionally. The KIA deduction is
computed over the whole investment collection supplied by the caller;
callers who want a single fiscal year pass the investments of that year
(see kia.compute_kia_stats).

The engine performs no I/O, keeps no state and never mutates its inputs.
Calling it twice with the same collections returns equal summaries.
"""

from collections.abc import Iterable
from typing import Optional

from .config import KiaConfig
from .kia import kia_deduction, qualifying_investment_total
from .models import (
    Expense,
    FinancialSummary,
    Investment,
    Invoice,
    InvoiceType,
    PaymentStatus,
)


def recognised_sales(invoices: Optional[Iterable[Invoice]]) -> list[Invoice]:
    """SALES invoices that count as revenue (every status except DRAFT)."""
    return [
        inv
        for inv in invoices or ()
        if inv.type == InvoiceType.SALES and inv.status != PaymentStatus.DRAFT
    ]


def compute_financial_summary(
    invoices: Optional[Iterable[Invoice]],
    expenses: Optional[Iterable[Expense]],
    investments: Optional[Iterable[Investment]],
    manual_correction: float = 0.0,
    kia_config: KiaConfig = KiaConfig(),
) -> FinancialSummary:
    """Build the financial summary.

    Args:
        invoices: All invoices (any type, any status).
        expenses: All expenses.
        investments: All investments (or the pre-filtered investments of
            one fiscal year).
        manual_correction: Valuation correction, passed through unchanged.
        kia_config: KIA brackets.

    Returns:
        A FinancialSummary. Missing collections (None) count as empty.
    """
    sales = recognised_sales(invoices)
    expense_list = list(expenses or ())
    investment_list = list(investments or ())

    revenue = sum(line.amount for inv in sales for line in inv.lines)
    expenses_total = sum(e.amount_excl for e in expense_list)
    investments_total = sum(i.purchase_value for i in investment_list)

    vat_payable = sum(
        line.amount * line.vat_rate / 100 for inv in sales for line in inv.lines
    )
    vat_deductible = sum(e.vat_amount for e in expense_list)

    kia = kia_deduction(
        qualifying_investment_total(investment_list, kia_config), kia_config
    )

    return FinancialSummary(
        revenue=revenue,
        expenses=expenses_total,
        investments=investments_total,
        profit=revenue - expenses_total,
        vat_payable=vat_payable,
        vat_deductible=vat_deductible,
        vat_total=vat_payable - vat_deductible,
        kia_deduction=kia,
        manual_correction=manual_correction,
    )
