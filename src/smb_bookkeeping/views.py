# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for SMB Bookkeeping.

This module turns the derived records of the engine (FinancialSummary,
VatReport, KiaStats, CompanyValuation, book values) and the relation
records (companies, projects) into pandas DataFrames that are easy to
print or export to CSV. Rounding only happens here.
"""

from collections.abc import Sequence
from datetime import date

import pandas as pd

from .models import (
    Company,
    CompanyType,
    CompanyValuation,
    FinancialSummary,
    Investment,
    KiaStats,
    Project,
    Shareholder,
    VatReport,
)

SUMMARY_LABELS: tuple[tuple[str, str], ...] = (
    ("revenue", "Omzet"),
    ("expenses", "Kosten"),
    ("investments", "Investeringen"),
    ("profit", "Winst"),
    ("vat_payable", "Te betalen BTW"),
    ("vat_deductible", "Te vorderen BTW"),
    ("vat_total", "Netto BTW positie"),
    ("kia_deduction", "KIA aftrek"),
    ("manual_correction", "Handmatige waardecorrectie"),
)


def summary_to_dataframe(summary: FinancialSummary, decimals: int = 2) -> pd.DataFrame:
    """
    Convert a FinancialSummary into a two-column table.

    Columns: key, label, amount.
    """
    rows = [
        {
            "key": key,
            "label": label,
            "amount": round(float(getattr(summary, key)), decimals),
        }
        for key, label in SUMMARY_LABELS
    ]
    return pd.DataFrame(rows, columns=["key", "label", "amount"])


def vat_report_to_dataframe(report: VatReport, decimals: int = 2) -> pd.DataFrame:
    """
    Convert a VatReport into the layout of the Dutch return form.

    Columns: rubriek, label, turnover, vat. The last row holds the total
    payable (negative for a refund).
    """
    rows = [
        {
            "rubriek": "1a",
            "label": "Leveringen belast met 21%",
            "turnover": report.turnover_high,
            "vat": report.vat_high,
        },
        {
            "rubriek": "1b",
            "label": "Leveringen belast met 9%",
            "turnover": report.turnover_low,
            "vat": report.vat_low,
        },
        {
            "rubriek": "5b",
            "label": "Voorbelasting",
            "turnover": float("nan"),
            "vat": -report.vat_deductible,
        },
        {
            "rubriek": "",
            "label": "Totaal",
            "turnover": float("nan"),
            "vat": report.total_payable,
        },
    ]
    df = pd.DataFrame(rows, columns=["rubriek", "label", "turnover", "vat"])
    return df.round({"turnover": decimals, "vat": decimals})


def kia_stats_to_dataframe(stats: KiaStats, decimals: int = 2) -> pd.DataFrame:
    """Columns: year, total, deduction."""
    return pd.DataFrame(
        [
            {
                "year": "all" if stats.year is None else str(stats.year),
                "total": round(stats.total, decimals),
                "deduction": round(stats.deduction, decimals),
            }
        ],
        columns=["year", "total", "deduction"],
    )


def book_values_to_dataframe(
    values: Sequence[tuple[Investment, float]], decimals: int = 2
) -> pd.DataFrame:
    """
    Convert (investment, book value) pairs into a table sorted by date.

    Columns: date, description, category, purchase_value, residual_value,
    lifespan_years, book_value.
    """
    columns = [
        "date",
        "description",
        "category",
        "purchase_value",
        "residual_value",
        "lifespan_years",
        "book_value",
    ]
    if not values:
        return pd.DataFrame(columns=columns)

    rows = [
        {
            "date": inv.date,
            "description": inv.description,
            "category": inv.category,
            "purchase_value": round(inv.purchase_value, decimals),
            "residual_value": round(inv.residual_value, decimals),
            "lifespan_years": inv.lifespan_years,
            "book_value": round(value, decimals),
        }
        for inv, value in values
    ]
    df = pd.DataFrame(rows, columns=columns)
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def valuation_to_dataframe(
    valuation: CompanyValuation, decimals: int = 2
) -> pd.DataFrame:
    """
    One row per shareholder followed by a company total row.

    Columns: name, percentage, value.
    """
    rows: list[dict[str, object]] = [
        {
            "name": share.shareholder.name,
            "percentage": share.shareholder.default_percentage,
            "value": round(share.value, decimals),
        }
        for share in valuation.shares
    ]
    rows.append(
        {
            "name": "Totale bedrijfswaarde",
            "percentage": valuation.total_percentage,
            "value": round(valuation.company_value, decimals),
        }
    )
    return pd.DataFrame(rows, columns=["name", "percentage", "value"])


def format_deadline(deadline: date) -> str:
    """Deadline as DD-MM-YYYY, the Dutch notation."""
    return deadline.strftime("%d-%m-%Y")


def companies_to_dataframe(companies: Sequence[Company]) -> pd.DataFrame:
    """
    Relations table, clients first, then the others in file order.

    Columns: name, type, city, kvk, btw, email.
    """
    columns = ["name", "type", "city", "kvk", "btw", "email"]
    ordered = sorted(companies, key=lambda c: c.type != CompanyType.CLIENT)
    rows = [
        {
            "name": c.name,
            "type": c.type.value,
            "city": c.address.city,
            "kvk": c.kvk or "",
            "btw": c.btw or "",
            "email": c.email or "",
        }
        for c in ordered
    ]
    return pd.DataFrame(rows, columns=columns)


def projects_to_dataframe(
    projects: Sequence[Project],
    companies: Sequence[Company] = (),
    shareholders: Sequence[Shareholder] = (),
) -> pd.DataFrame:
    """
    Projects with the client name and the lead partner resolved.

    Unknown clients are shown as 'Onbekend', jointly led projects as
    'Gezamenlijk'.

    Columns: name, client, partner, status, start_date, end_date.
    """
    columns = ["name", "client", "partner", "status", "start_date", "end_date"]
    company_names = {c.id: c.name for c in companies}
    partner_names = {s.id: s.name for s in shareholders}

    rows = []
    for p in projects:
        if p.lead_shareholder_id is None:
            partner = "Gezamenlijk"
        else:
            partner = partner_names.get(p.lead_shareholder_id, "Onbekend")
        rows.append(
            {
                "name": p.name,
                "client": company_names.get(p.company_id, "Onbekend"),
                "partner": partner,
                "status": p.status.value,
                "start_date": p.start_date,
                "end_date": p.end_date or "",
            }
        )
    return pd.DataFrame(rows, columns=columns)
