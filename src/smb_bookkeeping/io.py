# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for SMB Bookkeeping.

This module reads the ledgers from CSV files and turns them into the domain
records consumed by the engine. It is the validation boundary: dates must
parse, amounts must be numeric and VAT rates must be one of the permitted
rates. The engine itself performs no validation.

Expected input files (column names are case-insensitive)
---------------------------------------------------------

1) invoices.csv
       id, number, type, date, status
   optional: company_id, project_id, due_date, shareholder_split

   - ``type``:   VERKOOP / INKOOP (or SALES / PURCHASE)
   - ``status``: CONCEPT / VERSTUURD / DEELS_BETAALD / BETAALD / VERVALLEN
                 (or DRAFT / SENT / PARTIAL / PAID / OVERDUE)
   - ``shareholder_split``: JSON object {shareholder_id: percentage}

2) invoice_lines.csv
       invoice_id, description, amount, vat_rate

   ``amount`` is the net line amount (excluding VAT).

3) expenses.csv
       date, amount_excl, vat_amount
   optional: id, description, category, company_id, project_id

4) investments.csv
       date, purchase_value, residual_value, lifespan_years
   optional: id, description, category

5) shareholders.csv
       id, name, default_percentage

6) companies.csv
       id, name, type
   optional: kvk, btw, street, number, zip, city, country, email

   - ``type``: KLANT / LEVERANCIER / INTERN (or CLIENT / SUPPLIER / INTERNAL)

7) projects.csv
       id, name, company_id, start_date
   optional: end_date, status, lead_shareholder_id

   - ``status``: ACTIEF / VOLTOOID / GEARCHIVEERD (default ACTIEF)
   - ``lead_shareholder_id``: empty or BOTH for a joint project

Dates are normalised to ISO ``YYYY-MM-DD`` strings.

If a file does not match the expected structure, a clear ValueError is
raised.
"""

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

import pandas as pd

from .config import DataPaths
from .models import (
    Address,
    Company,
    CompanyType,
    Expense,
    Investment,
    Invoice,
    InvoiceLine,
    InvoiceType,
    PaymentStatus,
    Project,
    ProjectStatus,
    Shareholder,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class Ledger:
    """In-memory snapshot of all ledgers, handed to the engine as-is."""

    invoices: tuple[Invoice, ...] = ()
    expenses: tuple[Expense, ...] = ()
    investments: tuple[Investment, ...] = ()
    shareholders: tuple[Shareholder, ...] = ()
    companies: tuple[Company, ...] = ()
    projects: tuple[Project, ...] = ()


def _read_csv(path: PathLike, required: set[str], kind: str) -> pd.DataFrame:
    """
    Read a CSV file as text columns with normalized (lowercase) names.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if a required column is missing.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"{kind} file not found: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).lower().strip() for c in df.columns]

    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Invalid {kind} structure in {path}. "
            f"Missing column(s): {', '.join(sorted(missing))}."
        )
    return df


def _text(df: pd.DataFrame, col: str) -> pd.Series:
    """Stripped text column; empty strings when the column is absent."""
    if col not in df.columns:
        return pd.Series([""] * len(df), index=df.index, dtype=str)
    return df[col].astype(str).str.strip()


def _iso_dates(df: pd.DataFrame, col: str, kind: str) -> pd.Series:
    try:
        parsed = pd.to_datetime(df[col].str.strip(), format="%Y-%m-%d", errors="raise")
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Invalid values in '{col}' column of {kind}.") from exc
    return parsed.dt.strftime("%Y-%m-%d")


def _numbers(df: pd.DataFrame, col: str, kind: str) -> pd.Series:
    values = pd.to_numeric(df[col].str.strip(), errors="coerce")
    if values.isna().any():
        raise ValueError(f"Invalid numeric values in '{col}' column of {kind}.")
    return values.astype(float)


def _optional(value: str) -> Optional[str]:
    return value or None


def _parse_enum(raw: str, enum_cls, kind: str):
    """Accept either the stored value ('VERKOOP') or the name ('SALES')."""
    key = raw.strip().upper()
    for member in enum_cls:
        if key in (member.value, member.name):
            return member
    raise ValueError(f"Invalid {enum_cls.__name__} value in {kind}: {raw!r}.")


def _parse_split(raw: str) -> dict[str, float]:
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid shareholder_split JSON: {raw!r}.") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid shareholder_split, expected an object: {raw!r}.")
    return {str(k): float(v) for k, v in data.items()}


def read_invoice_lines(
    path: PathLike,
    rates: Sequence[int] = (0, 9, 21),
) -> dict[str, tuple[InvoiceLine, ...]]:
    """
    Read invoice lines and group them by invoice id, keeping file order.

    Raises:
        ValueError: on a missing column, a non-numeric amount or a VAT rate
            outside ``rates``.
    """
    kind = "invoice lines"
    df = _read_csv(path, {"invoice_id", "description", "amount", "vat_rate"}, kind)

    amounts = _numbers(df, "amount", kind)
    raw_rates = _numbers(df, "vat_rate", kind)
    if not raw_rates.isin(list(rates)).all():
        bad = sorted(set(raw_rates[~raw_rates.isin(list(rates))]))
        raise ValueError(
            f"Invalid VAT rate(s) in {kind}: {bad}. Expected one of {list(rates)}."
        )

    grouped: dict[str, list[InvoiceLine]] = {}
    for invoice_id, description, amount, rate in zip(
        _text(df, "invoice_id"), _text(df, "description"), amounts, raw_rates
    ):
        grouped.setdefault(invoice_id, []).append(
            InvoiceLine(
                description=description, amount=float(amount), vat_rate=int(rate)
            )
        )
    return {k: tuple(v) for k, v in grouped.items()}


def read_invoices(
    path: PathLike,
    lines_path: Optional[PathLike] = None,
    rates: Sequence[int] = (0, 9, 21),
) -> list[Invoice]:
    """
    Read invoices and attach their lines.

    Lines referring to an unknown invoice id are ignored with a warning.
    """
    kind = "invoices"
    df = _read_csv(path, {"id", "number", "type", "date", "status"}, kind)
    dates = _iso_dates(df, "date", kind)

    lines_by_invoice: dict[str, tuple[InvoiceLine, ...]] = {}
    if lines_path is not None:
        lines_by_invoice = read_invoice_lines(lines_path, rates)

    ids = _text(df, "id")
    numbers = _text(df, "number")
    splits = _text(df, "shareholder_split")
    company_ids = _text(df, "company_id")
    project_ids = _text(df, "project_id")
    due_dates = _text(df, "due_date")

    invoices: list[Invoice] = []
    for idx, invoice_id in ids.items():
        invoices.append(
            Invoice(
                id=invoice_id,
                number=numbers[idx],
                type=_parse_enum(df.at[idx, "type"], InvoiceType, kind),
                date=dates[idx],
                status=_parse_enum(df.at[idx, "status"], PaymentStatus, kind),
                lines=lines_by_invoice.get(invoice_id, ()),
                shareholder_split=_parse_split(splits[idx]),
                company_id=_optional(company_ids[idx]),
                project_id=_optional(project_ids[idx]),
                due_date=_optional(due_dates[idx][:10]),
            )
        )

    orphans = set(lines_by_invoice) - set(ids)
    for invoice_id in sorted(orphans):
        logger.warning("Invoice lines for unknown invoice %s, ignored", invoice_id)

    return invoices


def read_expenses(path: PathLike) -> list[Expense]:
    """Read expenses (net amount and absolute VAT amount)."""
    kind = "expenses"
    df = _read_csv(path, {"date", "amount_excl", "vat_amount"}, kind)

    dates = _iso_dates(df, "date", kind)
    amounts = _numbers(df, "amount_excl", kind)
    vat = _numbers(df, "vat_amount", kind)

    return [
        Expense(
            id=_text(df, "id")[idx],
            date=dates[idx],
            description=_text(df, "description")[idx],
            category=_text(df, "category")[idx],
            amount_excl=float(amounts[idx]),
            vat_amount=float(vat[idx]),
            company_id=_optional(_text(df, "company_id")[idx]),
            project_id=_optional(_text(df, "project_id")[idx]),
        )
        for idx in df.index
    ]


def read_investments(path: PathLike) -> list[Investment]:
    """
    Read investments.

    Raises:
        ValueError: if a lifespan is not strictly positive.
    """
    kind = "investments"
    df = _read_csv(
        path, {"date", "purchase_value", "residual_value", "lifespan_years"}, kind
    )

    dates = _iso_dates(df, "date", kind)
    purchase = _numbers(df, "purchase_value", kind)
    residual = _numbers(df, "residual_value", kind)
    lifespan = _numbers(df, "lifespan_years", kind)
    if (lifespan <= 0).any():
        raise ValueError("Invalid 'lifespan_years' in investments: must be > 0.")

    return [
        Investment(
            id=_text(df, "id")[idx],
            date=dates[idx],
            description=_text(df, "description")[idx],
            category=_text(df, "category")[idx],
            purchase_value=float(purchase[idx]),
            residual_value=float(residual[idx]),
            lifespan_years=float(lifespan[idx]),
        )
        for idx in df.index
    ]


def read_shareholders(path: PathLike) -> list[Shareholder]:
    """Read shareholders. Percentages are not required to sum to 100."""
    kind = "shareholders"
    df = _read_csv(path, {"id", "name", "default_percentage"}, kind)
    pct = _numbers(df, "default_percentage", kind)

    return [
        Shareholder(
            id=_text(df, "id")[idx],
            name=_text(df, "name")[idx],
            default_percentage=float(pct[idx]),
        )
        for idx in df.index
    ]


def read_companies(path: PathLike) -> list[Company]:
    """Read clients, suppliers and internal relations."""
    kind = "companies"
    df = _read_csv(path, {"id", "name", "type"}, kind)

    countries = _text(df, "country")
    return [
        Company(
            id=_text(df, "id")[idx],
            name=_text(df, "name")[idx],
            type=_parse_enum(df.at[idx, "type"], CompanyType, kind),
            kvk=_optional(_text(df, "kvk")[idx]),
            btw=_optional(_text(df, "btw")[idx]),
            address=Address(
                street=_text(df, "street")[idx],
                number=_text(df, "number")[idx],
                zip=_text(df, "zip")[idx],
                city=_text(df, "city")[idx],
                country=countries[idx] or "NL",
            ),
            email=_optional(_text(df, "email")[idx]),
        )
        for idx in df.index
    ]


def read_projects(path: PathLike) -> list[Project]:
    """
    Read projects.

    An empty status means ACTIEF. An empty lead or 'BOTH' means the project
    is led jointly (``lead_shareholder_id`` is None).
    """
    kind = "projects"
    df = _read_csv(path, {"id", "name", "company_id", "start_date"}, kind)
    start_dates = _iso_dates(df, "start_date", kind)
    statuses = _text(df, "status")
    leads = _text(df, "lead_shareholder_id")

    projects: list[Project] = []
    for idx in df.index:
        lead = leads[idx]
        projects.append(
            Project(
                id=_text(df, "id")[idx],
                name=_text(df, "name")[idx],
                company_id=_text(df, "company_id")[idx],
                start_date=start_dates[idx],
                end_date=_optional(_text(df, "end_date")[idx][:10]),
                status=(
                    _parse_enum(statuses[idx], ProjectStatus, kind)
                    if statuses[idx]
                    else ProjectStatus.ACTIVE
                ),
                lead_shareholder_id=None if lead.upper() in ("", "BOTH") else lead,
            )
        )
    return projects


def load_ledger(paths: DataPaths, rates: Sequence[int] = (0, 9, 21)) -> Ledger:
    """
    Load every configured ledger.

    Ledgers without a configured path are empty.
    """
    invoices: list[Invoice] = []
    if paths.invoices is not None:
        invoices = read_invoices(paths.invoices, paths.invoice_lines, rates)

    expenses = read_expenses(paths.expenses) if paths.expenses else []
    investments = read_investments(paths.investments) if paths.investments else []
    shareholders = read_shareholders(paths.shareholders) if paths.shareholders else []
    companies = read_companies(paths.companies) if paths.companies else []
    projects = read_projects(paths.projects) if paths.projects else []

    if companies:
        known = {c.id for c in companies}
        for project in projects:
            if project.company_id not in known:
                logger.warning(
                    "Project %s refers to unknown company %s",
                    project.id,
                    project.company_id,
                )

    logger.info(
        "Ledger loaded: %d invoices, %d expenses, %d investments, "
        "%d shareholders, %d companies, %d projects",
        len(invoices),
        len(expenses),
        len(investments),
        len(shareholders),
        len(companies),
        len(projects),
    )

    return Ledger(
        invoices=tuple(invoices),
        expenses=tuple(expenses),
        investments=tuple(investments),
        shareholders=tuple(shareholders),
        companies=tuple(companies),
        projects=tuple(projects),
    )
