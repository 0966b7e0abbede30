# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain records for SMB Bookkeeping.

This module defines the value objects exchanged between the input layer
(CSV loaders, or any external data store) and the computation engine:

- ledger records supplied by the caller:
    * ``Invoice`` with its ``InvoiceLine`` items,
    * ``Expense``,
    * ``Investment``,
    * ``Shareholder``,
    * ``Company`` and ``Project`` (relations, listed by the CLI only),

- derived results produced by the engine:
    * ``VatSplit``          (vat.split_vat),
    * ``VatReport``         (vat.compute_vat_report),
    * ``KiaStats``          (kia.compute_kia_stats),
    * ``FinancialSummary``  (engine.compute_financial_summary),
    * ``CompanyValuation``  (valuation.compute_company_valuation).

All records are frozen dataclasses. The engine never mutates its inputs and
always builds new derived records.

Dates are kept as ISO ``YYYY-MM-DD`` strings, exactly as they are stored by
the data store. Period filters rely on lexicographic comparison of these
fixed-width strings.

Enum values are the storage codes used by the data store (Dutch labels).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, IntEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class VATRate(IntEnum):
    """Dutch VAT rates, in percent."""

    ZERO = 0
    LOW = 9
    HIGH = 21


class InvoiceType(str, Enum):
    """Direction of an invoice."""

    SALES = "VERKOOP"
    PURCHASE = "INKOOP"


class PaymentStatus(str, Enum):
    """Payment lifecycle of an invoice."""

    DRAFT = "CONCEPT"
    SENT = "VERSTUURD"
    PARTIAL = "DEELS_BETAALD"
    PAID = "BETAALD"
    OVERDUE = "VERVALLEN"


class CompanyType(str, Enum):
    """Role of a relation."""

    CLIENT = "KLANT"
    SUPPLIER = "LEVERANCIER"
    INTERNAL = "INTERN"


class ProjectStatus(str, Enum):
    """Lifecycle of a project."""

    ACTIVE = "ACTIEF"
    COMPLETED = "VOLTOOID"
    ARCHIVED = "GEARCHIVEERD"


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InvoiceLine:
    """
    One line of an invoice.

    Attributes
    ----------
    description:
        Free text label.
    amount:
        Net amount (excluding VAT), in currency units.
    vat_rate:
        VAT rate in percent (0, 9 or 21).
    """

    description: str
    amount: float
    vat_rate: int


@dataclass(frozen=True)
class Invoice:
    """
    Sales or purchase invoice.

    Only SALES invoices are used by the engine. ``shareholder_split`` is
    recorded (shareholder id -> percentage) but not consumed by any
    computation.
    """

    type: InvoiceType
    date: str
    status: PaymentStatus
    lines: tuple[InvoiceLine, ...] = ()
    shareholder_split: Mapping[str, float] = field(default_factory=dict)

    id: str = ""
    number: str = ""
    company_id: str | None = None
    project_id: str | None = None
    due_date: str | None = None

    @property
    def net_total(self) -> float:
        """Sum of the line amounts, excluding VAT."""
        return sum(line.amount for line in self.lines)

    @property
    def vat_total(self) -> float:
        """VAT charged on all lines."""
        return sum(line.amount * line.vat_rate / 100 for line in self.lines)

    @property
    def gross_total(self) -> float:
        """Invoice total including VAT."""
        return sum(line.amount * (1 + line.vat_rate / 100) for line in self.lines)


@dataclass(frozen=True)
class Expense:
    """Expense with its (absolute) deductible VAT amount."""

    date: str
    amount_excl: float
    vat_amount: float

    id: str = ""
    description: str = ""
    category: str = ""
    company_id: str | None = None
    project_id: str | None = None


@dataclass(frozen=True)
class Investment:
    """
    Depreciable asset.

    ``date`` is the acquisition date. ``lifespan_years`` is expected to be
    strictly positive; this is not validated by the engine.
    """

    date: str
    purchase_value: float
    residual_value: float
    lifespan_years: float

    id: str = ""
    description: str = ""
    category: str = ""


@dataclass(frozen=True)
class Shareholder:
    """Partner of the company with a default ownership percentage (0-100)."""

    id: str
    name: str
    default_percentage: float


@dataclass(frozen=True)
class Address:
    street: str = ""
    number: str = ""
    zip: str = ""
    city: str = ""
    country: str = "NL"


@dataclass(frozen=True)
class Company:
    """Client, supplier or internal relation."""

    id: str
    name: str
    type: CompanyType
    kvk: str | None = None
    btw: str | None = None
    address: Address = field(default_factory=Address)
    email: str | None = None


@dataclass(frozen=True)
class Project:
    """
    Project carried out for a relation.

    ``lead_shareholder_id`` is None when the partners lead the project
    jointly.
    """

    id: str
    name: str
    company_id: str
    start_date: str
    end_date: str | None = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    lead_shareholder_id: str | None = None


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VatSplit:
    """Net / VAT / gross decomposition of an amount."""

    net: float
    vat: float
    gross: float


@dataclass(frozen=True)
class VatReport:
    """
    Quarterly VAT return figures.

    Attributes
    ----------
    period:
        Quarter label ('Q1' .. 'Q4').
    year:
        Calendar year of the return.
    turnover_high, vat_high:
        Turnover and VAT at the high (21%) rate (rubriek 1a).
    turnover_low, vat_low:
        Turnover and VAT at the low (9%) rate (rubriek 1b).
    vat_deductible:
        Input VAT from expenses (rubriek 5b).
    total_payable:
        ``(vat_high + vat_low) - vat_deductible``; negative for a refund.
    """

    period: str
    year: int
    turnover_high: float = 0.0
    vat_high: float = 0.0
    turnover_low: float = 0.0
    vat_low: float = 0.0
    vat_deductible: float = 0.0
    total_payable: float = 0.0


@dataclass(frozen=True)
class KiaStats:
    """Qualifying investment total and resulting KIA deduction."""

    year: int | None
    total: float
    deduction: float


@dataclass(frozen=True)
class FinancialSummary:
    """Rolled-up figures used by the dashboard and valuation views."""

    revenue: float = 0.0
    expenses: float = 0.0
    investments: float = 0.0
    profit: float = 0.0
    vat_payable: float = 0.0
    vat_deductible: float = 0.0
    vat_total: float = 0.0
    kia_deduction: float = 0.0
    manual_correction: float = 0.0


@dataclass(frozen=True)
class ShareholderValue:
    shareholder: Shareholder
    value: float


@dataclass(frozen=True)
class CompanyValuation:
    """
    Company value and its split over shareholders.

    ``total_percentage`` is the plain sum of the shareholders' percentages;
    it is reported as-is and may differ from 100.
    """

    company_value: float
    shares: tuple[ShareholderValue, ...]
    total_percentage: float
