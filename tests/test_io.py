from pathlib import Path

import pytest

from smb_bookkeeping.config import DataPaths
from smb_bookkeeping.io import (
    load_ledger,
    read_expenses,
    read_invoice_lines,
    read_invoices,
    read_companies,
    read_investments,
    read_projects,
    read_shareholders,
)
from smb_bookkeeping.models import (
    CompanyType,
    InvoiceType,
    PaymentStatus,
    ProjectStatus,
)


def _csv(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content.lstrip(), encoding="utf-8")
    return path


def test_read_invoices_with_lines(tmp_path) -> None:
    invoices = _csv(
        tmp_path,
        "invoices.csv",
        """
ID,Number,Type,Date,Status,shareholder_split
inv-1,2025-001,VERKOOP,2025-01-15,VERSTUURD,"{""sh-1"": 60, ""sh-2"": 40}"
inv-2,2025-002,SALES,2025-02-01,draft,
inv-3,2025-003,INKOOP,2025-02-03,BETAALD,
""",
    )
    lines = _csv(
        tmp_path,
        "invoice_lines.csv",
        """
invoice_id,description,amount,vat_rate
inv-1,Consultancy,100.00,21
inv-1,Boeken,200,9
inv-2,Training,50,21
""",
    )

    result = read_invoices(invoices, lines)

    assert [inv.id for inv in result] == ["inv-1", "inv-2", "inv-3"]
    first = result[0]
    assert first.type == InvoiceType.SALES
    assert first.status == PaymentStatus.SENT
    assert first.date == "2025-01-15"
    assert [(line.amount, line.vat_rate) for line in first.lines] == [
        (100.0, 21),
        (200.0, 9),
    ]
    assert first.shareholder_split == {"sh-1": 60.0, "sh-2": 40.0}
    assert result[1].status == PaymentStatus.DRAFT
    assert result[2].type == InvoiceType.PURCHASE
    assert result[2].lines == ()
    assert first.company_id is None


def test_read_invoices_missing_column(tmp_path) -> None:
    path = _csv(
        tmp_path, "invoices.csv", "id,number,type,date\n1,1,VERKOOP,2025-01-01\n"
    )

    with pytest.raises(ValueError, match="Missing column"):
        read_invoices(path)


def test_read_invoices_invalid_status(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "invoices.csv",
        "id,number,type,date,status\n1,1,VERKOOP,2025-01-01,ONBEKEND\n",
    )

    with pytest.raises(ValueError, match="PaymentStatus"):
        read_invoices(path)


def test_read_invoice_lines_rejects_unknown_rate(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "invoice_lines.csv",
        "invoice_id,description,amount,vat_rate\ninv-1,x,10,19\n",
    )

    with pytest.raises(ValueError, match="Invalid VAT rate"):
        read_invoice_lines(path)


def test_read_expenses_invalid_date(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "expenses.csv",
        "date,amount_excl,vat_amount\n15-01-2025,100,21\n",
    )

    with pytest.raises(ValueError, match="'date' column of expenses"):
        read_expenses(path)


def test_read_expenses_invalid_amount(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "expenses.csv",
        "date,amount_excl,vat_amount\n2025-01-15,honderd,21\n",
    )

    with pytest.raises(ValueError, match="Invalid numeric values"):
        read_expenses(path)


def test_read_investments_rejects_zero_lifespan(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "investments.csv",
        "date,purchase_value,residual_value,lifespan_years\n2025-01-01,1000,0,0\n",
    )

    with pytest.raises(ValueError, match="lifespan_years"):
        read_investments(path)


def test_read_shareholders(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "shareholders.csv",
        "id,name,default_percentage\nsh-1,Anna,60\nsh-2,Bram,30\n",
    )

    result = read_shareholders(path)

    assert [(s.name, s.default_percentage) for s in result] == [
        ("Anna", 60.0),
        ("Bram", 30.0),
    ]


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        read_expenses(tmp_path / "missing.csv")


def test_load_ledger_with_partial_paths(tmp_path) -> None:
    """Ledgers without a configured path are loaded as empty collections."""
    expenses = _csv(
        tmp_path,
        "expenses.csv",
        "date,amount_excl,vat_amount,description\n2025-03-01,50,10.5,Papier\n",
    )

    ledger = load_ledger(DataPaths(expenses=expenses))

    assert ledger.invoices == ()
    assert ledger.investments == ()
    assert ledger.shareholders == ()
    assert len(ledger.expenses) == 1
    assert ledger.expenses[0].vat_amount == 10.5
    assert ledger.expenses[0].description == "Papier"


def test_orphan_invoice_lines_are_logged(tmp_path, caplog) -> None:
    invoices = _csv(
        tmp_path,
        "invoices.csv",
        "id,number,type,date,status\ninv-1,1,VERKOOP,2025-01-01,VERSTUURD\n",
    )
    lines = _csv(
        tmp_path,
        "invoice_lines.csv",
        "invoice_id,description,amount,vat_rate\ninv-9,x,10,21\n",
    )

    with caplog.at_level("WARNING", logger="smb_bookkeeping.io"):
        result = read_invoices(invoices, lines)

    assert result[0].lines == ()
    assert "inv-9" in caplog.text


def test_read_companies(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "companies.csv",
        """
id,name,type,kvk,btw,street,number,zip,city,country,email
c-01,Klant BV,KLANT,12345678,NL001234567B01,Damrak,1,1012 LG,Amsterdam,,info@klant.nl
c-02,Leverancier BV,supplier,,,,,,Utrecht,BE,
""",
    )

    result = read_companies(path)

    assert [c.type for c in result] == [CompanyType.CLIENT, CompanyType.SUPPLIER]
    first = result[0]
    assert first.kvk == "12345678"
    assert first.address.city == "Amsterdam"
    assert first.address.country == "NL"
    assert first.email == "info@klant.nl"
    assert result[1].kvk is None
    assert result[1].address.country == "BE"


def test_read_companies_invalid_type(tmp_path) -> None:
    path = _csv(tmp_path, "companies.csv", "id,name,type\nc-01,X,PARTNER\n")

    with pytest.raises(ValueError, match="CompanyType"):
        read_companies(path)


def test_read_projects(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "projects.csv",
        """
id,name,company_id,start_date,end_date,status,lead_shareholder_id
p-01,Chatbot,c-01,2025-01-06,,ACTIEF,sh-1
p-02,Audit,c-01,2024-09-01,2024-12-20,VOLTOOID,BOTH
p-03,Training,c-02,2025-02-01,,,
""",
    )

    result = read_projects(path)

    assert [p.status for p in result] == [
        ProjectStatus.ACTIVE,
        ProjectStatus.COMPLETED,
        ProjectStatus.ACTIVE,
    ]
    assert result[0].lead_shareholder_id == "sh-1"
    assert result[1].lead_shareholder_id is None
    assert result[1].end_date == "2024-12-20"
    assert result[2].lead_shareholder_id is None
    assert result[2].end_date is None


def test_read_projects_invalid_start_date(tmp_path) -> None:
    path = _csv(
        tmp_path,
        "projects.csv",
        "id,name,company_id,start_date\np-01,X,c-01,januari\n",
    )

    with pytest.raises(ValueError, match="'start_date' column of projects"):
        read_projects(path)


def test_load_ledger_relations(tmp_path, caplog) -> None:
    """Projects of unknown companies are kept and reported."""
    companies = _csv(tmp_path, "companies.csv", "id,name,type\nc-01,Klant BV,KLANT\n")
    projects = _csv(
        tmp_path,
        "projects.csv",
        "id,name,company_id,start_date\n"
        "p-01,Chatbot,c-01,2025-01-06\n"
        "p-02,Audit,c-99,2025-03-01\n",
    )

    with caplog.at_level("WARNING", logger="smb_bookkeeping.io"):
        ledger = load_ledger(DataPaths(companies=companies, projects=projects))

    assert [c.name for c in ledger.companies] == ["Klant BV"]
    assert [p.id for p in ledger.projects] == ["p-01", "p-02"]
    assert "c-99" in caplog.text
