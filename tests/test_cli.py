from datetime import date
from pathlib import Path

import pytest

import smb_bookkeeping.periods as periods
from smb_bookkeeping import __version__
from smb_bookkeeping.cli import main


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small ledger and a config file pointing at it."""
    data = tmp_path / "data"
    data.mkdir()
    (data / "invoices.csv").write_text(
        "id,number,type,date,status\n"
        "inv-1,2025-001,VERKOOP,2025-01-15,VERSTUURD\n"
        "inv-2,2025-002,VERKOOP,2025-02-10,BETAALD\n",
        encoding="utf-8",
    )
    (data / "invoice_lines.csv").write_text(
        "invoice_id,description,amount,vat_rate\n"
        "inv-1,Consultancy,100,21\n"
        "inv-2,Boeken,200,9\n",
        encoding="utf-8",
    )
    (data / "expenses.csv").write_text(
        "date,amount_excl,vat_amount\n2025-03-01,50,10\n",
        encoding="utf-8",
    )
    (data / "investments.csv").write_text(
        "date,purchase_value,residual_value,lifespan_years\n"
        "2025-01-10,3000,0,5\n",
        encoding="utf-8",
    )
    (data / "shareholders.csv").write_text(
        "id,name,default_percentage\nsh-1,Anna,50\nsh-2,Bram,50\n",
        encoding="utf-8",
    )
    (data / "companies.csv").write_text(
        "id,name,type,city,kvk\n"
        "c-10,Verhuur BV,LEVERANCIER,Utrecht,\n"
        "c-01,Klant BV,KLANT,Amsterdam,12345678\n",
        encoding="utf-8",
    )
    (data / "projects.csv").write_text(
        "id,name,company_id,start_date,status,lead_shareholder_id\n"
        "p-01,Chatbot,c-01,2025-01-06,ACTIEF,sh-1\n"
        "p-02,Audit,c-99,2025-03-01,VOLTOOID,BOTH\n",
        encoding="utf-8",
    )
    config = tmp_path / "smb_bookkeeping_config.toml"
    config.write_text(
        """
[company]
name = "Acme VOF"

[data]
invoices = "data/invoices.csv"
invoice_lines = "data/invoice_lines.csv"
expenses = "data/expenses.csv"
investments = "data/investments.csv"
shareholders = "data/shareholders.csv"
companies = "data/companies.csv"
projects = "data/projects.csv"
""",
        encoding="utf-8",
    )
    return config


def test_version(capsys) -> None:
    main(["--version"])

    assert f"smb_bookkeeping version {__version__}" in capsys.readouterr().out


def test_vat_split_included(capsys, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    main(["vat-split", "121", "--rate", "21", "--incl"])

    assert "Excl: 100.00 | BTW: 21.00 | Totaal: 121.00" in capsys.readouterr().out


def test_vat_split_excluded(capsys, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    main(["vat-split", "200", "--rate", "9", "--excl"])

    assert "Excl: 200.00 | BTW: 18.00 | Totaal: 218.00" in capsys.readouterr().out


def test_vat_split_rejects_unknown_rate(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit):
        main(["vat-split", "100", "--rate", "19"])


def test_vat_return(capsys, project) -> None:
    main(["--config", str(project), "vat-return", "--year", "2025", "--quarter", "1"])

    out = capsys.readouterr().out
    assert "Applied period: Q1 2025" in out
    assert "Filing deadline: 30-04-2025" in out
    assert "BTW aangifte Q1 2025" in out
    assert "Voorbelasting" in out
    assert "29.0" in out


def test_vat_return_csv_output(capsys, project, tmp_path) -> None:
    out_dir = tmp_path / "reports"

    main(
        [
            "--config",
            str(project),
            "--display-mode",
            "csv",
            "--output",
            str(out_dir),
            "vat-return",
            "--year",
            "2025",
            "--quarter",
            "4",
        ]
    )

    files = sorted(p.name for p in out_dir.glob("*.csv"))
    assert len(files) == 2
    assert files[0].startswith("kia_2025_")
    assert files[1].startswith("vat_return_2025_Q4_")
    assert "Filing deadline: 31-01-2026" in capsys.readouterr().out


def test_summary(capsys, project) -> None:
    main(["--config", str(project), "summary"])

    out = capsys.readouterr().out
    assert "Financieel overzicht" in out
    assert "Omzet" in out
    assert "300.0" in out


def test_valuation(capsys, project) -> None:
    main(["--config", str(project), "valuation"])

    out = capsys.readouterr().out
    assert "Anna" in out
    assert "Totale bedrijfswaarde" in out
    assert "Warning" not in out


def test_book_values_as_of(capsys, project) -> None:
    main(["--config", str(project), "book-values", "--as-of", "2025-01-10"])

    out = capsys.readouterr().out
    assert "3000.0" in out


def test_book_values_invalid_date(project) -> None:
    with pytest.raises(SystemExit):
        main(["--config", str(project), "book-values", "--as-of", "10-01-2025"])


def test_advice_without_key(capsys, project, monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    main(["--config", str(project), "advice", "--context", "Hoe sta ik ervoor?"])

    assert "API key niet gevonden" in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    main([])

    assert "usage:" in capsys.readouterr().out


def test_vat_return_defaults_to_current_quarter(capsys, project, monkeypatch) -> None:
    """Without --year/--quarter the quarter containing today is used."""
    monkeypatch.setattr(periods, "_today", lambda: date(2025, 11, 20))

    main(["--config", str(project), "vat-return"])

    out = capsys.readouterr().out
    assert "Applied period: Q4 2025" in out
    assert "Filing deadline: 31-01-2026" in out


def test_relations(capsys, project) -> None:
    main(["--config", str(project), "relations"])

    out = capsys.readouterr().out
    assert "Klanten & relaties" in out
    assert out.index("Klant BV") < out.index("Verhuur BV")
    assert "Projecten" in out
    assert "Chatbot" in out
    assert "Anna" in out
    assert "Gezamenlijk" in out
    assert "Onbekend" in out
