# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB Bookkeeping.

This module wires together the main building blocks of SMB Bookkeeping:

- configuration (tax constants, quarter table, data paths, display options),
- CSV ledger loading,
- the computation engine (VAT, KIA, depreciation, summary, valuation),
- view helpers (tabular rendering),
- the optional advice text.

The CLI is intentionally thin: it does not implement any bookkeeping logic
itself. It loads the ledgers once, passes them to the engine functions and
renders the results.


Commands
--------

summary
    Financial summary (revenue, expenses, profit, VAT position, KIA).

vat-return [--year YYYY] [--quarter N]
    Quarterly VAT return, the filing deadline and the KIA figures of the
    same year. Defaults to the current quarter.

kia [--year YYYY]
    Qualifying investment total and KIA deduction (all investments when
    --year is omitted).

book-values [--as-of YYYY-MM-DD]
    Investments with their current book value.

valuation
    Company value and per-shareholder shares.

vat-split AMOUNT [--rate 0|9|21] [--incl | --excl]
    VAT calculator: net / VAT / gross of an amount.

relations
    Clients, suppliers and projects.

advice [--context TEXT]
    Advice text on the financial summary, generated by a language model.


Display modes and output
------------------------

``display.mode`` in the configuration ('table', 'csv' or 'both') can be
overridden with ``--display-mode``. CSV files are written to ``--output``
(default ``data/output``) with a timestamp-based name, e.g.
``vat_return_2025_Q1_YYYY-MM-DD-HH-MM-SS.csv``.


Examples
--------

    python -m smb_bookkeeping.cli summary
    python -m smb_bookkeeping.cli vat-return --year 2025 --quarter 1
    python -m smb_bookkeeping.cli --display-mode both --output reports kia --year 2025
    python -m smb_bookkeeping.cli vat-split 121 --rate 21 --incl
"""

import argparse
import logging
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .advice import get_financial_advice
from .config import AppConfig, load_app_config
from .depreciation import book_values
from .engine import compute_financial_summary
from .io import Ledger, load_ledger
from .kia import compute_kia_stats
from . import periods
from .periods import current_quarter, filing_deadline, quarter_window
from .valuation import compute_company_valuation
from .vat import compute_vat_report, split_vat
from .views import (
    book_values_to_dataframe,
    companies_to_dataframe,
    format_deadline,
    kia_stats_to_dataframe,
    projects_to_dataframe,
    summary_to_dataframe,
    valuation_to_dataframe,
    vat_report_to_dataframe,
)

Tables = list[tuple[str, str, pd.DataFrame]]


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m smb_bookkeeping.cli",
        description=(
            "SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs. "
            "Reads invoices, expenses and investments, and computes VAT "
            "returns, KIA, book values, a financial summary and a company "
            "valuation."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of smb_bookkeeping and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'smb_bookkeeping_config.toml' in the current directory is used "
            "when present."
        ),
    )
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, 'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory for CSV files when display mode includes 'csv'. "
            "If omitted, 'data/output' is used."
        ),
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING).",
    )

    subparsers = ap.add_subparsers(
        dest="command",
        metavar="command",
        help="Computation to run.",
    )

    subparsers.add_parser("summary", help="Show the financial summary.")

    vat_return = subparsers.add_parser(
        "vat-return", help="Compute the quarterly VAT return."
    )
    vat_return.add_argument(
        "--year", type=int, help="Calendar year (default: current year)."
    )
    vat_return.add_argument(
        "--quarter",
        type=int,
        choices=[1, 2, 3, 4],
        help="Quarter number (default: current quarter).",
    )

    kia = subparsers.add_parser("kia", help="Compute the KIA deduction.")
    kia.add_argument(
        "--year",
        type=int,
        help="Restrict to investments acquired in this calendar year.",
    )

    bv = subparsers.add_parser(
        "book-values", help="List investments with their book value."
    )
    bv.add_argument(
        "--as-of",
        dest="as_of",
        help="Reference date (YYYY-MM-DD). Defaults to now.",
    )

    subparsers.add_parser(
        "valuation", help="Show the company value and shareholder shares."
    )

    split = subparsers.add_parser("vat-split", help="Split an amount into net/VAT.")
    split.add_argument("amount", type=float, help="Amount to split.")
    split.add_argument(
        "--rate",
        type=int,
        default=21,
        help="VAT rate in percent (default: 21).",
    )
    incl_group = split.add_mutually_exclusive_group()
    incl_group.add_argument(
        "--incl",
        dest="vat_included",
        action="store_true",
        default=True,
        help="The amount includes VAT (default).",
    )
    incl_group.add_argument(
        "--excl",
        dest="vat_included",
        action="store_false",
        help="The amount excludes VAT.",
    )

    subparsers.add_parser("relations", help="List clients, suppliers and projects.")

    advice = subparsers.add_parser(
        "advice", help="Ask a language model for advice on the summary."
    )
    advice.add_argument(
        "--context",
        default="",
        help="Question or context for the advisor.",
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _render(
    tables: Tables,
    display_mode: str,
    output_dir: Optional[str],
) -> None:
    """
    Render (title, file stem, table) triples to stdout and/or CSV files.
    """
    if display_mode in {"table", "both"}:
        for title, _, df in tables:
            print()
            print(f"=== {title} ===")
            print(df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        out = Path(output_dir) if output_dir else Path("data/output")
        out.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for _, stem, df in tables:
            path = out / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def _handle_summary(ledger: Ledger, config: AppConfig) -> Tables:
    summary = compute_financial_summary(
        ledger.invoices,
        ledger.expenses,
        ledger.investments,
        manual_correction=config.valuation.manual_correction,
        kia_config=config.kia,
    )
    return [
        (
            "Financieel overzicht",
            "summary",
            summary_to_dataframe(summary, config.decimals),
        )
    ]


def _handle_vat_return(
    args: argparse.Namespace, ledger: Ledger, config: AppConfig
) -> Tables:
    today = periods._today()
    year = args.year or today.year
    quarter = args.quarter or current_quarter(today)

    period = quarter_window(year, quarter, config.vat.quarters)
    report = compute_vat_report(
        ledger.invoices, ledger.expenses, year, quarter, config.vat.quarters
    )
    deadline = filing_deadline(year, quarter, config.vat.quarters)
    stats = compute_kia_stats(ledger.investments, year=year, config=config.kia)

    print(f"Applied period: {period.label} ({period.start} → {period.end})")
    print(f"Filing deadline: {format_deadline(deadline)}")

    return [
        (
            f"BTW aangifte {report.period} {report.year}",
            f"vat_return_{year}_{report.period}",
            vat_report_to_dataframe(report, config.decimals),
        ),
        (
            f"Inkomstenbelasting (KIA) {year}",
            f"kia_{year}",
            kia_stats_to_dataframe(stats, config.decimals),
        ),
    ]


def _handle_kia(
    args: argparse.Namespace, ledger: Ledger, config: AppConfig
) -> Tables:
    stats = compute_kia_stats(ledger.investments, year=args.year, config=config.kia)
    stem = f"kia_{args.year}" if args.year else "kia"
    return [("KIA", stem, kia_stats_to_dataframe(stats, config.decimals))]


def _handle_book_values(
    args: argparse.Namespace, ledger: Ledger, config: AppConfig
) -> Tables:
    as_of = _parse_optional_date(args.as_of)
    now = (
        datetime.combine(as_of, time.min, tzinfo=timezone.utc)
        if as_of is not None
        else None
    )
    values = book_values(ledger.investments, now)
    return [
        (
            "Investeringen",
            "book_values",
            book_values_to_dataframe(values, config.decimals),
        )
    ]


def _handle_valuation(ledger: Ledger, config: AppConfig) -> Tables:
    summary = compute_financial_summary(
        ledger.invoices,
        ledger.expenses,
        ledger.investments,
        manual_correction=config.valuation.manual_correction,
        kia_config=config.kia,
    )
    valuation = compute_company_valuation(summary, ledger.shareholders)

    if valuation.shares and valuation.total_percentage != 100:
        print(
            "Warning: shareholder percentages add up to "
            f"{valuation.total_percentage:g}%, not 100%."
        )

    return [
        (
            "Bedrijf & waardering",
            "valuation",
            valuation_to_dataframe(valuation, config.decimals),
        )
    ]


def _handle_relations(ledger: Ledger) -> Tables:
    return [
        (
            "Klanten & relaties",
            "companies",
            companies_to_dataframe(ledger.companies),
        ),
        (
            "Projecten",
            "projects",
            projects_to_dataframe(
                ledger.projects, ledger.companies, ledger.shareholders
            ),
        ),
    ]


def _handle_vat_split(args: argparse.Namespace, config: AppConfig) -> None:
    if args.rate not in config.vat.rates:
        raise SystemExit(
            f"Invalid VAT rate: {args.rate}. Expected one of {list(config.vat.rates)}."
        )
    result = split_vat(args.amount, args.vat_included, args.rate)
    d = config.decimals
    print(
        f"Excl: {result.net:.{d}f} | BTW: {result.vat:.{d}f} | "
        f"Totaal: {result.gross:.{d}f}"
    )


def _handle_advice(
    args: argparse.Namespace, ledger: Ledger, config: AppConfig
) -> None:
    summary = compute_financial_summary(
        ledger.invoices,
        ledger.expenses,
        ledger.investments,
        manual_correction=config.valuation.manual_correction,
        kia_config=config.kia,
    )
    print(get_financial_advice(summary, args.context, config.advice))


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the SMB Bookkeeping CLI.

    This function parses command-line arguments, loads the configuration,
    loads the CSV ledgers, runs the requested computation and renders the
    result as console tables and/or CSV files.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"smb_bookkeeping version {__version__}")
        return

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return

    config = load_app_config(args.config_path)

    # The VAT calculator does not need any ledger.
    if args.command == "vat-split":
        _handle_vat_split(args, config)
        return

    ledger = load_ledger(config.data, config.vat.rates)

    if args.command == "advice":
        _handle_advice(args, ledger, config)
        return

    if args.command == "summary":
        tables = _handle_summary(ledger, config)
    elif args.command == "vat-return":
        tables = _handle_vat_return(args, ledger, config)
    elif args.command == "kia":
        tables = _handle_kia(args, ledger, config)
    elif args.command == "book-values":
        tables = _handle_book_values(args, ledger, config)
    elif args.command == "valuation":
        tables = _handle_valuation(ledger, config)
    elif args.command == "relations":
        tables = _handle_relations(ledger)
    else:
        parser.error(f"Unknown command: {args.command}")

    display_mode = args.display_mode or config.display_mode
    _render(tables, display_mode, args.output_dir)


if __name__ == "__main__":
    main()
