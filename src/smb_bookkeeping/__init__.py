# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB Bookkeeping
---------------

A Python bookkeeping toolkit for small Dutch businesses (VOF, eenmanszaak).
The project provides a pure financial computation engine and a thin
command-line interface around it.

Main capabilities:
- VAT (BTW) split/compose helpers for amounts including or excluding VAT,
- quarterly VAT return figures (rubrieken 1a, 1b and 5b),
- small-scale investment deduction (KIA) with configurable brackets,
- straight-line book values for investments,
- a rolled-up financial summary for the dashboard,
- company valuation and per-shareholder shares,
- optional AI-generated financial advice text.

SMB Bookkeeping separates computation (engine modules), configuration (TOML),
input (CSV ledgers) and presentation (CLI), so the engine can be reused by
any front-end that already holds the ledger records in memory.


Version: 0.1.0

Usage:
    python -m smb_bookkeeping.cli --help
"""

__all__ = ["engine", "vat", "kia", "depreciation", "valuation", "models"]

__version__ = "0.1.0"
