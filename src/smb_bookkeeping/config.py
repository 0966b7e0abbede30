# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB Bookkeeping.

This module is responsible for:
- loading the application configuration from a TOML file,
- providing the tax-year constants (KIA brackets, VAT rates, quarter table)
  that are passed verbatim into the computation engine,
- parsing the manual valuation correction into a typed value,
- exposing typed dataclasses used by the rest of the application.

The engine modules never read this file themselves: callers load an
AppConfig once and hand the relevant sections (KiaConfig, VatConfig, ...)
to the engine functions. Changing tax year therefore only requires a new
configuration file.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional

import tomllib  # Python 3.11+

DEFAULT_CONFIG_FILE = "smb_bookkeeping_config.toml"


@dataclass(frozen=True)
class KiaConfig:
    """
    Brackets of the small-scale investment deduction (KIA).

    Defaults are the Dutch 2024 values.
    """

    threshold_min: float = 2801.0
    min_item_value: float = 450.0
    bracket_1_max: float = 69765.0
    bracket_2_max: float = 129194.0
    bracket_3_max: float = 387580.0
    pct_low: float = 0.28
    fixed_mid: float = 19535.0
    reduction_pct: float = 0.0756


@dataclass(frozen=True)
class QuarterDef:
    """
    One VAT filing quarter.

    Attributes
    ----------
    quarter:
        Quarter number (1-4).
    start_month, end_month:
        Two-digit months ('01' .. '12') bounding the quarter.
    deadline:
        Filing deadline as 'MM-DD'.
    deadline_next_year:
        True when the deadline falls in the year after the quarter (Q4).
    """

    quarter: int
    start_month: str
    end_month: str
    deadline: str
    deadline_next_year: bool = False

    @property
    def name(self) -> str:
        return f"Q{self.quarter}"


DEFAULT_QUARTERS: tuple[QuarterDef, ...] = (
    QuarterDef(1, "01", "03", "04-30"),
    QuarterDef(2, "04", "06", "07-31"),
    QuarterDef(3, "07", "09", "10-31"),
    QuarterDef(4, "10", "12", "01-31", deadline_next_year=True),
)


@dataclass(frozen=True)
class VatConfig:
    """Permitted VAT rates (percent) and the quarter table."""

    rates: tuple[int, ...] = (0, 9, 21)
    quarters: tuple[QuarterDef, ...] = DEFAULT_QUARTERS


@dataclass(frozen=True)
class ValuationConfig:
    """Valuation settings. ``manual_correction`` is added to the company value."""

    manual_correction: float = 0.0


@dataclass(frozen=True)
class AdviceConfig:
    """Settings for the optional LLM advice text."""

    enabled: bool = True
    model: str = "gemini/gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    company_name: str = "LLM Solution"


@dataclass(frozen=True)
class DataPaths:
    """Locations of the CSV ledgers. Any path may be None (empty collection)."""

    invoices: Optional[Path] = None
    invoice_lines: Optional[Path] = None
    expenses: Optional[Path] = None
    investments: Optional[Path] = None
    shareholders: Optional[Path] = None
    companies: Optional[Path] = None
    projects: Optional[Path] = None


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB Bookkeeping.

    This aggregates:
    - company name and presentation currency,
    - the CSV ledger locations,
    - the tax constants (KIA brackets, VAT rates and quarters),
    - valuation and advice settings,
    - display options for tables.
    """

    company_name: str = "LLM Solution"
    currency: str = "EUR"
    data: DataPaths = field(default_factory=DataPaths)
    kia: KiaConfig = field(default_factory=KiaConfig)
    vat: VatConfig = field(default_factory=VatConfig)
    valuation: ValuationConfig = field(default_factory=ValuationConfig)
    advice: AdviceConfig = field(default_factory=AdviceConfig)
    display_mode: str = "table"
    decimals: int = 2


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return a sub-table, or an empty mapping when missing or malformed."""
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        return {}
    return value


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for '{key}': expected a number.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for '{key}': expected a number.") from exc


def parse_manual_correction(raw: Any) -> float:
    """
    Parse the manual valuation correction setting.

    The setting used to be stored as free-form JSON. It is now parsed once at
    the boundary:

    - None or an empty string -> 0.0,
    - int / float / numeric string -> float,
    - anything else -> ValueError.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    return _as_float(raw, "valuation.manual_correction")


def _parse_kia(section: Mapping[str, Any]) -> KiaConfig:
    defaults = KiaConfig()
    values: dict[str, float] = {}
    for key in (
        "threshold_min",
        "min_item_value",
        "bracket_1_max",
        "bracket_2_max",
        "bracket_3_max",
        "pct_low",
        "fixed_mid",
        "reduction_pct",
    ):
        raw = section.get(key, getattr(defaults, key))
        values[key] = _as_float(raw, f"kia.{key}")

    if not (
        values["threshold_min"]
        <= values["bracket_1_max"]
        <= values["bracket_2_max"]
        <= values["bracket_3_max"]
    ):
        raise ValueError(
            "KIA brackets must be ascending: "
            "threshold_min <= bracket_1_max <= bracket_2_max <= bracket_3_max."
        )

    return KiaConfig(**values)


def _parse_month(value: Any, key: str) -> str:
    try:
        month = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid month for '{key}': {value!r}.") from exc
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month for '{key}': {value!r}.")
    return f"{month:02d}"


def _parse_deadline(value: Any, key: str) -> str:
    """Validate an 'MM-DD' deadline and return it zero-padded."""
    raw = str(value).strip()
    parts = raw.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(
            f"Invalid deadline for '{key}': {value!r}. Expected 'MM-DD'."
        )
    month, day = int(parts[0]), int(parts[1])
    try:
        # Leap year, so that 02-29 is accepted.
        date(2000, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid deadline for '{key}': {value!r}.") from exc
    return f"{month:02d}-{day:02d}"


def _parse_quarters(section: Mapping[str, Any]) -> tuple[QuarterDef, ...]:
    """
    Parse the [vat.quarters] table.

    Each quarter is a sub-table named Q1 .. Q4 with ``start_month``,
    ``end_month`` and ``deadline`` ('MM-DD'). Quarters that are not
    configured keep their default definition.
    """
    quarters: list[QuarterDef] = []
    for default in DEFAULT_QUARTERS:
        raw = section.get(default.name)
        if not isinstance(raw, Mapping):
            quarters.append(default)
            continue

        key = f"vat.quarters.{default.name}"
        start = _parse_month(raw.get("start_month", default.start_month), key)
        end = _parse_month(raw.get("end_month", default.end_month), key)
        if end < start:
            raise ValueError(f"'{key}' end_month cannot be before start_month.")

        quarters.append(
            QuarterDef(
                quarter=default.quarter,
                start_month=start,
                end_month=end,
                deadline=_parse_deadline(
                    raw.get("deadline", default.deadline), key
                ),
                deadline_next_year=bool(
                    raw.get("deadline_next_year", default.deadline_next_year)
                ),
            )
        )
    return tuple(quarters)


def _parse_vat(section: Mapping[str, Any]) -> VatConfig:
    raw_rates = section.get("rates")
    if raw_rates is None:
        rates = VatConfig().rates
    else:
        try:
            rates = tuple(int(r) for r in raw_rates)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                "Invalid 'vat.rates', expected a list of integers."
            ) from exc

    quarters = _parse_quarters(_section(section, "quarters"))
    return VatConfig(rates=rates, quarters=quarters)


def _parse_data_paths(section: Mapping[str, Any], base_dir: Path) -> DataPaths:
    def _resolve_optional(rel: Optional[str]) -> Optional[Path]:
        if not rel:
            return None
        return (base_dir / str(rel)).resolve()

    return DataPaths(
        invoices=_resolve_optional(section.get("invoices")),
        invoice_lines=_resolve_optional(section.get("invoice_lines")),
        expenses=_resolve_optional(section.get("expenses")),
        investments=_resolve_optional(section.get("investments")),
        shareholders=_resolve_optional(section.get("shareholders")),
        companies=_resolve_optional(section.get("companies")),
        projects=_resolve_optional(section.get("projects")),
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB Bookkeeping configuration from a TOML file.

    Expected top-level sections in the TOML file (all optional)
    ------------------------------------------------------------
    [company]
        ``name`` and presentation ``currency``.

    [data]
        CSV ledger paths: ``invoices``, ``invoice_lines``, ``expenses``,
        ``investments``, ``shareholders``, ``companies``, ``projects``.

    [kia]
        KIA brackets (see KiaConfig).

    [vat]
        ``rates`` plus optional [vat.quarters.Q1] .. [vat.quarters.Q4]
        tables with ``start_month``, ``end_month`` and ``deadline``.

    [valuation]
        ``manual_correction`` added to the company value.

    [advice]
        ``enabled``, ``model`` (litellm model string) and ``api_key_env``.

    [display]
        ``mode`` ('table', 'csv' or 'both') and ``decimals``.

    All file paths are resolved relative to the directory of the TOML file.

    When ``config_path`` is None and the default file
    (smb_bookkeeping_config.toml in the current directory) does not exist,
    the built-in defaults are returned.

    Raises:
        FileNotFoundError: if an explicit config_path does not exist.
        ValueError: if a value cannot be parsed.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            return AppConfig()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    # 1) Company
    company_section = _section(raw, "company")
    company_name = str(company_section.get("name") or "LLM Solution")
    currency = str(company_section.get("currency") or "EUR")

    # 2) Data paths
    data_paths = _parse_data_paths(_section(raw, "data"), base_dir)

    # 3) Tax constants
    kia = _parse_kia(_section(raw, "kia"))
    vat = _parse_vat(_section(raw, "vat"))

    # 4) Valuation
    valuation_section = _section(raw, "valuation")
    valuation = ValuationConfig(
        manual_correction=parse_manual_correction(
            valuation_section.get("manual_correction")
        )
    )

    # 5) Advice
    advice_section = _section(raw, "advice")
    advice_defaults = AdviceConfig()
    advice = AdviceConfig(
        enabled=bool(advice_section.get("enabled", advice_defaults.enabled)),
        model=str(advice_section.get("model") or advice_defaults.model),
        api_key_env=str(
            advice_section.get("api_key_env") or advice_defaults.api_key_env
        ),
        company_name=company_name,
    )

    # 6) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in {"table", "csv", "both"}:
        raise ValueError(
            f"Invalid 'display.mode': {display_mode!r}. "
            "Expected 'table', 'csv' or 'both'."
        )
    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError):
        decimals = 2

    return AppConfig(
        company_name=company_name,
        currency=currency,
        data=data_paths,
        kia=kia,
        vat=vat,
        valuation=valuation,
        advice=advice,
        display_mode=display_mode,
        decimals=decimals,
    )
