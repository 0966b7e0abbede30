# SMB Bookkeeping - Bookkeeping & VAT engine for Dutch SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Optional financial advice text generated by a language model.

The financial summary is rendered into a short Dutch prompt and sent to the
configured model through LiteLLM, so any provider LiteLLM supports can be
used ("gemini/gemini-2.5-flash" by default, "gpt-4.1-mini",
"anthropic/...", ...). The API key is read from the environment variable
named in AdviceConfig.api_key_env.

The advice is a convenience feature: a missing key or a provider failure
never raises to the caller. A fixed message is returned instead and the
failure is logged.
"""

import logging
import os
from typing import Optional

import litellm

from .config import AdviceConfig
from .models import FinancialSummary

for _ln in ("LiteLLM", "litellm", "httpx", "httpcore"):
    logging.getLogger(_ln).setLevel(logging.ERROR)

litellm.suppress_debug_info = True

logger = logging.getLogger(__name__)

MSG_DISABLED = "Advies is uitgeschakeld in de configuratie."
MSG_NO_KEY = "API key niet gevonden of geconfigureerd."
MSG_EMPTY = "Geen advies gegenereerd."
MSG_ERROR = "Er is een fout opgetreden bij het ophalen van advies."


def build_advice_prompt(
    summary: FinancialSummary, context: str, company_name: str = "LLM Solution"
) -> str:
    """Render the advisor prompt for a financial summary and a user question."""
    return f"""
Je bent een strikte, zakelijke Nederlandse belastingadviseur voor een VOF genaamd "{company_name}".

Financiële Context:
- Omzet: €{summary.revenue:.2f}
- Kosten: €{summary.expenses:.2f}
- Investeringen: €{summary.investments:.2f}
- Winst: €{summary.profit:.2f}
- Te betalen BTW: €{summary.vat_payable:.2f}
- Te vorderen BTW: €{summary.vat_deductible:.2f}
- Netto BTW positie: €{summary.vat_total:.2f}

Gebruikersvraag/Context: "{context}"

Geef beknopt, tekst-gebaseerd advies. Focus op:
1. Liquiditeit voor de aankomende BTW aangifte.
2. Potentiële belastingvoordelen (zoals KOR of KIA indien relevant op basis van bedragen).
3. Risico's.

Houd de toon formeel en minimalistisch. Gebruik geen markdown formatting behalve newlines.
""".strip()


def _api_key(config: AdviceConfig) -> Optional[str]:
    key = os.environ.get(config.api_key_env, "").strip()
    return key or None


def get_financial_advice(
    summary: FinancialSummary,
    context: str,
    config: AdviceConfig = AdviceConfig(),
) -> str:
    """
    Ask the configured model for advice on the financial summary.

    Returns:
        The advice text, or a fixed Dutch message when advice is disabled,
        no API key is configured, the model returns nothing or the call
        fails.
    """
    if not config.enabled:
        return MSG_DISABLED

    api_key = _api_key(config)
    if api_key is None:
        logger.warning("No API key found in $%s, advice skipped", config.api_key_env)
        return MSG_NO_KEY

    prompt = build_advice_prompt(summary, context, config.company_name)

    try:
        response = litellm.completion(
            model=config.model,
            messages=[{"role": "user", "content": prompt}],
            api_key=api_key,
        )
        content = response.choices[0].message.content
    except Exception:  # noqa: BLE001
        logger.exception("Advice request to %s failed", config.model)
        return MSG_ERROR

    return content or MSG_EMPTY
