# src/dealdesk/services/guardrails.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from dealdesk.adapters.logging_utils import get_logger
from dealdesk.domain.deal import DealRecord
from dealdesk.domain.parsing import parse_amount, ratio_pct
from dealdesk.services.validation import AMOUNT_FIELDS, MAX_AMOUNT, raw_value

logger = get_logger(__name__)

_AMOUNT_TEXT = re.compile(r"^[\$,0-9.\s]*$")


def apply_guardrails(
    raw: Mapping[str, Any],
    deal: DealRecord,
    result: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Attach simple sanity checks to the deal analysis result.

    Produces:
        result["guardrails"] = {
            "has_flags": bool,
            "flags": [
                {
                    "code": "LTV_ABOVE_100",
                    "severity": "warning" | "error",
                    "message": "...human readable...",
                    "context": {...raw numbers...},
                },
                ...
            ],
        }

    These do *not* block scoring; messy input is still scored leniently,
    the flags just tell the caller which numbers were guessed at.
    """
    flags: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    # 1) Raw amount text
    # ------------------------------------------------------------------
    for field in AMOUNT_FIELDS:
        val = raw_value(raw, field)
        if val is None or isinstance(val, bool):
            continue
        if isinstance(val, str) and val.strip() and not _AMOUNT_TEXT.match(val):
            flags.append(
                {
                    "code": "AMOUNT_FORMAT",
                    "severity": "warning",
                    "message": f"{field} has characters outside $ , . and digits; parsed leniently.",
                    "context": {"field": field, "raw": val, "parsed": parse_amount(val)},
                }
            )
        parsed = parse_amount(val)
        if parsed > MAX_AMOUNT:
            flags.append(
                {
                    "code": "AMOUNT_OUT_OF_RANGE",
                    "severity": "error",
                    "message": f"{field} is above $999,999,999.",
                    "context": {"field": field, "parsed": parsed},
                }
            )

    # ------------------------------------------------------------------
    # 2) Basic data sanity
    # ------------------------------------------------------------------
    if deal.funding_amount <= 0:
        flags.append(
            {
                "code": "FUNDING_AMOUNT_MISSING",
                "severity": "warning",
                "message": "Funding amount is missing or zero.",
                "context": {"funding_amount": deal.funding_amount},
            }
        )

    # ------------------------------------------------------------------
    # 3) Leverage sanity
    # ------------------------------------------------------------------
    ltv = ratio_pct(deal.funding_amount, deal.value)
    if ltv is not None and ltv > 100:
        flags.append(
            {
                "code": "LTV_ABOVE_100",
                "severity": "warning",
                "message": "Requested loan is larger than the property's current value.",
                "context": {"funding_amount": deal.funding_amount, "current_value": deal.value, "ltv": ltv},
            }
        )

    # ------------------------------------------------------------------
    # 4) Rehab / ARV sanity
    # ------------------------------------------------------------------
    if deal.value > 0 and deal.rehab_costs > deal.value:
        flags.append(
            {
                "code": "REHAB_EXCEEDS_VALUE",
                "severity": "error",
                "message": "Rehab budget exceeds current value. Check the estimate.",
                "context": {"rehab_costs": deal.rehab_costs, "current_value": deal.value},
            }
        )

    if deal.is_flip and deal.arv > 0 and deal.value > 0 and deal.arv < deal.value:
        flags.append(
            {
                "code": "ARV_BELOW_VALUE",
                "severity": "warning",
                "message": "ARV is below current value on a flip. Likely a data entry issue.",
                "context": {"arv": deal.arv, "current_value": deal.value},
            }
        )

    # ------------------------------------------------------------------
    # Attach & log
    # ------------------------------------------------------------------
    result.setdefault("guardrails", {})
    result["guardrails"]["flags"] = flags
    result["guardrails"]["has_flags"] = bool(flags)

    if flags:
        logger.info("deal_guardrails_flags", extra={"context": {"codes": [f["code"] for f in flags]}})

    return result
