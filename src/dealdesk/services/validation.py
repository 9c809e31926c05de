# src/dealdesk/services/validation.py

from typing import Any, Mapping

from pydantic import AliasChoices

from dealdesk.domain.deal import DealRecord

# Amount fields whose raw text gets format/range checks in guardrails
AMOUNT_FIELDS = [
    "funding_amount",
    "annual_income",
    "bank_balance",
    "current_value",
    "arv",
    "rehab_costs",
]

MAX_AMOUNT = 999_999_999.0


def _field_keys(field_name: str) -> list[str]:
    """All accepted input keys for a DealRecord field (snake, camel, column name)."""
    alias = DealRecord.model_fields[field_name].validation_alias
    if isinstance(alias, AliasChoices):
        return [c for c in alias.choices if isinstance(c, str)]
    return [field_name]


def raw_value(raw: Mapping[str, Any], field_name: str) -> Any:
    """First value present in the raw payload for a field, under any of its keys."""
    for key in _field_keys(field_name):
        if key in raw:
            return raw[key]
    return None


def prepare_deal(raw: Any) -> DealRecord:
    """
    Normalize an incoming deal payload.

    Responsibilities:
      - Reject payloads that are not a mapping (nothing to score).
      - Hand everything else to DealRecord, which parses messy text
        leniently (bad numbers -> 0, unknown buckets -> defaults).
    """
    if isinstance(raw, DealRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"Deal payload must be an object, got {type(raw).__name__}")
    return DealRecord.model_validate(dict(raw))
