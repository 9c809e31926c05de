# src/dealdesk/domain/parsing.py
from __future__ import annotations

import math
import re
from typing import Any

# Leading float after non-numeric characters are stripped ("1.2.3" -> 1.2)
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d*)?|\.\d+")

_TRUE_WORDS = {"yes", "y", "true", "t", "1"}


def parse_amount(val: Any) -> float:
    """
    Defensive numeric parse for free-text currency/percent fields.

      "$250,000"  -> 250000.0
      "6.5%"      -> 6.5
      ""          -> 0.0
      "n/a"       -> 0.0
      None        -> 0.0

    Every character that is not a digit or '.' is dropped before parsing,
    so signs are dropped too. Never raises.
    """
    if val is None or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float)):
        try:
            f = float(val)
        except OverflowError:
            return 0.0
        return f if math.isfinite(f) else 0.0

    cleaned = re.sub(r"[^0-9.]", "", str(val))
    m = _LEADING_FLOAT.match(cleaned)
    if not m:
        return 0.0
    try:
        f = float(m.group(0))
    except ValueError:
        return 0.0
    return f if math.isfinite(f) else 0.0


def parse_optional_amount(val: Any) -> float | None:
    """Like parse_amount, but blank/missing stays None so callers can tell 'not provided' from 0."""
    if val is None:
        return None
    if isinstance(val, str) and not val.strip():
        return None
    return parse_amount(val)


def parse_flag(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return val == 1
    if isinstance(val, str):
        return val.strip().lower() in _TRUE_WORDS
    return False


def parse_text(val: Any) -> str:
    if val is None:
        return ""
    try:
        return str(val)
    except ValueError:
        # ints past the interpreter's str-conversion digit limit
        return ""


def normalize_label(val: Any) -> str:
    """'Multi-Family' / 'multi_family' / ' multi family ' -> 'multi family'"""
    s = parse_text(val).lower().replace("_", " ").replace("-", " ")
    return " ".join(s.split())


def ratio_pct(numerator: float, denominator: float) -> float | None:
    """numerator / denominator * 100, or None when the denominator is absent."""
    if denominator <= 0:
        return None
    return numerator / denominator * 100.0


def format_money(x: float) -> str:
    """250000 -> '$250,000'; cents only when present ('$41,250.50')."""
    if float(x).is_integer():
        return f"${x:,.0f}"
    return f"${x:,.2f}"
