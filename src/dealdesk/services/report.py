# src/dealdesk/services/report.py
from __future__ import annotations

from typing import Any

_AREA_LABELS = {
    "deal_structure": "Deal structure",
    "financial_readiness": "Financial readiness",
    "experience_level": "Experience level",
    "property_analysis": "Property analysis",
}


def _bullets(items: list[str]) -> list[str]:
    return [f"  - {item}" for item in items] or ["  (none)"]


def render_text_report(analysis: dict[str, Any]) -> str:
    """
    Plain-text summary of an analyze_deal() result, for email bodies and the CLI.
    """
    breakdown = analysis.get("score_breakdown") or {}
    lenders = analysis.get("lenders") or {}
    summary = lenders.get("summary") or {}
    best = analysis.get("best_match")

    lines = [f"Overall feasibility score: {analysis.get('overall_score', 0)}%", ""]

    lines.append("Score breakdown:")
    for key, label in _AREA_LABELS.items():
        lines.append(f"  {label:<20} {breakdown.get(key, 0):>3}")
    lines.append("")

    analyzed = summary.get("total_lenders_analyzed", 0)
    qualifying = summary.get("qualifying_lenders", 0)
    lines.append(f"Lenders: {qualifying} of {analyzed} qualify")
    if best:
        lines.append(f"  Best match: {best['lender_name']} at {best['adjusted_rate']:.2f}%")
        avg = summary.get("avg_qualifying_rate")
        if avg is not None:
            lines.append(f"  Average qualifying rate: {avg:.2f}%")
    lines.append("")

    lines.append("Recommendations:")
    lines.extend(_bullets(list(analysis.get("recommendations") or [])))
    lines.append("")

    lines.append("Strengths:")
    lines.extend(_bullets(list(analysis.get("deal_strengths") or [])))

    weaknesses = list(analysis.get("deal_weaknesses") or [])
    if weaknesses:
        lines.append("")
        lines.append("Common lender issues:")
        lines.extend(_bullets(weaknesses))

    return "\n".join(lines) + "\n"
