# dealdesk/services/batch.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
from loguru import logger

from dealdesk.domain.catalog import LenderCatalog
from dealdesk.services.deal_analyzer import analyze_deal

SCORE_COLUMNS = [
    "overall_score",
    "deal_structure",
    "financial_readiness",
    "experience_level",
    "property_analysis",
]


def _row_to_payload(row: pd.Series) -> Dict[str, Any]:
    """
    Convert a CSV row into an analyze_deal payload.

    Column names may be snake_case, the form's camelCase or the stored-row
    names; DealRecord resolves them. Empty cells become None.
    """
    return {str(k): (None if pd.isna(v) else v) for k, v in row.items()}


def score_frame(df: pd.DataFrame, catalog: LenderCatalog | None = None) -> pd.DataFrame:
    """Score every row; returns a copy of df with score/lender columns appended."""
    out = df.copy()

    rows: List[Dict[str, Any]] = []
    for idx, row in df.iterrows():
        payload = _row_to_payload(row)
        try:
            res = analyze_deal(payload, catalog=catalog)
        except Exception as exc:  # log and continue; one bad row shouldn't kill the batch
            logger.exception("Error scoring row", idx=idx, exc=exc)
            rows.append({c: float("nan") for c in SCORE_COLUMNS} | {"error": str(exc)})
            continue

        breakdown = res["score_breakdown"]
        best = res.get("best_match") or {}
        summary = res["lenders"]["summary"]
        recs = res.get("recommendations") or []
        rows.append(
            {
                "overall_score": res["overall_score"],
                "deal_structure": breakdown["deal_structure"],
                "financial_readiness": breakdown["financial_readiness"],
                "experience_level": breakdown["experience_level"],
                "property_analysis": breakdown["property_analysis"],
                "qualifying_lenders": summary["qualifying_lenders"],
                "best_lender": best.get("lender_name"),
                "best_rate": best.get("adjusted_rate"),
                "top_recommendation": recs[0] if recs else None,
                "guardrail_flags": len(res["guardrails"]["flags"]),
                "error": None,
            }
        )

    scored = pd.DataFrame(rows, index=df.index)
    for col in scored.columns:
        out[col] = scored[col]
    return out


def summarize_scores(scored: pd.DataFrame) -> Dict[str, Any]:
    ok = scored[scored["error"].isna()] if "error" in scored.columns else scored

    def safe_mean(col: str) -> float | None:
        if col not in ok.columns or len(ok) == 0:
            return None
        return float(ok[col].astype(float).mean())

    with_lender = int(ok["best_lender"].notna().sum()) if "best_lender" in ok.columns else 0

    return {
        "n_deals": int(len(scored)),
        "n_errors": int(len(scored) - len(ok)),
        "mean_scores": {c: safe_mean(c) for c in SCORE_COLUMNS},
        "deals_with_qualifying_lender": with_lender,
    }


def score_csv(input_csv: Path, output_csv: Path, catalog: LenderCatalog | None = None) -> Dict[str, Any]:
    """
    Score a CSV of deal submissions.

    Writes:
      - output_csv: input columns + scores, best lender, first recommendation
      - <output_csv stem>_summary.json next to it
    """
    logger.info("Starting batch scoring", input_csv=str(input_csv), output_csv=str(output_csv))

    if not input_csv.exists():
        raise FileNotFoundError(f"Deals CSV not found at {input_csv}")

    # everything as text: free-text amounts are parsed by DealRecord
    df = pd.read_csv(input_csv, dtype=str, keep_default_na=True)
    scored = score_frame(df, catalog=catalog)
    summary = summarize_scores(scored)

    output_csv.parent.mkdir(parents=True, exist_ok=True)
    scored.to_csv(output_csv, index=False)

    summary_path = output_csv.with_name(f"{output_csv.stem}_summary.json")
    summary_path.write_text(json.dumps(summary, indent=2))

    logger.info(
        "Batch scoring completed",
        n_deals=summary["n_deals"],
        n_errors=summary["n_errors"],
        output_csv=str(output_csv),
        summary_path=str(summary_path),
    )
    return summary
