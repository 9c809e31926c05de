from __future__ import annotations

from typing import Any

from dealdesk.adapters.catalog_loader import get_active_catalog
from dealdesk.adapters.logging_utils import get_logger
from dealdesk.analysis.lenders import match_lenders
from dealdesk.analysis.recommendations import generate_recommendations, generate_success_messages
from dealdesk.analysis.scoring import compute_scores
from dealdesk.domain.catalog import LenderCatalog
from dealdesk.domain.ports import DealRepository, ScoreColumns
from dealdesk.domain.underwriting import ScoreBreakdown
from dealdesk.services.guardrails import apply_guardrails
from dealdesk.services.validation import prepare_deal

logger = get_logger(__name__)


def score_columns(scores: ScoreBreakdown) -> ScoreColumns:
    """Column names the stored deal row uses for the score write-back."""
    return {
        "analysis_score": scores.overall,
        "deal_structure_score": scores.deal_structure,
        "financial_readiness_score": scores.financial_readiness,
        "experience_level_score": scores.experience_level,
        "property_analysis_score": scores.property_analysis,
    }


def analyze_deal(
    raw_payload: dict[str, Any],
    catalog: LenderCatalog | None = None,
    repo: DealRepository | None = None,
    *,
    save: bool = False,
) -> dict[str, Any]:
    """
    Main analysis entrypoint.

    - scores the deal (four sub-scores + overall)
    - matches it against the lender catalog (active catalog when None)
    - explains weak areas and lists strengths / common lender issues
    - save=True with a repo writes the score columns back; a failed write
      is logged and the analysis is still returned
    """
    deal = prepare_deal(raw_payload)
    catalog = catalog or get_active_catalog()

    scores = compute_scores(deal)
    matches = match_lenders(deal, catalog)
    lenders = matches.to_dict()

    result: dict[str, Any] = {
        "overall_score": scores.overall,
        "score_breakdown": scores.to_dict(),
        "lenders": lenders,
        "best_match": lenders["best_match"],
        "recommendations": generate_recommendations(deal, scores),
        "deal_strengths": generate_success_messages(deal, scores),
        "deal_weaknesses": list(matches.common_issues),
    }

    result = apply_guardrails(raw=raw_payload, deal=deal, result=result)

    logger.info(
        "deal_analyzed",
        extra={
            "context": {
                "overall": scores.overall,
                "qualifying_lenders": matches.summary.qualifying_lenders,
                "catalog_version": catalog.version,
            }
        },
    )

    deal_id: int | None = None
    if save and repo is not None:
        try:
            deal_id = repo.save_analysis({**result, **score_columns(scores)}, dict(raw_payload))
        except Exception as e:
            # persistence must not break analysis
            logger.warning("save_analysis_failed", extra={"context": {"error": str(e)}})
            deal_id = None

    if deal_id is not None:
        result["deal_id"] = deal_id

    return result
