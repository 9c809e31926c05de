# src/dealdesk/analysis/scoring.py
from __future__ import annotations

import math
from typing import Sequence

from dealdesk.domain.deal import VOLUME_POINTS, CreditBucket, DealRecord
from dealdesk.domain.parsing import normalize_label, ratio_pct
from dealdesk.domain.underwriting import ScoreBreakdown

# Overall blend, in percent. Must sum to 100.
WEIGHTS = {
    "deal_structure": 25,
    "financial_readiness": 35,
    "experience_level": 20,
    "property_analysis": 20,
}

CLEAR_PURPOSES = {"purchase", "refinance"}

STANDARD_PROPERTY_TYPES = {
    "residential",
    "commercial",
    "single family",
    "multi family",
    "duplex",
    "triplex",
}

# (max LTV %, points); anything above the last breakpoint gets the tail value
STRUCTURE_LTV_BANDS: Sequence[tuple[float, int]] = ((70, 25), (75, 22), (80, 20), (85, 17), (90, 15))
STRUCTURE_LTV_TAIL = 5
PROPERTY_LTV_BANDS: Sequence[tuple[float, int]] = ((70, 30), (75, 25), (80, 20), (85, 15), (90, 10))
PROPERTY_LTV_TAIL = 5

LOAN_TO_ARV_BANDS: Sequence[tuple[float, int]] = ((70, 25), (75, 20), (80, 15))
LOAN_TO_ARV_TAIL = 10

REPAIR_RATIO_BANDS: Sequence[tuple[float, int]] = ((15, 25), (25, 20), (35, 15))
REPAIR_RATIO_TAIL = 10

# flat credit when the ratio's denominator is missing
NO_VALUE_LTV_POINTS = 10
NO_ARV_POINTS = 5
ARV_NOT_APPLICABLE_POINTS = 20
NO_REPAIR_DATA_POINTS = 10
NO_REPAIRS_POINTS = 25

INCOME_BANDS: Sequence[tuple[float, int]] = ((150_000, 25), (100_000, 20), (75_000, 15), (50_000, 10))
BALANCE_BANDS: Sequence[tuple[float, int]] = ((100_000, 25), (50_000, 20), (25_000, 15), (10_000, 10))
ASSET_BANDS: Sequence[tuple[float, int]] = ((3, 20), (2, 15), (1, 10))

UNKNOWN_CREDIT_POINTS = 60


# =====================================================================
# Helpers
# =====================================================================


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clamp_score(x: float) -> int:
    return max(0, min(100, _round_half_up(x)))


def _band_at_most(value: float, bands: Sequence[tuple[float, int]], tail: int) -> int:
    for limit, points in bands:
        if value <= limit:
            return points
    return tail


def _band_at_least(value: float, bands: Sequence[tuple[float, int]], floor_points: int) -> int:
    for minimum, points in bands:
        if value >= minimum:
            return points
    return floor_points


def credit_points(bucket: CreditBucket, score: int) -> int:
    """Readiness points (0-100) for a credit profile; unknown text gets a neutral 60."""
    if bucket is CreditBucket.UNKNOWN:
        return UNKNOWN_CREDIT_POINTS
    if score >= 720:
        return 100
    if score >= 680:
        return 85
    if score >= 640:
        return 70
    return 40


def loan_to_value(deal: DealRecord) -> float | None:
    return ratio_pct(deal.funding_amount, deal.value)


# =====================================================================
# Sub-scores
# =====================================================================


def score_deal_structure(deal: DealRecord) -> int:
    loan = deal.funding_amount
    score = 0

    # Loan amount (25)
    if 75_000 <= loan <= 2_000_000:
        score += 25
    elif 50_000 <= loan <= 5_000_000:
        score += 15
    else:
        score += 5

    # Purpose clarity (25)
    score += 25 if normalize_label(deal.funding_purpose) in CLEAR_PURPOSES else 10

    # Property type alignment (25)
    score += 25 if deal.property_type_key in STANDARD_PROPERTY_TYPES else 10

    # LTV (25)
    ltv = loan_to_value(deal)
    if ltv is None:
        score += NO_VALUE_LTV_POINTS
    else:
        score += _band_at_most(ltv, STRUCTURE_LTV_BANDS, STRUCTURE_LTV_TAIL)

    return _clamp_score(score)


def score_financial_readiness(deal: DealRecord) -> int:
    score = 0.0

    # Credit (30), scaled from the 0-100 readiness points
    score += credit_points(deal.credit_bucket, deal.credit_value) * 30 / 100

    # Income (25) and reserves (25)
    score += _band_at_least(deal.annual_income, INCOME_BANDS, 5)
    score += _band_at_least(deal.bank_balance, BALANCE_BANDS, 5)

    # Asset diversity (20)
    score += _band_at_least(deal.asset_count, ASSET_BANDS, 5)

    return _clamp_score(score)


def score_experience_level(deal: DealRecord) -> int:
    score = 0
    score += 40 if deal.past_deals else 5
    score += 30 if deal.owns_other_properties else 10
    score += VOLUME_POINTS[deal.properties_experience]
    return _clamp_score(score)


def score_property_analysis(deal: DealRecord) -> int:
    score = 0

    # LTV (30)
    ltv = loan_to_value(deal)
    if ltv is None:
        score += NO_VALUE_LTV_POINTS
    else:
        score += _band_at_most(ltv, PROPERTY_LTV_BANDS, PROPERTY_LTV_TAIL)

    # Loan-to-ARV (25), only for flips or rehab deals
    if deal.is_flip or deal.repairs_needed:
        loan_to_arv = ratio_pct(deal.funding_amount, deal.arv)
        if loan_to_arv is None:
            score += NO_ARV_POINTS
        else:
            score += _band_at_most(loan_to_arv, LOAN_TO_ARV_BANDS, LOAN_TO_ARV_TAIL)
    else:
        score += ARV_NOT_APPLICABLE_POINTS

    # Repair cost vs value (25)
    if deal.repairs_needed:
        repair_ratio = ratio_pct(deal.rehab_costs, deal.value) if deal.rehab_costs > 0 else None
        if repair_ratio is None:
            score += NO_REPAIR_DATA_POINTS
        else:
            score += _band_at_most(repair_ratio, REPAIR_RATIO_BANDS, REPAIR_RATIO_TAIL)
    else:
        score += NO_REPAIRS_POINTS

    # Completeness (20)
    if deal.property_address.strip():
        score += 5
    if deal.property_info.strip():
        score += 5
    if deal.property_details.strip():
        score += 5
    if deal.current_value is not None:
        score += 5

    return _clamp_score(score)


def overall_score(
    deal_structure: int,
    financial_readiness: int,
    experience_level: int,
    property_analysis: int,
) -> int:
    """Weighted blend, rounded half-up. Integer arithmetic keeps x.5 cases exact."""
    total = (
        WEIGHTS["deal_structure"] * deal_structure
        + WEIGHTS["financial_readiness"] * financial_readiness
        + WEIGHTS["experience_level"] * experience_level
        + WEIGHTS["property_analysis"] * property_analysis
    )
    return (total + 50) // 100


def compute_scores(deal: DealRecord) -> ScoreBreakdown:
    structure = score_deal_structure(deal)
    financial = score_financial_readiness(deal)
    experience = score_experience_level(deal)
    prop = score_property_analysis(deal)

    return ScoreBreakdown(
        deal_structure=structure,
        financial_readiness=financial,
        experience_level=experience,
        property_analysis=prop,
        overall=overall_score(structure, financial, experience, prop),
    )
