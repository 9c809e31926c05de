# src/dealdesk/analysis/recommendations.py
"""
Templated explanations for weak score areas.

Every message is picked by plain threshold checks over the deal and filled
with figures recomputed from it (LTV, loan-to-ARV, repair ratio, targets).
"""
from __future__ import annotations

from typing import Callable, Dict, List

from dealdesk.domain.deal import CreditBucket, DealRecord, TransactionVolume
from dealdesk.domain.parsing import format_money, ratio_pct
from dealdesk.domain.underwriting import SCORE_AREAS, ScoreBreakdown

WEAK_THRESHOLD = 70
MAX_RECOMMENDATIONS = 4
MAX_SUCCESS_MESSAGES = 4

TARGET_LTV = 0.75

_LOW_CREDIT_BUCKETS = {
    CreditBucket.BELOW_640,
    CreditBucket.ABOVE_640,
    CreditBucket.BELOW_600,
    CreditBucket.FROM_600,
    CreditBucket.FROM_650,
}


def _credit_text(deal: DealRecord) -> str:
    if deal.credit_bucket is CreditBucket.REPORTED:
        return str(deal.credit_value)
    if deal.credit_bucket is CreditBucket.UNKNOWN:
        return "unspecified"
    return deal.credit_bucket.value.replace("-", " ", 1)


# =====================================================================
# Area templates
# =====================================================================


def deal_structure_recommendation(deal: DealRecord) -> str:
    loan = deal.funding_amount
    ltv = ratio_pct(loan, deal.value)

    if ltv is not None and ltv > 80:
        target = deal.value * TARGET_LTV
        extra_down = loan - target
        return (
            f"Your loan-to-value ratio is {ltv:.1f}% (requesting {format_money(loan)} on a "
            f"{format_money(deal.value)} property). To qualify with more lenders, reduce your loan "
            f"request to approximately {format_money(round(target, 2))} or increase your down payment "
            f"by {format_money(round(extra_down, 2))}."
        )

    if loan < 75_000:
        return (
            f"Your requested loan amount of {format_money(loan)} is below the minimum for many lenders "
            "(typically $75K-$100K). Consider combining multiple properties or finding a larger "
            "deal to meet common lending thresholds."
        )

    if loan > 2_000_000:
        return (
            f"Your requested loan amount of {format_money(loan)} exceeds typical hard money lender limits. "
            "Consider portfolio lenders, breaking the project into phases, or finding equity "
            "partners to reduce the loan amount needed."
        )

    return (
        "Your deal structure shows room for improvement. Focus on optimizing your loan-to-value "
        "ratio and ensuring your loan amount aligns with typical lender ranges ($75K-$2M for "
        "most programs)."
    )


def financial_recommendation(deal: DealRecord) -> str:
    if deal.credit_bucket in _LOW_CREDIT_BUCKETS or (
        deal.credit_bucket is CreditBucket.REPORTED and deal.credit_value < 680
    ):
        return (
            f"Your credit score range ({_credit_text(deal)}) may limit your options. Focus on "
            "improving your credit by paying down existing debts below 30% utilization, making "
            "all payments on time, and avoiding new credit inquiries. Most lenders prefer 680+ "
            "FICO scores for better rates."
        )

    if deal.annual_income < 75_000:
        return (
            f"Your annual income of {format_money(deal.annual_income)} may require additional "
            "documentation or co-borrower support. Consider adding income sources, providing tax "
            "returns for self-employed income, or partnering with someone who has stronger "
            "income documentation."
        )

    if deal.bank_balance < 25_000:
        return (
            f"Your bank balance of {format_money(deal.bank_balance)} may not demonstrate sufficient "
            "reserves. Most lenders prefer to see 3-6 months of property payments in reserves "
            "(typically $15K-$50K). Consider building cash reserves or documenting additional "
            "liquid assets."
        )

    if deal.asset_count <= 1:
        return (
            "Your financial assets appear limited. Consider documenting retirement accounts "
            "(401K, IRA), investment accounts, or other assets that demonstrate financial "
            "stability and ability to cover unexpected costs."
        )

    return (
        "Your financial profile needs strengthening. Focus on improving credit score, building "
        "cash reserves, and documenting all income sources and assets to present the strongest "
        "financial picture to lenders."
    )


def experience_recommendation(deal: DealRecord) -> str:
    past, owns = deal.past_deals, deal.owns_other_properties

    if not past and not owns:
        return (
            "As a first-time real estate investor (no past deals, no current properties), "
            "consider: 1) Partnering with an experienced investor who has completed 5+ deals, "
            "2) Starting with a smaller, less complex property to build track record, "
            "3) Documenting any construction, renovation, or property management experience, or "
            "4) Exploring owner-occupied financing options first."
        )

    if not past and owns:
        return (
            "While you own other properties, having no completed investment deals may concern "
            "some lenders. Consider documenting your property management experience, any "
            "improvements you've made to existing properties, or partner with someone who has "
            "active deal experience."
        )

    if past and not owns:
        return (
            "Your past deal experience is valuable, but not currently owning investment "
            "properties may raise questions about your ongoing commitment. Consider explaining "
            "your investment strategy and timeline, or highlighting successful exits from "
            "previous deals."
        )

    if deal.properties_experience in (TransactionVolume.NONE, TransactionVolume.ONE_TO_THREE):
        shown = (
            "unspecified"
            if deal.properties_experience is TransactionVolume.NONE
            else deal.properties_experience.value
        )
        return (
            f"Your limited transaction history ({shown} properties) may restrict lending "
            "options. Focus on smaller deals to build track record, document any "
            "property-related experience, and consider partnership with more experienced "
            "investors for larger projects."
        )

    return (
        "Your experience level could be stronger for this type of deal. Focus on building "
        "documented real estate experience through smaller transactions or strategic "
        "partnerships."
    )


def property_recommendation(deal: DealRecord) -> str:
    loan = deal.funding_amount
    ltv = ratio_pct(loan, deal.value)

    if ltv is not None and ltv > 80:
        return (
            f"Your property's loan-to-value ratio is {ltv:.1f}% ({format_money(loan)} loan on "
            f"{format_money(deal.value)} property). Most lenders prefer 75-80% LTV. Increase your down "
            "payment or find a higher-value property to improve this ratio."
        )

    if deal.repairs_needed and deal.rehab_costs > 0:
        repair_ratio = ratio_pct(deal.rehab_costs, deal.value)
        if repair_ratio is not None and repair_ratio > 25:
            return (
                f"Your repair costs ({format_money(deal.rehab_costs)}) represent {repair_ratio:.1f}% of "
                "the property value. Most lenders prefer rehab costs under 25% of property value. "
                "Consider properties requiring less extensive renovation or get detailed "
                "contractor estimates to justify the scope."
            )

    if deal.is_flip:
        loan_to_arv = ratio_pct(loan, deal.arv)
        if loan_to_arv is not None and loan_to_arv > 75:
            return (
                f"Your loan-to-ARV ratio is {loan_to_arv:.1f}% ({format_money(loan)} loan on "
                f"{format_money(deal.arv)} ARV). Most lenders limit this to 70-75%. Either reduce your "
                "loan request or get a professional appraisal to support a higher ARV estimate."
            )

    missing = []
    if not deal.property_address.strip():
        missing.append("property address")
    if deal.current_value is None:
        missing.append("current property value")
    if not deal.property_info.strip():
        missing.append("property details")
    if missing:
        return (
            f"Your property analysis is incomplete. Please provide: {', '.join(missing)}. "
            "Complete property documentation helps lenders assess risk and may improve your "
            "qualification chances."
        )

    return (
        "Your property analysis needs improvement. Focus on optimizing loan-to-value ratios, "
        "providing complete property documentation, and ensuring repair cost estimates are "
        "realistic and well-documented."
    )


AREA_TEMPLATES: Dict[str, Callable[[DealRecord], str]] = {
    "deal_structure": deal_structure_recommendation,
    "financial_readiness": financial_recommendation,
    "experience_level": experience_recommendation,
    "property_analysis": property_recommendation,
}


# =====================================================================
# Public API
# =====================================================================


def weak_areas(scores: ScoreBreakdown, threshold: int = WEAK_THRESHOLD) -> List[str]:
    """Areas below threshold, weakest first (ties keep the fixed area order)."""
    by_area = scores.area_scores()
    weak = [a for a in SCORE_AREAS if by_area[a] < threshold]
    return sorted(weak, key=lambda a: by_area[a])


def generate_recommendations(deal: DealRecord, scores: ScoreBreakdown) -> List[str]:
    return [AREA_TEMPLATES[area](deal) for area in weak_areas(scores)[:MAX_RECOMMENDATIONS]]


def generate_success_messages(deal: DealRecord, scores: ScoreBreakdown) -> List[str]:
    """Short strength notes, only for deals that already score 80+ overall."""
    if scores.overall < 80:
        return []

    messages: List[str] = []
    if scores.financial_readiness >= 85:
        messages.append(
            f"Your strong financial profile ({_credit_text(deal)} credit, "
            f"{format_money(deal.annual_income)} income) positions you well with most lenders."
        )
    if scores.experience_level >= 80:
        volume = deal.properties_experience
        shown = "some" if volume is TransactionVolume.NONE else volume.value
        with_past = "with" if deal.past_deals else "without"
        messages.append(
            f"Your real estate experience ({shown} properties, {with_past} past deals) "
            "demonstrates capability to execute this investment."
        )
    if scores.deal_structure >= 85:
        messages.append(
            "Your deal structure is solid with appropriate loan amount and conservative leverage ratios."
        )
    if scores.property_analysis >= 85:
        messages.append(
            "Your property analysis shows strong fundamentals with realistic valuation and repair estimates."
        )
    return messages[:MAX_SUCCESS_MESSAGES]
