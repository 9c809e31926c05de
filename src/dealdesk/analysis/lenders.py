# src/dealdesk/analysis/lenders.py
from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from dealdesk.domain.catalog import DEFAULT_CATALOG, RATE_FLOOR, LenderCatalog, LenderCriteria
from dealdesk.domain.deal import DealRecord
from dealdesk.domain.parsing import format_money, normalize_label, ratio_pct
from dealdesk.domain.underwriting import DealMetrics, LenderMatch, MatchResult, MatchSummary

# Match-score penalties per failed rule (score starts at 100)
PENALTY_BELOW_MIN_LOAN = 30
PENALTY_ABOVE_MAX_LOAN = 40
PENALTY_CREDIT = 25
PENALTY_LTV = 20
PENALTY_LOAN_TO_ARV = 15
PENALTY_EXPERIENCE = 20
PENALTY_PROPERTY_TYPE = 15
PENALTY_PROFIT = 15

BONUS_STRONG_CREDIT = 5      # credit more than STRONG_CREDIT_MARGIN over the minimum
STRONG_CREDIT_MARGIN = 50
BONUS_STRONG_INCOME = 5      # income above STRONG_INCOME
STRONG_INCOME = 100_000

MAX_ALTERNATIVES = 3
MAX_COMMON_ISSUES = 3


def _pct(x: float) -> str:
    return f"{x:g}%"


def adjusted_rate(lender: LenderCriteria, deal: DealRecord) -> float:
    """
    Base rate plus every adjustment the deal triggers, floored at RATE_FLOOR.

    Credit and loan-amount deltas stack (every threshold met applies);
    experience and property-type deltas apply on an exact match.
    """
    adj = lender.rate_adjustments
    rate = lender.base_rate

    for d in adj.credit_score:
        if deal.credit_value >= d.threshold:
            rate += d.adjustment

    tier = deal.tier
    for t in adj.experience:
        if t.level == tier:
            rate += t.adjustment

    for d in adj.loan_amount:
        if deal.funding_amount >= d.threshold:
            rate += d.adjustment

    ptype = deal.property_type_key
    for p in adj.property_type:
        if normalize_label(p.type) == ptype:
            rate += p.adjustment

    return round(max(rate, RATE_FLOOR), 3)


def evaluate_lender(lender: LenderCriteria, deal: DealRecord) -> LenderMatch:
    """
    Run every rule for one lender. Rules never short-circuit: a deal that
    fails three rules gets three reasons.
    """
    reasons: list[str] = []
    strengths: list[str] = []
    score = 100

    loan = deal.funding_amount
    credit = deal.credit_value

    # Loan amount range
    if loan < lender.min_loan_amount:
        reasons.append(
            f"Loan amount {format_money(loan)} below minimum {format_money(lender.min_loan_amount)}"
        )
        score -= PENALTY_BELOW_MIN_LOAN
    elif loan > lender.max_loan_amount:
        reasons.append(
            f"Loan amount {format_money(loan)} exceeds maximum {format_money(lender.max_loan_amount)}"
        )
        score -= PENALTY_ABOVE_MAX_LOAN
    else:
        strengths.append("Loan amount within range")

    # Credit
    if credit < lender.min_credit_score:
        reasons.append(f"Credit score {credit} below minimum {lender.min_credit_score}")
        score -= PENALTY_CREDIT
    else:
        strengths.append("Credit score meets requirements")
        if credit > lender.min_credit_score + STRONG_CREDIT_MARGIN:
            strengths.append("Strong credit score")
            score += BONUS_STRONG_CREDIT

    # LTV (skipped without a property value)
    ltv = ratio_pct(loan, deal.value)
    if ltv is not None:
        if ltv > lender.max_ltv:
            reasons.append(f"LTV {ltv:.1f}% exceeds maximum {_pct(lender.max_ltv)}")
            score -= PENALTY_LTV
        else:
            strengths.append("LTV ratio acceptable")

    # Loan-to-ARV, flips only
    if deal.is_flip and lender.max_loan_to_arv is not None:
        loan_to_arv = ratio_pct(loan, deal.arv)
        if loan_to_arv is not None:
            if loan_to_arv > lender.max_loan_to_arv:
                reasons.append(
                    f"Loan-to-ARV {loan_to_arv:.1f}% exceeds maximum {_pct(lender.max_loan_to_arv)}"
                )
                score -= PENALTY_LOAN_TO_ARV
            else:
                strengths.append("ARV ratio looks good")

    # Experience tier
    tier = deal.tier
    if tier < lender.min_experience:
        reasons.append(f"Experience level {tier.label} below required {lender.min_experience.label}")
        score -= PENALTY_EXPERIENCE
    else:
        strengths.append("Investment experience qualifies")

    # Property type
    if not lender.accepts_property_type(deal.property_type):
        shown = deal.property_type.strip() or "unspecified"
        reasons.append(
            f"Property type {shown} not in preferred types: {', '.join(lender.property_types)}"
        )
        score -= PENALTY_PROPERTY_TYPE
    else:
        strengths.append("Property type fits lender program")

    # Profit history
    if lender.requires_profit and not deal.has_profit:
        reasons.append("Lender requires previous profitable deals")
        score -= PENALTY_PROFIT

    if deal.annual_income > STRONG_INCOME:
        strengths.append("Strong income profile")
        score += BONUS_STRONG_INCOME

    qualifies = not reasons
    rate = adjusted_rate(lender, deal) if qualifies else round(max(lender.base_rate, RATE_FLOOR), 3)

    return LenderMatch(
        lender_id=lender.id,
        lender_name=lender.name,
        qualifies=qualifies,
        base_rate=lender.base_rate,
        adjusted_rate=rate,
        match_score=max(0, min(100, score)),
        reasons=reasons,
        strengths=strengths,
        special_programs=list(lender.special_programs),
        max_loan_amount=lender.max_loan_amount,
        max_ltv=lender.max_ltv,
    )


def common_issues(matches: Iterable[LenderMatch], limit: int = MAX_COMMON_ISSUES) -> List[str]:
    """Most frequent disqualification reasons across lenders (first-seen order breaks ties)."""
    counts: Counter[str] = Counter()
    for m in matches:
        counts.update(m.reasons)
    return [reason for reason, _ in counts.most_common(limit)]


def _deal_metrics(deal: DealRecord) -> DealMetrics:
    ltv = ratio_pct(deal.funding_amount, deal.value)
    return DealMetrics(
        credit_score=deal.credit_value,
        funding_amount=deal.funding_amount,
        current_value=deal.value,
        ltv=round(ltv, 1) if ltv is not None else None,
        experience=deal.tier.label,
        property_type=deal.property_type,
        has_profit=deal.has_profit,
    )


def match_lenders(deal: DealRecord, catalog: Optional[LenderCatalog] = None) -> MatchResult:
    catalog = catalog or DEFAULT_CATALOG

    matches = [evaluate_lender(lender, deal) for lender in catalog.lenders]

    qualifying = sorted(
        (m for m in matches if m.qualifies),
        key=lambda m: (m.adjusted_rate, -m.match_score, m.lender_name),
    )
    disqualified = [m for m in matches if not m.qualifies]

    if qualifying:
        rates = [m.adjusted_rate for m in qualifying]
        best_rate: float | None = rates[0]
        avg_rate: float | None = round(sum(rates) / len(rates), 2)
    else:
        best_rate = None
        avg_rate = None

    return MatchResult(
        catalog_version=catalog.version,
        deal_metrics=_deal_metrics(deal),
        qualifying=qualifying,
        disqualified=disqualified,
        best_match=qualifying[0] if qualifying else None,
        alternatives=qualifying[1 : 1 + MAX_ALTERNATIVES],
        summary=MatchSummary(
            total_lenders_analyzed=len(matches),
            qualifying_lenders=len(qualifying),
            best_rate=best_rate,
            avg_qualifying_rate=avg_rate,
        ),
        common_issues=common_issues(matches),
    )
