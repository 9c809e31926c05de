# tests/test_recommendations.py

from dealdesk.analysis.recommendations import (
    MAX_RECOMMENDATIONS,
    experience_recommendation,
    financial_recommendation,
    generate_recommendations,
    generate_success_messages,
    property_recommendation,
    weak_areas,
)
from dealdesk.analysis.scoring import compute_scores
from dealdesk.domain.deal import DealRecord
from dealdesk.domain.underwriting import ScoreBreakdown
from fixtures.deals import failing_everything, seasoned_jumbo, strong_operator_weak_credit


def _deal(payload: dict) -> DealRecord:
    return DealRecord.model_validate(payload)


def test_only_weak_area_gets_one_recommendation():
    deal = _deal(strong_operator_weak_credit())
    scores = compute_scores(deal)

    assert scores.financial_readiness < 70
    assert min(scores.deal_structure, scores.experience_level, scores.property_analysis) >= 70

    recs = generate_recommendations(deal, scores)

    assert recs == [financial_recommendation(deal)]
    assert recs[0].startswith("Your credit score range (Below 600) may limit your options.")


def test_recommendations_capped_and_weakest_first():
    deal = _deal(failing_everything())
    scores = compute_scores(deal)

    recs = generate_recommendations(deal, scores)

    assert len(recs) == MAX_RECOMMENDATIONS
    assert recs[0].startswith("As a first-time real estate investor")
    assert recs[1].startswith("Your credit score range")
    assert recs[2] == (
        "Your loan-to-value ratio is 90.9% (requesting $50,000 on a $55,000 property). "
        "To qualify with more lenders, reduce your loan request to approximately $41,250 "
        "or increase your down payment by $8,750."
    )
    assert recs[3].startswith("Your property's loan-to-value ratio is 90.9%")


def test_weak_areas_sorted_ascending_ties_keep_area_order():
    scores = ScoreBreakdown(
        deal_structure=60,
        financial_readiness=50,
        experience_level=50,
        property_analysis=90,
        overall=60,
    )
    assert weak_areas(scores) == ["financial_readiness", "experience_level", "deal_structure"]


def test_no_recommendations_for_strong_deal():
    deal = _deal(seasoned_jumbo())
    scores = compute_scores(deal)

    assert generate_recommendations(deal, scores) == []


def test_success_messages_for_strong_deal():
    deal = _deal(seasoned_jumbo())
    scores = compute_scores(deal)

    msgs = generate_success_messages(deal, scores)

    assert len(msgs) == 4
    assert msgs[0] == (
        "Your strong financial profile (760 credit, $250,000 income) positions you well with most lenders."
    )
    assert "(21+ properties, with past deals)" in msgs[1]


def test_no_success_messages_below_80_overall():
    deal = _deal(failing_everything())
    assert generate_success_messages(deal, compute_scores(deal)) == []


def test_loan_to_arv_message_for_flip():
    deal = DealRecord(
        funding_amount=150_000,
        current_value=200_000,
        arv=180_000,
        funding_purpose="fix and flip",
    )
    msg = property_recommendation(deal)
    assert msg.startswith("Your loan-to-ARV ratio is 83.3% ($150,000 loan on $180,000 ARV).")


def test_repair_ratio_message():
    deal = DealRecord(
        funding_amount=100_000,
        current_value=200_000,
        repairs_needed=True,
        rehab_costs=60_000,
    )
    msg = property_recommendation(deal)
    assert msg.startswith("Your repair costs ($60,000) represent 30.0% of the property value.")


def test_incomplete_property_lists_missing_fields():
    msg = property_recommendation(DealRecord())
    assert "Please provide: property address, current property value, property details." in msg


def test_experience_branches():
    owner_only = DealRecord(owns_other_properties=True)
    flipper_only = DealRecord(past_deals=True)
    both_thin = DealRecord(past_deals=True, owns_other_properties=True, properties_experience="1-3")

    assert experience_recommendation(owner_only).startswith("While you own other properties")
    assert experience_recommendation(flipper_only).startswith("Your past deal experience is valuable")
    assert "(1-3 properties)" in experience_recommendation(both_thin)


def test_financial_branches_after_credit():
    good_credit = {"creditScore": "750+"}

    low_income = _deal({**good_credit, "annualIncome": "$60,000"})
    thin_reserves = _deal({**good_credit, "annualIncome": "$90,000", "bankBalance": "$10,000"})
    few_assets = _deal({**good_credit, "annualIncome": "$90,000", "bankBalance": "$40,000"})

    assert financial_recommendation(low_income).startswith("Your annual income of $60,000")
    assert financial_recommendation(thin_reserves).startswith("Your bank balance of $10,000")
    assert financial_recommendation(few_assets).startswith("Your financial assets appear limited.")
