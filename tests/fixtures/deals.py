# tests/fixtures/deals.py
"""
Deal submissions as they arrive from the funding form (camelCase, free-text
amounts). Each returns a fresh dict so tests can mutate it.
"""


def _base_submission() -> dict:
    return dict(
        fundingAmount="",
        fundingPurpose="",
        propertyType="",
        propertiesExperience="0",
        creditScore="",
        bankBalance="",
        annualIncome="",
        incomeSources="",
        financialAssets=[],
        propertyAddress="",
        propertyInfo="",
        propertyDetails="",
        underContract=False,
        ownOtherProperties=False,
        currentValue="",
        repairsNeeded=False,
        repairLevel="",
        rehabCosts="",
        arv="",
        pastDeals=False,
        lastDealProfit="",
        moneyPlan="",
        goodDeal="",
    )


def conservative_purchase() -> dict:
    """
    $150K loan on a $250K house, 700-749 credit, one past deal.
    LTV 60%: top LTV band in both structure and property scoring.
    """
    d = _base_submission()
    d.update(
        fundingAmount="$150,000",
        currentValue="$250,000",
        creditScore="700-749",
        pastDeals=True,
    )
    return d


def zero_value_deal() -> dict:
    """Property value typed as $0: every LTV term must fall back, never divide."""
    d = _base_submission()
    d.update(fundingAmount="$100,000", currentValue="$0")
    return d


def strong_operator_weak_credit() -> dict:
    """
    Clean structure, seasoned investor, complete property data, but sub-600
    credit and thin reserves. Only financial readiness lands below 70.
    """
    d = _base_submission()
    d.update(
        fundingAmount="$150,000",
        fundingPurpose="purchase",
        propertyType="Single Family",
        propertiesExperience="4-10",
        creditScore="Below 600",
        bankBalance="$5,000",
        annualIncome="$40,000",
        propertyAddress="12 Elm St, Dayton OH",
        propertyInfo="3 bed 2 bath ranch",
        propertyDetails="Roof replaced 2019",
        currentValue="$250,000",
        ownOtherProperties=True,
        pastDeals=True,
        lastDealProfit="$30,000",
    )
    return d


def first_time_buyer() -> dict:
    """No track record, good credit, modest single-family purchase."""
    d = _base_submission()
    d.update(
        fundingAmount="$100,000",
        fundingPurpose="purchase",
        propertyType="Single Family",
        creditScore="700-749",
        annualIncome="$85,000",
        bankBalance="$30,000",
        currentValue="$200,000",
        propertyAddress="44 Pine Rd",
    )
    return d


def seasoned_jumbo() -> dict:
    """Expert investor, 760 credit, $1.2M loan at 60% LTV, profitable history."""
    d = _base_submission()
    d.update(
        fundingAmount="$1,200,000",
        fundingPurpose="purchase",
        propertyType="Single Family",
        propertiesExperience="21+",
        creditScore="760",
        annualIncome="$250,000",
        bankBalance="$400,000",
        financialAssets=["401k", "brokerage", "real estate"],
        currentValue="$2,000,000",
        propertyAddress="1 Harbor Way",
        propertyInfo="Waterfront",
        propertyDetails="New build",
        ownOtherProperties=True,
        pastDeals=True,
    )
    return d


def failing_everything() -> dict:
    """
    Small land loan at ~91% LTV, sub-600 credit, no experience. Fails every
    Premier Capital rule at once.
    """
    d = _base_submission()
    d.update(
        fundingAmount="$50,000",
        propertyType="Land",
        creditScore="Below 600",
        currentValue="$55,000",
    )
    return d


def overleveraged_flip() -> dict:
    d = _base_submission()
    d.update(
        fundingAmount="$240,000",
        fundingPurpose="fix and flip",
        propertyType="Single Family",
        creditScore="above-680",
        currentValue="$200,000",
        repairsNeeded=True,
        rehabCosts="$90,000",
        arv="$280,000",
    )
    return d
