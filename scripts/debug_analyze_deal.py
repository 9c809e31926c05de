from pprint import pprint

from dealdesk.services.deal_analyzer import analyze_deal


def main() -> None:
    payload = {
        "fundingAmount": "$180,000",
        "fundingPurpose": "fix and flip",
        "propertyType": "Single Family",
        "propertiesExperience": "1-3",
        "creditScore": "700-749",
        "annualIncome": "$95,000",
        "bankBalance": "$40,000",
        "financialAssets": ["401k", "brokerage"],
        "propertyAddress": "123 Test St, Birmingham MI",
        "currentValue": "$220,000",
        "repairsNeeded": True,
        "rehabCosts": "$45,000",
        "arv": "$310,000",
        "pastDeals": True,
        # optional:
        # "lastDealProfit": "$25,000",
    }

    result = analyze_deal(payload)

    print("\n=== SCORES ===")
    pprint(result["score_breakdown"])

    print("\n=== BEST MATCH ===")
    pprint(result["best_match"])

    print("\n=== LENDER SUMMARY ===")
    pprint(result["lenders"]["summary"])

    print("\n=== RECOMMENDATIONS ===")
    pprint(result["recommendations"])

    print("\n=== GUARDRAILS ===")
    pprint(result["guardrails"])

    print("\ncommon issues:", result.get("deal_weaknesses"))


if __name__ == "__main__":
    main()
