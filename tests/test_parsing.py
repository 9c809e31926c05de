# tests/test_parsing.py

import pytest
from hypothesis import given, strategies as st

from dealdesk.domain.deal import CreditBucket, DealRecord, ExperienceTier, TransactionVolume, resolve_credit
from dealdesk.domain.feed import Post
from dealdesk.domain.parsing import format_money, normalize_label, parse_amount, parse_flag, parse_optional_amount
from dealdesk.services.validation import prepare_deal


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$250,000", 250_000.0),
        ("6.5%", 6.5),
        ("1.2.3", 1.2),
        ("-5000", 5000.0),
        ("", 0.0),
        ("n/a", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("inf"), 0.0),
        (1234, 1234.0),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@given(st.text())
def test_parse_amount_never_raises(text):
    assert parse_amount(text) >= 0.0


def test_optional_amount_keeps_blank_as_none():
    assert parse_optional_amount("  ") is None
    assert parse_optional_amount(None) is None
    assert parse_optional_amount("$0") == 0.0


@pytest.mark.parametrize("raw", ["yes", "Y", "true", "1", 1, True])
def test_parse_flag_truthy(raw):
    assert parse_flag(raw) is True


@pytest.mark.parametrize("raw", ["no", "", None, 0, "maybe", [1]])
def test_parse_flag_falsy(raw):
    assert parse_flag(raw) is False


def test_normalize_label():
    assert normalize_label(" Multi-Family ") == "multi family"
    assert normalize_label("single_family") == "single family"


@pytest.mark.parametrize(
    "raw, bucket, value",
    [
        ("700-749", CreditBucket.FROM_700, 725),
        ("above-720", CreditBucket.ABOVE_720, 750),
        ("below-640", CreditBucket.BELOW_640, 600),
        ("712", CreditBucket.REPORTED, 712),
        (745.0, CreditBucket.REPORTED, 745),
        ("900", CreditBucket.UNKNOWN, 650),
        ("great", CreditBucket.UNKNOWN, 650),
        (None, CreditBucket.UNKNOWN, 650),
    ],
)
def test_resolve_credit(raw, bucket, value):
    assert resolve_credit(raw) == (bucket, value)


def test_record_accepts_all_key_styles():
    snake = DealRecord.model_validate({"funding_amount": "$90,000", "current_value": "120000"})
    camel = DealRecord.model_validate({"fundingAmount": "$90,000", "currentValue": "120000"})
    assert snake == camel
    assert snake.funding_amount == 90_000.0

    stored = DealRecord.model_validate(
        {"money_plans": "hold", "good_deal_criteria": "cash flow", "arv_estimate": "$300k"}
    )
    assert stored.money_plan == "hold"
    assert stored.good_deal == "cash flow"
    assert stored.arv == 300.0


def test_tier_name_in_volume_column():
    deal = DealRecord.model_validate({"properties_count": "expert"})
    assert deal.tier is ExperienceTier.EXPERT
    assert deal.properties_experience is TransactionVolume.NONE


@pytest.mark.parametrize(
    "payload, tier",
    [
        ({}, ExperienceTier.FIRST_DEAL),
        ({"pastDeals": "yes"}, ExperienceTier.EXPERIENCED),
        ({"ownOtherProperties": True}, ExperienceTier.EXPERIENCED),
        ({"propertiesExperience": "4-10"}, ExperienceTier.EXPERIENCED),
        ({"propertiesExperience": "11-20"}, ExperienceTier.EXPERT),
        ({"propertiesExperience": "21+", "experienceTier": "first_deal"}, ExperienceTier.FIRST_DEAL),
    ],
)
def test_experience_tier_derivation(payload, tier):
    assert DealRecord.model_validate(payload).tier is tier


def test_volume_accepts_plain_counts():
    assert DealRecord.model_validate({"propertiesExperience": "7"}).properties_experience is TransactionVolume.FOUR_TO_TEN
    assert DealRecord.model_validate({"propertiesExperience": "junk"}).properties_experience is TransactionVolume.NONE


def test_profit_history():
    assert not DealRecord(past_deals=False, last_deal_profit=10_000).has_profit
    assert DealRecord(past_deals=True).has_profit
    assert not DealRecord(past_deals=True, last_deal_profit=0).has_profit


def test_assets_from_string_and_list():
    from_text = DealRecord.model_validate({"financialAssets": "401k, IRA, none, ira"})
    from_list = DealRecord.model_validate({"financialAssets": ["401k", "", "Stocks"]})
    assert from_text.asset_count == 2
    assert from_list.asset_count == 2


def test_prepare_deal_rejects_non_mapping():
    with pytest.raises(ValueError):
        prepare_deal(["not", "a", "deal"])
    with pytest.raises(ValueError):
        prepare_deal(None)


@pytest.mark.parametrize(
    "raw",
    [float("inf"), float("-inf"), float("nan"), "9" * 5000, 10**5000, 1_000_000],
)
def test_unusable_credit_numbers_fall_back_to_unknown(raw):
    deal = prepare_deal({"creditScore": raw})
    assert deal.credit_bucket is CreditBucket.UNKNOWN
    assert deal.credit_value == 650


@pytest.mark.parametrize("raw", ["9" * 5000, 10**5000, "1234567890"])
def test_unusable_volume_counts_fall_back_to_none(raw):
    deal = prepare_deal({"propertiesExperience": raw})
    assert deal.properties_experience is TransactionVolume.NONE


@pytest.mark.parametrize("raw", [10**400, float("nan"), float("-inf")])
def test_parse_amount_handles_out_of_range_numbers(raw):
    assert parse_amount(raw) == 0.0


@pytest.mark.parametrize("raw", [float("inf"), float("nan"), "lots", None, -3])
def test_post_likes_never_fail(raw):
    post = Post(id="p1", created_at="2025-06-01T12:00:00Z", likes_count=raw)
    assert post.likes_count == 0


def test_format_money():
    assert format_money(250_000) == "$250,000"
    assert format_money(41_250.5) == "$41,250.50"
