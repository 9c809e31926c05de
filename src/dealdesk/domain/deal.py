# src/dealdesk/domain/deal.py
from __future__ import annotations

import math
from enum import Enum, IntEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from dealdesk.domain.parsing import (
    normalize_label,
    parse_amount,
    parse_flag,
    parse_optional_amount,
    parse_text,
)


# ---------------------------------------------------------------------
# Bucketed inputs
# ---------------------------------------------------------------------

class CreditBucket(str, Enum):
    BELOW_600 = "Below 600"
    FROM_600 = "600-649"
    FROM_650 = "650-699"
    FROM_700 = "700-749"
    FROM_750 = "750+"
    # form tags
    ABOVE_720 = "above-720"
    ABOVE_680 = "above-680"
    ABOVE_640 = "above-640"
    BELOW_640 = "below-640"
    # exact number typed in (300-850)
    REPORTED = "reported"
    UNKNOWN = "unknown"


# Representative score per bucket. REPORTED carries its own number.
CREDIT_MIDPOINTS: dict[CreditBucket, int | None] = {
    CreditBucket.BELOW_600: 580,
    CreditBucket.FROM_600: 625,
    CreditBucket.FROM_650: 675,
    CreditBucket.FROM_700: 725,
    CreditBucket.FROM_750: 775,
    CreditBucket.ABOVE_720: 750,
    CreditBucket.ABOVE_680: 700,
    CreditBucket.ABOVE_640: 660,
    CreditBucket.BELOW_640: 600,
    CreditBucket.REPORTED: None,
    CreditBucket.UNKNOWN: 650,
}

DEFAULT_CREDIT_SCORE = 650

_CREDIT_BY_TEXT = {b.value.lower(): b for b in CreditBucket}


# Longer digit runs are noise, not a score or a deal count
_MAX_DIGITS = 9


def _whole_number(text: str) -> int | None:
    """Digits-only text as an int; None for anything else."""
    if not text.isdecimal() or len(text) > _MAX_DIGITS:
        return None
    return int(text)


def resolve_credit(val: Any) -> tuple[CreditBucket, int]:
    """
    Map credit text to (bucket, representative score).

      "700-749" -> (FROM_700, 725)
      "712"     -> (REPORTED, 712)
      "great"   -> (UNKNOWN, 650)
    """
    if isinstance(val, CreditBucket):
        text = val.value
    elif isinstance(val, (int, float)) and not isinstance(val, bool):
        if isinstance(val, float) and not math.isfinite(val):
            return CreditBucket.UNKNOWN, DEFAULT_CREDIT_SCORE
        n = int(val)
        if 300 <= n <= 850:
            return CreditBucket.REPORTED, n
        return CreditBucket.UNKNOWN, DEFAULT_CREDIT_SCORE
    else:
        text = parse_text(val).strip()

    bucket = _CREDIT_BY_TEXT.get(text.lower())
    if bucket is not None and bucket is not CreditBucket.REPORTED:
        return bucket, CREDIT_MIDPOINTS[bucket] or DEFAULT_CREDIT_SCORE

    n = _whole_number(text)
    if n is not None and 300 <= n <= 850:
        return CreditBucket.REPORTED, n

    return CreditBucket.UNKNOWN, DEFAULT_CREDIT_SCORE


class TransactionVolume(str, Enum):
    NONE = "0"
    ONE_TO_THREE = "1-3"
    FOUR_TO_TEN = "4-10"
    ELEVEN_TO_TWENTY = "11-20"
    TWENTY_ONE_PLUS = "21+"


VOLUME_POINTS: dict[TransactionVolume, int] = {
    TransactionVolume.NONE: 5,
    TransactionVolume.ONE_TO_THREE: 15,
    TransactionVolume.FOUR_TO_TEN: 20,
    TransactionVolume.ELEVEN_TO_TWENTY: 25,
    TransactionVolume.TWENTY_ONE_PLUS: 30,
}

_VOLUME_BY_TEXT = {v.value: v for v in TransactionVolume}


def resolve_volume(val: Any) -> TransactionVolume:
    if isinstance(val, TransactionVolume):
        return val
    text = parse_text(val).strip().replace(" ", "")
    if text in _VOLUME_BY_TEXT:
        return _VOLUME_BY_TEXT[text]
    n = _whole_number(text)
    if n is not None:
        if n >= 21:
            return TransactionVolume.TWENTY_ONE_PLUS
        if n >= 11:
            return TransactionVolume.ELEVEN_TO_TWENTY
        if n >= 4:
            return TransactionVolume.FOUR_TO_TEN
        if n >= 1:
            return TransactionVolume.ONE_TO_THREE
    return TransactionVolume.NONE


class ExperienceTier(IntEnum):
    FIRST_DEAL = 0
    EXPERIENCED = 1
    EXPERT = 2

    @property
    def label(self) -> str:
        return self.name.lower()


_TIER_BY_TEXT = {t.label: t for t in ExperienceTier}


def parse_tier(val: Any) -> ExperienceTier | None:
    if val is None:
        return None
    if isinstance(val, ExperienceTier):
        return val
    return _TIER_BY_TEXT.get(normalize_label(val).replace(" ", "_"))


# Volume -> tier when the submission does not state one
VOLUME_TIERS: dict[TransactionVolume, ExperienceTier] = {
    TransactionVolume.NONE: ExperienceTier.FIRST_DEAL,
    TransactionVolume.ONE_TO_THREE: ExperienceTier.EXPERIENCED,
    TransactionVolume.FOUR_TO_TEN: ExperienceTier.EXPERIENCED,
    TransactionVolume.ELEVEN_TO_TWENTY: ExperienceTier.EXPERT,
    TransactionVolume.TWENTY_ONE_PLUS: ExperienceTier.EXPERT,
}


# ---------------------------------------------------------------------
# Deal record
# ---------------------------------------------------------------------

_AMOUNT_FIELDS = ("funding_amount", "bank_balance", "annual_income", "rehab_costs", "arv")
_OPTIONAL_AMOUNT_FIELDS = ("current_value", "last_deal_profit")
_FLAG_FIELDS = ("under_contract", "owns_other_properties", "repairs_needed", "past_deals")
_TEXT_FIELDS = (
    "funding_purpose",
    "property_type",
    "income_sources",
    "property_address",
    "property_info",
    "property_details",
    "repair_level",
    "money_plan",
    "good_deal",
)

_CREDIT_KEYS = ("credit_score", "creditScore")


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class DealRecord(BaseModel):
    """
    One deal submission, normalized at intake.

    Accepts snake_case keys, the funding form's camelCase keys and the stored
    row's column names. Free-text numbers are parsed here once; a value that
    does not parse becomes 0 instead of failing the record.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    funding_amount: float = Field(default=0.0, validation_alias=_alias("funding_amount", "fundingAmount"))
    funding_purpose: str = Field(default="", validation_alias=_alias("funding_purpose", "fundingPurpose"))
    property_type: str = Field(default="", validation_alias=_alias("property_type", "propertyType"))

    properties_experience: TransactionVolume = Field(
        default=TransactionVolume.NONE,
        validation_alias=_alias("properties_experience", "propertiesExperience", "properties_count"),
    )
    experience_tier: ExperienceTier | None = Field(
        default=None,
        validation_alias=_alias("experience_tier", "experienceTier", "experience_level"),
    )

    credit_bucket: CreditBucket = CreditBucket.UNKNOWN
    credit_value: int = DEFAULT_CREDIT_SCORE

    bank_balance: float = Field(default=0.0, validation_alias=_alias("bank_balance", "bankBalance"))
    annual_income: float = Field(default=0.0, validation_alias=_alias("annual_income", "annualIncome"))
    income_sources: str = Field(default="", validation_alias=_alias("income_sources", "incomeSources"))
    financial_assets: tuple[str, ...] = Field(
        default=(), validation_alias=_alias("financial_assets", "financialAssets")
    )

    property_address: str = Field(default="", validation_alias=_alias("property_address", "propertyAddress"))
    property_info: str = Field(default="", validation_alias=_alias("property_info", "propertyInfo"))
    property_details: str = Field(default="", validation_alias=_alias("property_details", "propertyDetails"))
    under_contract: bool = Field(default=False, validation_alias=_alias("under_contract", "underContract"))
    owns_other_properties: bool = Field(
        default=False, validation_alias=_alias("owns_other_properties", "ownOtherProperties")
    )

    # None = left blank on the form
    current_value: float | None = Field(default=None, validation_alias=_alias("current_value", "currentValue"))

    repairs_needed: bool = Field(default=False, validation_alias=_alias("repairs_needed", "repairsNeeded"))
    repair_level: str = Field(default="", validation_alias=_alias("repair_level", "repairLevel"))
    rehab_costs: float = Field(default=0.0, validation_alias=_alias("rehab_costs", "rehabCosts"))
    arv: float = Field(default=0.0, validation_alias=_alias("arv", "arv_estimate"))

    past_deals: bool = Field(default=False, validation_alias=_alias("past_deals", "pastDeals"))
    last_deal_profit: float | None = Field(
        default=None, validation_alias=_alias("last_deal_profit", "lastDealProfit")
    )
    money_plan: str = Field(default="", validation_alias=_alias("money_plan", "moneyPlan", "money_plans"))
    good_deal: str = Field(default="", validation_alias=_alias("good_deal", "goodDeal", "good_deal_criteria"))

    @model_validator(mode="before")
    @classmethod
    def _split_credit_and_tier(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        for key in _CREDIT_KEYS:
            if key in data:
                bucket, value = resolve_credit(data.pop(key))
                data.setdefault("credit_bucket", bucket)
                data.setdefault("credit_value", value)
                break

        # stored rows sometimes keep the tier name in properties_count
        for key in ("properties_experience", "propertiesExperience", "properties_count"):
            tier = parse_tier(data.get(key)) if isinstance(data.get(key), str) else None
            if tier is not None:
                if not any(k in data for k in ("experience_tier", "experienceTier", "experience_level")):
                    data["experience_tier"] = tier
                data[key] = TransactionVolume.NONE
        return data

    @field_validator(*_AMOUNT_FIELDS, mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return parse_amount(v)

    @field_validator(*_OPTIONAL_AMOUNT_FIELDS, mode="before")
    @classmethod
    def _optional_amount(cls, v: Any) -> float | None:
        return parse_optional_amount(v)

    @field_validator(*_FLAG_FIELDS, mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return parse_flag(v)

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return parse_text(v)

    @field_validator("properties_experience", mode="before")
    @classmethod
    def _volume(cls, v: Any) -> TransactionVolume:
        return resolve_volume(v)

    @field_validator("experience_tier", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> ExperienceTier | None:
        return parse_tier(v)

    @field_validator("credit_bucket", mode="before")
    @classmethod
    def _bucket(cls, v: Any) -> CreditBucket:
        if isinstance(v, CreditBucket):
            return v
        return resolve_credit(v)[0]

    @field_validator("credit_value", mode="before")
    @classmethod
    def _credit_value(cls, v: Any) -> int:
        n = int(parse_amount(v))
        return n if 300 <= n <= 850 else DEFAULT_CREDIT_SCORE

    @field_validator("financial_assets", mode="before")
    @classmethod
    def _assets(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            items = v.split(",")
        elif isinstance(v, (list, tuple, set, frozenset)):
            items = list(v)
        else:
            return ()
        return tuple(s for s in (parse_text(i).strip() for i in items) if s)

    # -----------------------------------------------------------------
    # Derived views
    # -----------------------------------------------------------------

    @property
    def value(self) -> float:
        return self.current_value or 0.0

    @property
    def is_flip(self) -> bool:
        return "flip" in self.funding_purpose.lower()

    @property
    def tier(self) -> ExperienceTier:
        if self.experience_tier is not None:
            return self.experience_tier
        tier = VOLUME_TIERS[self.properties_experience]
        if tier is ExperienceTier.FIRST_DEAL and (self.past_deals or self.owns_other_properties):
            return ExperienceTier.EXPERIENCED
        return tier

    @property
    def has_profit(self) -> bool:
        # a blank profit field does not count against a reported past deal
        if not self.past_deals:
            return False
        return self.last_deal_profit is None or self.last_deal_profit > 0

    @property
    def asset_count(self) -> int:
        return len({a.lower() for a in self.financial_assets if a.lower() != "none"})

    @property
    def property_type_key(self) -> str:
        return normalize_label(self.property_type)
