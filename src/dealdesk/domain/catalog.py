# src/dealdesk/domain/catalog.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from dealdesk.domain.deal import ExperienceTier, parse_tier
from dealdesk.domain.parsing import normalize_label

# No adjusted rate goes below this (percent).
RATE_FLOOR = 4.0


class ThresholdDelta(BaseModel):
    """Applied when the deal value is >= threshold."""
    model_config = ConfigDict(frozen=True)

    threshold: float
    adjustment: float


class TierDelta(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: ExperienceTier
    adjustment: float

    @field_validator("level", mode="before")
    @classmethod
    def _level(cls, v: Any) -> ExperienceTier:
        tier = parse_tier(v)
        if tier is None:
            raise ValueError(f"unknown experience level: {v!r}")
        return tier

    @field_serializer("level")
    def _level_label(self, v: ExperienceTier) -> str:
        return v.label


class PropertyTypeDelta(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    adjustment: float


class RateAdjustments(BaseModel):
    model_config = ConfigDict(frozen=True)

    credit_score: tuple[ThresholdDelta, ...] = ()
    experience: tuple[TierDelta, ...] = ()
    loan_amount: tuple[ThresholdDelta, ...] = ()
    property_type: tuple[PropertyTypeDelta, ...] = ()


class LenderCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    base_rate: float = Field(..., description="Annual percent before adjustments, e.g. 7.5")
    min_loan_amount: float
    max_loan_amount: float
    min_credit_score: int
    max_ltv: float = Field(..., description="Percent, e.g. 75")
    max_loan_to_arv: float | None = Field(default=None, description="Percent; flips only")
    min_experience: ExperienceTier = ExperienceTier.FIRST_DEAL
    property_types: tuple[str, ...] = ()
    requires_profit: bool = False
    regions: tuple[str, ...] = ("nationwide",)
    special_programs: tuple[str, ...] = ()
    focus: tuple[str, ...] = ()
    rate_adjustments: RateAdjustments = RateAdjustments()

    @field_validator("min_experience", mode="before")
    @classmethod
    def _min_experience(cls, v: Any) -> ExperienceTier:
        tier = parse_tier(v)
        if tier is None:
            raise ValueError(f"unknown experience level: {v!r}")
        return tier

    @field_serializer("min_experience")
    def _min_experience_label(self, v: ExperienceTier) -> str:
        return v.label

    @model_validator(mode="after")
    def _loan_range(self) -> "LenderCriteria":
        if self.min_loan_amount > self.max_loan_amount:
            raise ValueError(f"{self.id}: min_loan_amount exceeds max_loan_amount")
        return self

    def accepts_property_type(self, property_type: str) -> bool:
        key = normalize_label(property_type)
        return any(normalize_label(t) == key for t in self.property_types)


class LenderCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    lenders: tuple[LenderCriteria, ...]

    @model_validator(mode="after")
    def _unique_ids(self) -> "LenderCatalog":
        ids = [lender.id for lender in self.lenders]
        if len(ids) != len(set(ids)):
            raise ValueError("lender ids must be unique")
        return self

    def get(self, lender_id: str) -> LenderCriteria | None:
        for lender in self.lenders:
            if lender.id == lender_id:
                return lender
        return None


# ---------------------------------------------------------------------
# Built-in catalog
# ---------------------------------------------------------------------

_RESIDENTIAL = ("Single Family", "Multi-Family", "Duplex", "Triplex", "Residential")

_DEFAULT_LENDERS: list[dict[str, Any]] = [
    {
        "id": "premier_capital",
        "name": "Premier Capital Solutions",
        "base_rate": 7.5,
        "min_credit_score": 680,
        "max_ltv": 75,
        "min_experience": "experienced",
        "max_loan_amount": 2_000_000,
        "min_loan_amount": 100_000,
        "property_types": ("Single Family", "Multi-Family", "Commercial"),
        "requires_profit": True,
        "special_programs": ("fix_and_flip", "rental_portfolio"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 750, "adjustment": -0.5}, {"threshold": 720, "adjustment": -0.25}],
            "experience": [{"level": "expert", "adjustment": -0.75}, {"level": "experienced", "adjustment": -0.25}],
            "loan_amount": [{"threshold": 500_000, "adjustment": -0.25}, {"threshold": 1_000_000, "adjustment": -0.5}],
            "property_type": [{"type": "Single Family", "adjustment": 0}, {"type": "Multi-Family", "adjustment": 0.25}],
        },
    },
    {
        "id": "first_deal_lending",
        "name": "First Deal Lending Co.",
        "base_rate": 9.2,
        "min_credit_score": 620,
        "max_ltv": 70,
        "min_experience": "first_deal",
        "max_loan_amount": 750_000,
        "min_loan_amount": 50_000,
        "property_types": ("Single Family", "Duplex"),
        "special_programs": ("first_time_investor", "mentorship"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 720, "adjustment": -0.75}, {"threshold": 680, "adjustment": -0.5}],
            "experience": [{"level": "first_deal", "adjustment": 0}],
            "loan_amount": [{"threshold": 300_000, "adjustment": -0.25}],
            "property_type": [{"type": "Single Family", "adjustment": 0}, {"type": "Duplex", "adjustment": 0.25}],
        },
    },
    {
        "id": "bridge_funding_pros",
        "name": "Bridge Funding Professionals",
        "base_rate": 8.8,
        "min_credit_score": 650,
        "max_ltv": 80,
        "min_experience": "experienced",
        "max_loan_amount": 1_500_000,
        "min_loan_amount": 75_000,
        "property_types": ("Single Family", "Multi-Family", "Commercial", "Mixed Use"),
        "special_programs": ("bridge_loans", "construction"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 740, "adjustment": -0.5}, {"threshold": 700, "adjustment": -0.25}],
            "experience": [{"level": "expert", "adjustment": -0.5}, {"level": "experienced", "adjustment": 0}],
            "loan_amount": [{"threshold": 500_000, "adjustment": -0.3}],
            "property_type": [{"type": "Commercial", "adjustment": 0.5}, {"type": "Mixed Use", "adjustment": 0.75}],
        },
    },
    {
        "id": "speedy_cash_lending",
        "name": "Speedy Cash Lending",
        "base_rate": 10.5,
        "min_credit_score": 580,
        "max_ltv": 65,
        "min_experience": "first_deal",
        "max_loan_amount": 500_000,
        "min_loan_amount": 25_000,
        "property_types": ("Single Family", "Duplex", "Triplex"),
        "special_programs": ("fast_close", "no_income_verification"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 650, "adjustment": -1.0}, {"threshold": 620, "adjustment": -0.5}],
            "experience": [{"level": "experienced", "adjustment": -0.5}, {"level": "expert", "adjustment": -1.0}],
            "loan_amount": [{"threshold": 200_000, "adjustment": -0.25}],
            "property_type": [{"type": "Single Family", "adjustment": 0}],
        },
    },
    {
        "id": "luxury_property_capital",
        "name": "Luxury Property Capital",
        "base_rate": 6.8,
        "min_credit_score": 740,
        "max_ltv": 70,
        "min_experience": "expert",
        "max_loan_amount": 5_000_000,
        "min_loan_amount": 500_000,
        "property_types": ("Single Family", "Commercial", "Luxury"),
        "requires_profit": True,
        "regions": ("CA", "NY", "FL", "TX"),
        "special_programs": ("luxury_properties", "portfolio_expansion"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 800, "adjustment": -0.5}, {"threshold": 760, "adjustment": -0.25}],
            "experience": [{"level": "expert", "adjustment": 0}],
            "loan_amount": [{"threshold": 1_000_000, "adjustment": -0.25}, {"threshold": 2_000_000, "adjustment": -0.5}],
            "property_type": [{"type": "Luxury", "adjustment": -0.25}, {"type": "Commercial", "adjustment": 0.25}],
        },
    },
    # hard-money programs (rate = middle of the published range)
    {
        "id": "cogo_capital",
        "name": "Cogo Capital",
        "base_rate": 10.0,
        "min_credit_score": 620,
        "max_ltv": 90,
        "max_loan_to_arv": 75,
        "min_experience": "experienced",
        "max_loan_amount": 5_000_000,
        "min_loan_amount": 50_000,
        "property_types": _RESIDENTIAL,
        "focus": ("Fix & Flip", "Rental", "Bridge"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 720, "adjustment": -0.75}, {"threshold": 680, "adjustment": -0.5}],
            "experience": [{"level": "expert", "adjustment": -0.5}],
            "loan_amount": [{"threshold": 1_000_000, "adjustment": -0.25}],
        },
    },
    {
        "id": "lendingone",
        "name": "LendingOne",
        "base_rate": 7.5,
        "min_credit_score": 640,
        "max_ltv": 90,
        "max_loan_to_arv": 75,
        "min_experience": "experienced",
        "max_loan_amount": 50_000_000,
        "min_loan_amount": 70_000,
        "property_types": _RESIDENTIAL + ("Commercial",),
        "focus": ("Bridge", "Fix & Flip", "DSCR", "Construction"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 740, "adjustment": -0.5}, {"threshold": 700, "adjustment": -0.25}],
            "experience": [{"level": "expert", "adjustment": -0.5}],
            "loan_amount": [{"threshold": 1_000_000, "adjustment": -0.25}],
            "property_type": [{"type": "Commercial", "adjustment": 0.5}],
        },
    },
    {
        "id": "rcn_capital",
        "name": "RCN Capital",
        "base_rate": 10.5,
        "min_credit_score": 650,
        "max_ltv": 85,
        "max_loan_to_arv": 75,
        "min_experience": "experienced",
        "max_loan_amount": 10_000_000,
        "min_loan_amount": 75_000,
        "property_types": _RESIDENTIAL,
        "regions": ("most states",),
        "focus": ("Bridge", "Fix & Flip", "DSCR"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 720, "adjustment": -0.75}],
            "experience": [{"level": "expert", "adjustment": -0.5}, {"level": "experienced", "adjustment": -0.25}],
            "loan_amount": [{"threshold": 500_000, "adjustment": -0.25}],
        },
    },
    {
        "id": "lima_one_capital",
        "name": "Lima One Capital",
        "base_rate": 9.5,
        "min_credit_score": 620,
        "max_ltv": 92.5,
        "max_loan_to_arv": 75,
        "min_experience": "experienced",
        "max_loan_amount": 3_000_000,
        "min_loan_amount": 50_000,
        "property_types": _RESIDENTIAL,
        "regions": ("45 states",),
        "focus": ("Fix & Flip", "DSCR", "Construction"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 700, "adjustment": -0.5}, {"threshold": 660, "adjustment": -0.25}],
            "experience": [{"level": "expert", "adjustment": -0.5}],
            "property_type": [{"type": "Multi-Family", "adjustment": 0.25}],
        },
    },
    {
        "id": "kiavi",
        "name": "Kiavi",
        "base_rate": 9.5,
        "min_credit_score": 660,
        "max_ltv": 95,
        "max_loan_to_arv": 80,
        "min_experience": "experienced",
        "max_loan_amount": 2_000_000,
        "min_loan_amount": 75_000,
        "property_types": _RESIDENTIAL,
        "regions": ("many states",),
        "focus": ("Fix & Flip", "Bridge", "Rental"),
        "rate_adjustments": {
            "credit_score": [{"threshold": 740, "adjustment": -0.5}],
            "experience": [{"level": "experienced", "adjustment": -0.25}, {"level": "expert", "adjustment": -0.75}],
        },
    },
]

DEFAULT_CATALOG = LenderCatalog(
    version="2025.1",
    lenders=tuple(LenderCriteria.model_validate(d) for d in _DEFAULT_LENDERS),
)
