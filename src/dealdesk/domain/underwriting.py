from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

SCORE_AREAS = ("deal_structure", "financial_readiness", "experience_level", "property_analysis")

@dataclass(frozen=True)
class ScoreBreakdown:
    deal_structure: int       # loan size, purpose, type, leverage
    financial_readiness: int  # credit, income, reserves, assets
    experience_level: int     # past deals, ownership, volume
    property_analysis: int    # LTV, loan-to-ARV, repair ratio, completeness
    overall: int              # fixed weighted blend of the four

    def area_scores(self) -> Dict[str, int]:
        return {area: getattr(self, area) for area in SCORE_AREAS}

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

@dataclass(frozen=True)
class LenderMatch:
    lender_id: str
    lender_name: str
    qualifies: bool
    base_rate: float
    adjusted_rate: float        # floored; equals max(base, floor) when not qualifying
    match_score: int            # 0–100
    reasons: List[str]          # every failed rule, in check order
    strengths: List[str]
    special_programs: List[str] = field(default_factory=list)
    max_loan_amount: float = 0.0
    max_ltv: float = 0.0

@dataclass(frozen=True)
class DealMetrics:
    credit_score: int
    funding_amount: float
    current_value: float
    ltv: Optional[float]        # percent, 1 decimal; None when value is missing
    experience: str
    property_type: str
    has_profit: bool

@dataclass(frozen=True)
class MatchSummary:
    total_lenders_analyzed: int
    qualifying_lenders: int
    best_rate: Optional[float]
    avg_qualifying_rate: Optional[float]

@dataclass(frozen=True)
class MatchResult:
    catalog_version: str
    deal_metrics: DealMetrics
    qualifying: List[LenderMatch]     # ascending adjusted rate
    disqualified: List[LenderMatch]
    best_match: Optional[LenderMatch]
    alternatives: List[LenderMatch]
    summary: MatchSummary
    common_issues: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
