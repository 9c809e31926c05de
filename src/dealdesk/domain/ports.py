# src/dealdesk/domain/ports.py
from __future__ import annotations

from typing import Any, Protocol, TypedDict


# ----------------------------
# Deal persistence
# ----------------------------

class ScoreColumns(TypedDict):
    analysis_score: int
    deal_structure_score: int
    financial_readiness_score: int
    experience_level_score: int
    property_analysis_score: int


class DealRepository(Protocol):
    def save_analysis(self, analysis: dict[str, Any], payload: dict[str, Any]) -> int | None:
        ...

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        ...
