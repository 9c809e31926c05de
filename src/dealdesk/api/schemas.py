# src/dealdesk/api/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict, Field

from dealdesk.domain.feed import Interaction, Post, UserPreferences


# --------------------------------------------
# Scoring / matching
# --------------------------------------------

class DealPayload(BaseModel):
    """
    Raw deal submission.

    Any keys are accepted; DealRecord resolves the form, stored-row and CSV
    key styles and parses the values leniently.
    """
    model_config = ConfigDict(extra="allow")


class ScoreResponse(BaseModel):
    deal_structure: int
    financial_readiness: int
    experience_level: int
    property_analysis: int
    overall: int


class MatchResponse(BaseModel):
    """Mirrors MatchResult.to_dict(); permissive so new fields don't break clients."""
    model_config = ConfigDict(extra="allow")

    catalog_version: str
    qualifying: list[dict[str, Any]]
    disqualified: list[dict[str, Any]]
    best_match: dict[str, Any] | None = None
    summary: dict[str, Any]


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    overall_score: int
    score_breakdown: dict[str, int]
    recommendations: list[str]


# --------------------------------------------
# Feed
# --------------------------------------------

class FeedRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    posts: list[Post]
    interactions: list[Interaction] = Field(default_factory=list)
    preferences: UserPreferences | None = None
    now: datetime | None = None
    limit: int | None = Field(default=None, ge=1, le=500)
    seed: int | None = None


class FeedResponse(BaseModel):
    posts: list[dict[str, Any]]
