# src/dealdesk/domain/feed.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class Post(BaseModel):
    """A feed post. Extra fields (author profile, tags) pass through untouched."""
    model_config = ConfigDict(extra="allow")

    id: str
    content: str = ""
    likes_count: int = 0
    created_at: datetime
    user_id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        return str(v)

    @field_validator("created_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("likes_count", mode="before")
    @classmethod
    def _likes(cls, v: Any) -> int:
        try:
            return max(0, int(v or 0))
        except (TypeError, ValueError, OverflowError):
            return 0


class Interaction(BaseModel):
    model_config = ConfigDict(extra="allow")

    post_id: str | None = None
    interaction_type: str = "view"
    post_content: str | None = None
    created_at: datetime | None = None

    @field_validator("post_id", mode="before")
    @classmethod
    def _post_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class UserPreferences(BaseModel):
    """Stored preference weights, keyed by strategy / topic name."""
    preferred_strategies: dict[str, float] = Field(default_factory=dict)
    preferred_topics: dict[str, float] = Field(default_factory=dict)


class PreferenceWeights(BaseModel):
    """Normalized weights (each family sums to 1 when non-empty)."""
    strategies: dict[str, float] = Field(default_factory=dict)
    topics: dict[str, float] = Field(default_factory=dict)
