# src/dealdesk/analysis/feed.py
from __future__ import annotations

import random
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from dealdesk.domain.feed import Interaction, Post, PreferenceWeights, UserPreferences

STRATEGY_KEYWORDS: Dict[str, Sequence[str]] = {
    "fix_and_flip": ("flip", "rehab", "renovate", "renovation", "fix", "arv", "after repair value", "contractor"),
    "brrrr": ("brrrr", "buy rehab rent refinance", "cash flow", "rental", "tenant", "rent"),
    "wholesale": ("wholesale", "assignment", "contract", "motivated seller", "bird dog", "off market"),
    "buy_and_hold": ("buy and hold", "rental property", "cash flow", "appreciation", "passive income"),
    "commercial": ("commercial", "office", "retail", "industrial", "multifamily", "apartment"),
    "land_development": ("land", "development", "subdivision", "zoning", "entitlement"),
}

TOPIC_KEYWORDS: Dict[str, Sequence[str]] = {
    "financing": ("loan", "lending", "interest rate", "down payment", "mortgage", "credit"),
    "analysis": ("analysis", "numbers", "roi", "cap rate", "noi", "cash on cash"),
    "marketing": ("marketing", "lead generation", "advertising", "direct mail", "cold calling"),
    "negotiation": ("negotiate", "offer", "counter", "deal structure", "terms"),
    "legal": ("contract", "legal", "attorney", "title", "closing", "due diligence"),
    "management": ("property management", "tenant", "maintenance", "vacancy", "screening"),
}

INTERACTION_WEIGHTS: Dict[str, float] = {
    "like": 3,
    "save": 5,
    "share": 4,
    "view": 1,
    "dwell_time": 2,
}
DEFAULT_INTERACTION_WEIGHT = 1

DIVERSITY_SPLIT = 0.8       # share of the ranked list kept in order
DIVERSITY_EVERY = 4         # one tail post after every Nth top post
DIVERSITY_MAX = 10

DEFAULT_LIMIT = 50


def _hours_old(post: Post, now: datetime) -> float:
    return max(0.0, (now - post.created_at).total_seconds() / 3600.0)


def _tags(content: str, keywords: Dict[str, Sequence[str]]) -> List[str]:
    text = (content or "").lower()
    return [name for name, words in keywords.items() if any(w in text for w in words)]


def content_strategies(content: str) -> List[str]:
    return _tags(content, STRATEGY_KEYWORDS)


def content_topics(content: str) -> List[str]:
    return _tags(content, TOPIC_KEYWORDS)


# =====================================================================
# Scores
# =====================================================================


def trending_score(post: Post, now: datetime) -> float:
    """Cold-start score: recency (100 pts, -2/hour) plus likes (10 each, max 50)."""
    recency = max(0.0, 100.0 - _hours_old(post, now) * 2.0)
    engagement = min(50.0, post.likes_count * 10.0)
    return recency + engagement


def _normalize(weights: Dict[str, float]) -> Dict[str, float]:
    total = sum(weights.values())
    if total <= 0:
        return dict(weights)
    return {k: v / total for k, v in weights.items()}


def user_preferences(
    interactions: Iterable[Interaction],
    stored: Optional[UserPreferences] = None,
) -> PreferenceWeights:
    strategies: Dict[str, float] = dict(stored.preferred_strategies) if stored else {}
    topics: Dict[str, float] = dict(stored.preferred_topics) if stored else {}

    for it in interactions:
        if not it.post_content:
            continue
        weight = INTERACTION_WEIGHTS.get(it.interaction_type, DEFAULT_INTERACTION_WEIGHT)
        for s in content_strategies(it.post_content):
            strategies[s] = strategies.get(s, 0.0) + weight
        for t in content_topics(it.post_content):
            topics[t] = topics.get(t, 0.0) + weight

    return PreferenceWeights(strategies=_normalize(strategies), topics=_normalize(topics))


def personalized_score(
    post: Post,
    prefs: PreferenceWeights,
    seen_post_ids: set[str],
    now: datetime,
) -> float:
    recency = max(0.0, 40.0 - _hours_old(post, now) * 0.5)
    engagement = min(20.0, post.likes_count * 2.0)

    content = 0.0
    for s in content_strategies(post.content):
        content += prefs.strategies.get(s, 0.0) * 25.0
    for t in content_topics(post.content):
        content += prefs.topics.get(t, 0.0) * 15.0
    content = min(40.0, content)

    # already-seen posts sink
    penalty = -30.0 if post.id in seen_post_ids else 0.0

    return max(0.0, recency + engagement + content + penalty)


# =====================================================================
# Ranking
# =====================================================================


def add_diversity(ranked: List[Any], rng: Optional[random.Random] = None) -> List[Any]:
    """
    Keep the top 80% in order and slot one shuffled tail item after every
    fourth top item (at most 10). Tail items that don't get a slot are dropped.
    """
    rng = rng or random.Random()
    cut = int(len(ranked) * DIVERSITY_SPLIT)
    top, tail = list(ranked[:cut]), list(ranked[cut:])
    rng.shuffle(tail)

    budget = min(DIVERSITY_MAX, len(tail))
    out: List[Any] = []
    used = 0
    for i, item in enumerate(top):
        out.append(item)
        if i % DIVERSITY_EVERY == DIVERSITY_EVERY - 1 and used < budget:
            out.append(tail[used])
            used += 1
    return out


def _dedupe(posts: Iterable[Post]) -> List[Post]:
    seen: set[str] = set()
    out: List[Post] = []
    for p in posts:
        if p.id in seen:
            continue
        seen.add(p.id)
        out.append(p)
    return out


def rank_feed(
    posts: Iterable[Post],
    interactions: Sequence[Interaction],
    now: datetime,
    preferences: Optional[UserPreferences] = None,
    limit: int = DEFAULT_LIMIT,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """
    Rank posts for one user.

    No interactions => cold start, ordered by trending_score.
    Otherwise personalized_score + a diversity pass.

    Returns post dicts with an added 'recommendation_score'.
    """
    unique = _dedupe(posts)

    if not interactions:
        scored = [(p, trending_score(p, now)) for p in unique]
        scored.sort(key=lambda x: x[1], reverse=True)
        ranked = scored
    else:
        prefs = user_preferences(interactions, preferences)
        seen = {i.post_id for i in interactions if i.post_id}
        scored = [(p, personalized_score(p, prefs, seen, now)) for p in unique]
        scored.sort(key=lambda x: x[1], reverse=True)
        ranked = add_diversity(scored, rng=rng)

    return [p.model_dump() | {"recommendation_score": round(s, 4)} for p, s in ranked[:limit]]
