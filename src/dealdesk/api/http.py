# src/dealdesk/api/http.py
from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException, Query

from dealdesk.adapters.catalog_loader import get_active_catalog
from dealdesk.adapters.config import config
from dealdesk.adapters.logging_utils import get_logger
from dealdesk.adapters.memory_repo import InMemoryDealRepository
from dealdesk.analysis.feed import rank_feed
from dealdesk.analysis.lenders import match_lenders
from dealdesk.analysis.scoring import compute_scores
from dealdesk.services.deal_analyzer import analyze_deal
from dealdesk.services.validation import prepare_deal
from .schemas import (
    AnalyzeResponse,
    DealPayload,
    FeedRequest,
    FeedResponse,
    MatchResponse,
    ScoreResponse,
)

logger = get_logger(__name__)

app = FastAPI(title="dealdesk")

_deal_repo = InMemoryDealRepository(max_items=config.DEAL_STORE_LIMIT)


@app.get("/lenders")
def list_lenders() -> dict[str, Any]:
    catalog = get_active_catalog()
    return catalog.model_dump(mode="json")


@app.post("/score", response_model=ScoreResponse)
def score_endpoint(payload: DealPayload) -> ScoreResponse:
    try:
        deal = prepare_deal(payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ScoreResponse(**compute_scores(deal).to_dict())


@app.post("/lenders/match", response_model=MatchResponse)
def match_endpoint(payload: DealPayload) -> MatchResponse:
    try:
        deal = prepare_deal(payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    result = match_lenders(deal, get_active_catalog())
    return MatchResponse(**result.to_dict())


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(payload: DealPayload) -> AnalyzeResponse:
    """
    Full analysis: scores, lender matches, recommendations, guardrails.
    Saves score columns to the deal repository when SAVE_ANALYSES is on.
    """
    try:
        result = analyze_deal(
            raw_payload=payload.model_dump(),
            catalog=get_active_catalog(),
            repo=_deal_repo,
            save=config.SAVE_ANALYSES,
        )
        return AnalyzeResponse(**result)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.get("/deals")
def list_deals(limit: int = Query(50, ge=1, le=500)) -> list[dict[str, Any]]:
    return _deal_repo.list_recent(limit=limit)


@app.post("/feed/rank", response_model=FeedResponse)
def rank_feed_endpoint(body: FeedRequest) -> FeedResponse:
    now = body.now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    rng = random.Random(body.seed) if body.seed is not None else None
    posts = rank_feed(
        posts=body.posts,
        interactions=body.interactions,
        now=now,
        preferences=body.preferences,
        limit=body.limit or config.FEED_LIMIT,
        rng=rng,
    )
    logger.info(
        "feed_ranked",
        extra={"context": {"posts_in": len(body.posts), "posts_out": len(posts), "cold_start": not body.interactions}},
    )
    return FeedResponse(posts=posts)
