from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from .models import (
    CandidateDestination,
    DestinationPreference,
    PopularityTrend,
    ScoredSuggestion,
    SuggestionFilters,
)
from .similarity import similarity

POPULARITY_CAP = 0.3
POPULAR_REASON_THRESHOLD = 0.1
TRENDING_BONUS = 0.2
SIMILARITY_WEIGHT = 0.4
TASTE_MATCH_THRESHOLD = 0.5
TRIP_TYPE_BONUS = 0.3
BUDGET_BONUS = 0.2
CONTINENT_BONUS = 0.15
RECENCY_BONUS = 0.1
DEFAULT_RECENCY_DAYS = 30


def _score_candidate(
    candidate: CandidateDestination,
    preferences: Sequence[DestinationPreference],
    filters: SuggestionFilters,
    now: datetime,
    recency_window: timedelta,
) -> ScoredSuggestion:
    relevance = 0.0
    reasons: list[str] = []
    trending_bonus = 0.0

    relevance += candidate.ai_score / 100

    popularity = min(candidate.total_likes / 100, POPULARITY_CAP)
    relevance += popularity
    if popularity > POPULAR_REASON_THRESHOLD:
        reasons.append(f"Popular ({candidate.total_likes} likes)")

    if candidate.popularity_trend == PopularityTrend.rising:
        trending_bonus = TRENDING_BONUS
        relevance += trending_bonus
        reasons.append("Trending destination")

    user_similarity = similarity(candidate, preferences)
    relevance += user_similarity * SIMILARITY_WEIGHT
    if user_similarity > TASTE_MATCH_THRESHOLD:
        reasons.append("Matches your taste")

    if filters.trip_type is not None and filters.trip_type.value in candidate.ai_tags:
        relevance += TRIP_TYPE_BONUS
        reasons.append(f"Trip type: {filters.trip_type.value}")

    if filters.budget is not None and candidate.cost_estimate.budget == filters.budget:
        relevance += BUDGET_BONUS
        reasons.append(f"Budget match: {filters.budget.value}")

    if filters.continent is not None and candidate.continent == filters.continent:
        relevance += CONTINENT_BONUS
        reasons.append(f"Continent: {filters.continent.value}")

    if now - candidate.last_ai_update < recency_window:
        relevance += RECENCY_BONUS
        reasons.append("New suggestion")

    return ScoredSuggestion(
        destination=candidate,
        relevance_score=min(relevance, 1.0),
        match_reasons=reasons,
        user_similarity=user_similarity,
        trending_bonus=trending_bonus,
    )


def score_candidates(
    candidates: Sequence[CandidateDestination],
    preferences: Sequence[DestinationPreference],
    filters: SuggestionFilters | None = None,
    now: datetime | None = None,
    recency_days: int = DEFAULT_RECENCY_DAYS,
) -> list[ScoredSuggestion]:
    """Score every candidate, preserving input order.

    Pure given ``now``: the same inputs always produce the same scores and
    the same reason ordering.
    """
    filters = filters or SuggestionFilters()
    now = now or datetime.now(timezone.utc)
    window = timedelta(days=recency_days)
    return [
        _score_candidate(candidate, preferences, filters, now, window)
        for candidate in candidates
    ]
