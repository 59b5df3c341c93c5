from __future__ import annotations

import re
from collections.abc import Sequence

from .models import CandidateDestination, DestinationPreference

COUNTRY_WEIGHT = 0.4
TRIP_TYPE_WEIGHT = 0.3
BUDGET_WEIGHT = 0.2
DURATION_WEIGHT = 0.1
HIGH_RATING_WEIGHT = 0.2

DURATION_TOLERANCE_DAYS = 2
HIGH_RATING = 4

_LEADING_INT = re.compile(r"^\s*(\d+)")


def first_integer_of(text: str) -> int | None:
    """Leading integer of a duration like ``"4-7 days"``; ``None`` if absent."""
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else None


def _record_score(
    candidate: CandidateDestination,
    preference: DestinationPreference,
    candidate_days: int | None,
) -> float:
    score = 0.0
    if preference.destination_country == candidate.country:
        score += COUNTRY_WEIGHT
    if preference.trip_type.value in candidate.ai_tags:
        score += TRIP_TYPE_WEIGHT
    if candidate.cost_estimate.budget == preference.budget_level:
        score += BUDGET_WEIGHT
    if candidate_days is not None and abs(candidate_days - preference.duration_days) <= DURATION_TOLERANCE_DAYS:
        score += DURATION_WEIGHT
    if preference.rating >= HIGH_RATING:
        score += HIGH_RATING_WEIGHT
    return score


def similarity(
    candidate: CandidateDestination,
    preferences: Sequence[DestinationPreference],
) -> float:
    """Average per-preference match score for *candidate*, within [0, 1].

    A single record can score up to 1.2; only the average is capped.
    """
    if not preferences:
        return 0.0

    candidate_days = first_integer_of(candidate.suggested_duration)
    total = sum(_record_score(candidate, p, candidate_days) for p in preferences)
    return min(total / len(preferences), 1.0)
