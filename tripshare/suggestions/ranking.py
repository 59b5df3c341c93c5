from __future__ import annotations

from collections.abc import Iterable

from .models import ScoredSuggestion

DEFAULT_MIN_RELEVANCE = 0.3
DEFAULT_MAX_RESULTS = 20


def select(
    suggestions: Iterable[ScoredSuggestion],
    min_relevance: float = DEFAULT_MIN_RELEVANCE,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[ScoredSuggestion]:
    """Drop weak suggestions, then return the best ``max_results``.

    ``sorted`` is stable, so equal scores keep catalog order.
    """
    kept = [s for s in suggestions if s.relevance_score >= min_relevance]
    ranked = sorted(kept, key=lambda s: s.relevance_score, reverse=True)
    return ranked[:max_results]
