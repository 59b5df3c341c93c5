from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from .config import DEFAULT_SUGGESTIONS_CONFIG
from .models import ScoredSuggestion
from .seed_store import load_seed_destinations, seed_to_candidate

logger = logging.getLogger(__name__)


def fallback_suggestions(
    max_results: int,
    now: datetime,
    seed_path: Path = DEFAULT_SUGGESTIONS_CONFIG.seed_path,
    default_photo_url: str | None = None,
) -> list[ScoredSuggestion]:
    """Popularity-only ranking of the seed destinations. Never raises."""
    try:
        seeds = load_seed_destinations(seed_path)
        suggestions = [
            ScoredSuggestion(
                destination=seed_to_candidate(seed, now, default_photo_url),
                relevance_score=seed.popularity_score / 10,
                match_reasons=[f"Popular destination ({seed.popularity_score:g}/10)"],
                user_similarity=0.0,
                trending_bonus=0.0,
            )
            for seed in seeds
        ]
    except Exception:
        logger.exception("Fallback seed destinations could not be loaded")
        return []

    ranked = sorted(suggestions, key=lambda s: s.relevance_score, reverse=True)
    return ranked[:max_results]
