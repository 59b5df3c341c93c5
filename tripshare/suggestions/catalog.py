from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable

from .cache import TTLCache
from .client import TripShareClient
from .config import DEFAULT_SUGGESTIONS_CONFIG, SuggestionsConfig
from .models import CandidateDestination
from .seed_store import load_seed_destinations, seed_to_candidate

logger = logging.getLogger(__name__)

_CANDIDATES_KEY = "candidates"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def canonical_key(candidate: CandidateDestination) -> tuple[str, str]:
    return (candidate.name.strip().casefold(), candidate.country.strip().casefold())


def _union(first: list[str], second: list[str]) -> list[str]:
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(item)
    return merged


def _merge(existing: CandidateDestination, incoming: CandidateDestination) -> CandidateDestination:
    base = incoming if incoming.ai_score > existing.ai_score else existing
    return base.model_copy(update={
        "ai_tags": _union(existing.ai_tags, incoming.ai_tags),
        "trending_reasons": _union(existing.trending_reasons, incoming.trending_reasons),
        "total_likes": max(existing.total_likes, incoming.total_likes),
        "total_visits": max(existing.total_visits, incoming.total_visits),
        "review_count": max(existing.review_count, incoming.review_count),
    })


def dedupe_candidates(candidates: list[CandidateDestination]) -> list[CandidateDestination]:
    """Merge records describing the same place, keeping first-seen order."""
    merged: dict[tuple[str, str], CandidateDestination] = {}
    for candidate in candidates:
        key = canonical_key(candidate)
        if key in merged:
            merged[key] = _merge(merged[key], candidate)
        else:
            merged[key] = candidate
    return list(merged.values())


class CandidateCatalog:
    """Pool of destinations eligible for suggestion.

    Popular and AI-generated destinations are fetched concurrently; each
    source fails on its own and contributes nothing when it does. The static
    seed list is used only when both remote sources failed.
    """

    def __init__(
        self,
        client: TripShareClient,
        config: SuggestionsConfig = DEFAULT_SUGGESTIONS_CONFIG,
        cache: TTLCache | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client = client
        self._config = config
        self._cache = cache if cache is not None else TTLCache(config.candidate_cache_ttl)
        self._now = now

    async def _fetch_source(
        self,
        name: str,
        fetch: Callable[[], Awaitable[list[CandidateDestination]]],
    ) -> list[CandidateDestination] | None:
        try:
            return await asyncio.wait_for(fetch(), timeout=self._config.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning("Candidate source %s timed out after %.1fs", name, self._config.fetch_timeout)
        except Exception:
            logger.warning("Candidate source %s unavailable", name, exc_info=True)
        return None

    def _static_candidates(self) -> list[CandidateDestination]:
        now = self._now()
        default_photo = f"{self._config.api_base_url.rstrip('/')}/storage/defaults/default-trip-image.jpg"
        return [
            seed_to_candidate(seed, now, default_photo)
            for seed in load_seed_destinations(self._config.seed_path)
        ]

    def _static_source(self) -> list[CandidateDestination]:
        try:
            return self._static_candidates()
        except Exception:
            logger.warning("Static seed destinations unavailable", exc_info=True)
            return []

    async def get_candidates(self) -> list[CandidateDestination]:
        cached = self._cache.get(_CANDIDATES_KEY)
        if cached is not None:
            return cached

        popular, generated = await asyncio.gather(
            self._fetch_source("popular", self._client.fetch_popular_destinations),
            self._fetch_source("ai-generated", self._client.fetch_ai_destinations),
        )

        if popular is None and generated is None:
            logger.info("Remote candidate sources unavailable; using static seed list")
            candidates = self._static_source()
        else:
            candidates = (popular or []) + (generated or [])

        if self._config.dedupe_candidates:
            candidates = dedupe_candidates(candidates)

        if candidates:
            self._cache.set(_CANDIDATES_KEY, candidates)
        return candidates

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict:
        return self._cache.stats()
