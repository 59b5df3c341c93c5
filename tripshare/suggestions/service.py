from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable

from ..analytics.store import record_event
from .cache import TTLCache
from .catalog import CandidateCatalog, utc_now
from .client import TripShareClient
from .config import DEFAULT_SUGGESTIONS_CONFIG, SuggestionsConfig
from .fallback import fallback_suggestions
from .models import (
    NewDestinationPreference,
    SuggestionFilters,
    SuggestionResponse,
    SuggestionStats,
)
from .preference_store import PreferenceStore
from .ranking import select
from .scoring import score_candidates

logger = logging.getLogger(__name__)


class CatalogUnavailableError(RuntimeError):
    """No candidate source, not even the seed list, produced a destination."""


class SmartSuggestionsService:
    def __init__(
        self,
        client: TripShareClient | None = None,
        config: SuggestionsConfig = DEFAULT_SUGGESTIONS_CONFIG,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.client = client or TripShareClient(config)
        self._now = now
        self.preferences = PreferenceStore(
            self.client,
            TTLCache(config.preference_cache_ttl, clock=clock),
            timeout=config.fetch_timeout,
        )
        self.catalog = CandidateCatalog(
            self.client,
            config,
            cache=TTLCache(config.candidate_cache_ttl, clock=clock),
            now=now,
        )

    @property
    def _default_photo_url(self) -> str:
        return f"{self.config.api_base_url.rstrip('/')}/storage/defaults/default-trip-image.jpg"

    async def get_smart_suggestions(
        self,
        user_id: str,
        filters: SuggestionFilters | None = None,
    ) -> SuggestionResponse:
        start_time = time.time()
        filters = filters or SuggestionFilters()
        max_results = filters.max_results or self.config.max_suggestions
        degraded = False

        try:
            preferences, candidates = await asyncio.gather(
                self.preferences.get_preferences(user_id),
                self.catalog.get_candidates(),
            )
            if not candidates:
                raise CatalogUnavailableError("no candidate destinations available")

            scored = score_candidates(
                candidates,
                preferences,
                filters,
                now=self._now(),
                recency_days=self.config.recency_days,
            )
            suggestions = select(scored, self.config.min_relevance, max_results)
            total_candidates = len(candidates)
        except Exception:
            logger.exception("Smart suggestions failed for user %s; using popularity fallback", user_id)
            suggestions = fallback_suggestions(
                max_results,
                self._now(),
                seed_path=self.config.seed_path,
                default_photo_url=self._default_photo_url,
            )
            total_candidates = len(suggestions)
            preferences = []
            degraded = True

        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        record_event("suggestions", {
            "user_id": user_id,
            "trip_type": filters.trip_type.value if filters.trip_type else None,
            "budget": filters.budget.value if filters.budget else None,
            "continent": filters.continent.value if filters.continent else None,
            "max_results": filters.max_results,
            "preference_count": len(preferences),
            "total_candidates": total_candidates,
            "results_returned": len(suggestions),
            "response_time_ms": elapsed_ms,
            "degraded": degraded,
        })
        logger.info(
            "Suggestions for user %s: %d of %d candidates in %.1fms%s",
            user_id,
            len(suggestions),
            total_candidates,
            elapsed_ms,
            " (degraded)" if degraded else "",
        )

        return SuggestionResponse(
            suggestions=suggestions,
            total_candidates=total_candidates,
            degraded=degraded,
        )

    async def like_destination(self, user_id: str, destination_id: str) -> None:
        """Best-effort like signal; failures are logged, never raised."""
        delivered = True
        try:
            await self.client.like_destination(user_id, destination_id)
        except Exception:
            delivered = False
            logger.warning("Could not like destination %s for user %s", destination_id, user_id, exc_info=True)
        record_event("like", {
            "user_id": user_id,
            "destination_id": destination_id,
            "delivered": delivered,
        })

    async def save_user_preference(self, preference: NewDestinationPreference) -> None:
        """Forward a new preference upstream and drop the user's cached preferences."""
        try:
            await self.client.save_preference(preference)
        except Exception:
            logger.warning("Could not save preference for user %s", preference.user_id, exc_info=True)
            return
        self.preferences.invalidate(preference.user_id)

    async def get_suggestion_stats(self) -> SuggestionStats:
        try:
            return await self.client.fetch_stats()
        except Exception:
            logger.warning("Could not fetch suggestion stats", exc_info=True)
            return SuggestionStats()

    def clear_cache(self) -> None:
        self.preferences.clear_cache()
        self.catalog.clear_cache()

    def cache_stats(self) -> dict:
        return {
            "preferences": self.preferences.cache_stats(),
            "candidates": self.catalog.cache_stats(),
        }
