from __future__ import annotations

import asyncio
import logging

from .cache import TTLCache
from .client import TripShareClient
from .models import DestinationPreference

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Per-user destination preferences, cached for a bounded time."""

    def __init__(
        self,
        client: TripShareClient,
        cache: TTLCache,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._timeout = timeout

    async def get_preferences(self, user_id: str) -> list[DestinationPreference]:
        """Return the user's preferences, or ``[]`` when they cannot be fetched."""
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        try:
            preferences = await asyncio.wait_for(
                self._client.fetch_preferences(user_id), timeout=self._timeout,
            )
        except Exception:
            logger.warning("Could not fetch preferences for user %s", user_id, exc_info=True)
            return []

        self._cache.set(user_id, preferences)
        return preferences

    def invalidate(self, user_id: str) -> None:
        self._cache.delete(user_id)

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict:
        return self._cache.stats()
