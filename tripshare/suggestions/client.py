"""Async HTTP client for the TripShare backend.

Every method returns records already validated into the suggestion models.
Failures surface as :class:`BackendError`; callers decide whether to absorb
them.
"""
from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_SUGGESTIONS_CONFIG, SuggestionsConfig
from .models import (
    CandidateDestination,
    DestinationPreference,
    NewDestinationPreference,
    SuggestionStats,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BackendError(RuntimeError):
    """Raised when the backend is unreachable or answers with an unusable payload."""


def _parse_list(model: type[ModelT], payload: Any, source: str) -> list[ModelT]:
    if not isinstance(payload, list):
        raise BackendError(f"{source}: expected a JSON list, got {type(payload).__name__}")

    records: list[ModelT] = []
    for raw in payload:
        try:
            records.append(model.model_validate(raw))
        except ValidationError:
            logger.warning("%s: skipping malformed record %r", source, raw, exc_info=True)
    return records


class TripShareClient:
    def __init__(self, config: SuggestionsConfig = DEFAULT_SUGGESTIONS_CONFIG) -> None:
        self.config = config

    def _url(self, path: str) -> str:
        return f"{self.config.api_base_url.rstrip('/')}{path}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
                response = await client.request(method, self._url(path), **kwargs)
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BackendError(f"{method} {path} failed: {exc}") from exc

    async def fetch_preferences(self, user_id: str) -> list[DestinationPreference]:
        payload = await self._request("GET", f"/api/users/{user_id}/destination-preferences")
        return _parse_list(DestinationPreference, payload, "preferences")

    async def fetch_popular_destinations(self) -> list[CandidateDestination]:
        payload = await self._request("GET", "/api/destinations/popular")
        return _parse_list(CandidateDestination, payload, "popular")

    async def fetch_ai_destinations(self) -> list[CandidateDestination]:
        payload = await self._request("GET", "/api/destinations/ai-generated")
        return _parse_list(CandidateDestination, payload, "ai-generated")

    async def like_destination(self, user_id: str, destination_id: str) -> None:
        await self._request(
            "POST",
            f"/api/destinations/{destination_id}/like",
            json={"user_id": user_id},
        )

    async def save_preference(self, preference: NewDestinationPreference) -> None:
        await self._request(
            "POST",
            f"/api/users/{preference.user_id}/destination-preferences",
            json=preference.model_dump(mode="json"),
        )

    async def fetch_stats(self) -> SuggestionStats:
        payload = await self._request("GET", "/api/destinations/stats")
        try:
            return SuggestionStats.model_validate(payload)
        except ValidationError as exc:
            raise BackendError(f"stats: malformed payload: {exc}") from exc
