from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from tripshare.analytics.store import clear_events
from tripshare.suggestions.client import BackendError
from tripshare.suggestions.config import SuggestionsConfig
from tripshare.suggestions.models import (
    CandidateDestination,
    DestinationPreference,
    SuggestionStats,
)
from tripshare.suggestions.service import SmartSuggestionsService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClient:
    """Stands in for TripShareClient; ``fail`` names the calls that raise."""

    def __init__(self, preferences=None, popular=None, generated=None, stats=None, fail=()):
        self.preferences = preferences or {}
        self.popular = popular or []
        self.generated = generated or []
        self.stats = stats or SuggestionStats()
        self.fail = set(fail)
        self.calls: list[tuple] = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail:
            raise BackendError(f"{name} unavailable")

    async def fetch_preferences(self, user_id):
        self.calls.append(("preferences", user_id))
        self._maybe_fail("preferences")
        return self.preferences.get(user_id, [])

    async def fetch_popular_destinations(self):
        self.calls.append(("popular",))
        self._maybe_fail("popular")
        return list(self.popular)

    async def fetch_ai_destinations(self):
        self.calls.append(("ai-generated",))
        self._maybe_fail("ai-generated")
        return list(self.generated)

    async def like_destination(self, user_id, destination_id):
        self.calls.append(("like", user_id, destination_id))
        self._maybe_fail("like")

    async def save_preference(self, preference):
        self.calls.append(("save", preference.user_id))
        self._maybe_fail("save")

    async def fetch_stats(self):
        self.calls.append(("stats",))
        self._maybe_fail("stats")
        return self.stats

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


def _candidate(**overrides) -> CandidateDestination:
    data = {
        "id": "lisbon-portugal",
        "name": "Lisbon",
        "display_name": "Lisbon, Portugal",
        "country": "Portugal",
        "continent": "Europe",
        "coordinates": {"latitude": 38.72, "longitude": -9.14},
        "ai_score": 80,
        "popularity_trend": "stable",
        "ai_tags": [],
        "suggested_duration": "4-7 days",
        "cost_estimate": {"budget": "medium"},
        "last_ai_update": NOW - timedelta(days=60),
        "total_likes": 0,
    }
    data.update(overrides)
    return CandidateDestination.model_validate(data)


def _preference(**overrides) -> DestinationPreference:
    data = {
        "id": "pref-1",
        "user_id": "user-1",
        "destination_id": "porto-portugal",
        "destination_name": "Porto",
        "destination_country": "Spain",
        "rating": 3,
        "trip_type": "business",
        "budget_level": "high",
        "duration_days": 20,
        "created_at": NOW - timedelta(days=100),
        "updated_at": NOW - timedelta(days=100),
    }
    data.update(overrides)
    return DestinationPreference.model_validate(data)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_candidate():
    return _candidate


@pytest.fixture
def make_preference():
    return _preference


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return SuggestionsConfig(api_base_url="http://backend.test", fetch_timeout=1.0)


@pytest.fixture
def make_service(config, clock):
    def _build(client: FakeClient, **config_overrides) -> SmartSuggestionsService:
        cfg = replace(config, **config_overrides)
        return SmartSuggestionsService(client=client, config=cfg, clock=clock, now=lambda: NOW)
    return _build


@pytest.fixture(autouse=True)
def _reset_events():
    clear_events()
    yield
    clear_events()
