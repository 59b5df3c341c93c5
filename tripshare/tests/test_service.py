from __future__ import annotations

import asyncio
from unittest.mock import patch

from tripshare.analytics.store import get_events
from tripshare.suggestions.models import (
    NewDestinationPreference,
    SuggestionFilters,
    SuggestionStats,
)


def _run(coro):
    return asyncio.run(coro)


def test_personalised_pipeline(make_client, make_candidate, make_preference, make_service):
    client = make_client(
        preferences={"user-1": [make_preference(destination_country="Japan", trip_type="city",
                                                budget_level="medium", duration_days=5, rating=5)]},
        popular=[
            make_candidate(id="tokyo", name="Tokyo", country="Japan", continent="Asia",
                           ai_score=70, ai_tags=["city"]),
            make_candidate(id="weak", ai_score=5),
        ],
        generated=[make_candidate(id="lisbon", ai_score=60)],
    )
    service = make_service(client)

    response = _run(service.get_smart_suggestions("user-1"))

    assert not response.degraded
    assert response.total_candidates == 3
    assert [s.destination.id for s in response.suggestions] == ["tokyo", "lisbon"]
    tokyo = response.suggestions[0]
    assert tokyo.relevance_score == 1.0
    assert "Matches your taste" in tokyo.match_reasons


def test_max_results_filter(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate(id=str(i), ai_score=40 + i * 5) for i in range(10)])
    service = make_service(client)

    response = _run(service.get_smart_suggestions("user-1", SuggestionFilters(max_results=3)))

    assert [s.destination.id for s in response.suggestions] == ["9", "8", "7"]


def test_max_results_above_fifty_is_honoured(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate(id=str(i), ai_score=50) for i in range(60)])
    service = make_service(client)

    response = _run(service.get_smart_suggestions("user-1", SuggestionFilters(max_results=60)))

    assert len(response.suggestions) == 60


def test_default_max_results_comes_from_config(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate(id=str(i), ai_score=50) for i in range(30)])
    service = make_service(client, max_suggestions=5)

    response = _run(service.get_smart_suggestions("user-1"))

    assert len(response.suggestions) == 5


def test_all_sources_failing_uses_fallback(make_client, make_service):
    client = make_client(fail={"preferences", "popular", "ai-generated"})
    service = make_service(client)

    def _seed_down():
        raise OSError("seed file unreadable")

    with patch.object(service.catalog, "_static_candidates", _seed_down):
        response = _run(service.get_smart_suggestions("user-1"))

    assert response.degraded
    assert response.suggestions
    scores = [s.relevance_score for s in response.suggestions]
    assert scores == sorted(scores, reverse=True)
    assert all(s.user_similarity == 0 for s in response.suggestions)
    assert all(s.trending_bonus == 0 for s in response.suggestions)
    top = response.suggestions[0]
    assert top.destination.id == "paris-france"
    assert top.relevance_score == 0.95
    assert top.match_reasons == ["Popular destination (9.5/10)"]


def test_unexpected_scoring_error_uses_fallback(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate()])
    service = make_service(client)

    with patch("tripshare.suggestions.service.score_candidates", side_effect=ValueError("boom")):
        response = _run(service.get_smart_suggestions("user-1", SuggestionFilters(max_results=2)))

    assert response.degraded
    assert [s.destination.id for s in response.suggestions] == ["paris-france", "tokyo-japan"]


def test_request_is_recorded(make_client, make_candidate, make_service):
    service = make_service(make_client(popular=[make_candidate()]))

    _run(service.get_smart_suggestions("user-1", SuggestionFilters(trip_type="beach")))

    [event] = get_events()
    assert event["type"] == "suggestions"
    assert event["trip_type"] == "beach"
    assert event["degraded"] is False
    assert event["results_returned"] == 1


def test_preferences_cached_across_requests(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate()])
    service = make_service(client)

    _run(service.get_smart_suggestions("user-1"))
    _run(service.get_smart_suggestions("user-1"))
    assert client.count("preferences") == 1

    service.clear_cache()
    _run(service.get_smart_suggestions("user-1"))
    assert client.count("preferences") == 2


def test_save_preference_invalidates_user_cache(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate()])
    service = make_service(client)
    preference = NewDestinationPreference(
        user_id="user-1",
        destination_id="kyoto-japan",
        destination_name="Kyoto",
        destination_country="Japan",
        rating=5,
        trip_type="cultural",
        budget_level="medium",
        duration_days=4,
    )

    _run(service.get_smart_suggestions("user-1"))
    _run(service.save_user_preference(preference))
    _run(service.get_smart_suggestions("user-1"))

    assert client.count("save") == 1
    assert client.count("preferences") == 2


def test_failed_save_is_swallowed_and_keeps_cache(make_client, make_candidate, make_service):
    client = make_client(popular=[make_candidate()], fail={"save"})
    service = make_service(client)
    preference = NewDestinationPreference(
        user_id="user-1",
        destination_id="kyoto-japan",
        destination_name="Kyoto",
        destination_country="Japan",
        rating=2,
        trip_type="cultural",
        budget_level="low",
        duration_days=3,
    )

    _run(service.get_smart_suggestions("user-1"))
    _run(service.save_user_preference(preference))
    _run(service.get_smart_suggestions("user-1"))

    assert client.count("preferences") == 1


def test_like_destination_is_best_effort(make_client, make_service):
    client = make_client(fail={"like"})
    service = make_service(client)

    _run(service.like_destination("user-1", "paris-france"))

    assert client.calls == [("like", "user-1", "paris-france")]
    [event] = get_events()
    assert event["type"] == "like"
    assert event["delivered"] is False


def test_stats_fall_back_to_zeros(make_client, make_service):
    ok = make_service(make_client(stats=SuggestionStats(total_destinations=12, total_likes=40)))
    down = make_service(make_client(fail={"stats"}))

    assert _run(ok.get_suggestion_stats()).total_destinations == 12
    assert _run(down.get_suggestion_stats()) == SuggestionStats()
