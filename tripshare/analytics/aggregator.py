from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "suggestions"]
    likes = [e for e in events if e["type"] == "like"]
    total = len(requests)

    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    trip_types: Counter[str] = Counter()
    budgets: Counter[str] = Counter()
    continents: Counter[str] = Counter()
    for r in requests:
        if r.get("trip_type"):
            trip_types[r["trip_type"]] += 1
        if r.get("budget"):
            budgets[r["budget"]] += 1
        if r.get("continent"):
            continents[r["continent"]] += 1

    # Filter usage rates
    filter_usage = {
        "trip_type": _percent(sum(trip_types.values()), total),
        "budget": _percent(sum(budgets.values()), total),
        "continent": _percent(sum(continents.values()), total),
        "max_results": _percent(sum(1 for r in requests if r.get("max_results")), total),
    }

    degraded = sum(1 for r in requests if r.get("degraded"))
    personalised = sum(1 for r in requests if r.get("preference_count", 0) > 0)

    liked: Counter[str] = Counter()
    for like in likes:
        liked[like.get("destination_id", "unknown")] += 1

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "degraded_rate": _percent(degraded, total),
        "personalised_rate": _percent(personalised, total),
        "top_trip_types": _top(trip_types),
        "top_budgets": _top(budgets),
        "top_continents": _top(continents),
        "filter_usage": filter_usage,
        "likes": {
            "total": len(likes),
            "failed": sum(1 for like in likes if not like.get("delivered", True)),
            "top_destinations": _top(liked),
        },
    }
