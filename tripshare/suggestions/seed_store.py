from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import DEFAULT_SUGGESTIONS_CONFIG
from .models import (
    BudgetLevel,
    CandidateDestination,
    Continent,
    CostEstimate,
    Coordinates,
    DataSource,
    PopularityTrend,
    SeedDestination,
)

_LIST_SEPARATOR = "|"

COUNTRY_CONTINENTS: dict[str, Continent] = {
    "France": Continent.europe,
    "Italy": Continent.europe,
    "Spain": Continent.europe,
    "Germany": Continent.europe,
    "Greece": Continent.europe,
    "Iceland": Continent.europe,
    "Japan": Continent.asia,
    "China": Continent.asia,
    "Thailand": Continent.asia,
    "Indonesia": Continent.asia,
    "United States": Continent.north_america,
    "Canada": Continent.north_america,
    "Mexico": Continent.north_america,
    "Brazil": Continent.south_america,
    "Argentina": Continent.south_america,
    "Morocco": Continent.africa,
    "Egypt": Continent.africa,
    "South Africa": Continent.africa,
    "Australia": Continent.oceania,
    "New Zealand": Continent.oceania,
}

_seeds: dict[Path, list[SeedDestination]] = {}


def continent_for_country(country: str) -> Continent:
    return COUNTRY_CONTINENTS.get(country.strip(), Continent.unknown)


def _split(value) -> list[str]:
    if pd.isna(value):
        return []
    return [part.strip() for part in str(value).split(_LIST_SEPARATOR) if part.strip()]


def _load(path: Path) -> list[SeedDestination]:
    df = pd.read_csv(path)
    seeds: list[SeedDestination] = []
    for row in df.to_dict(orient="records"):
        photo_url = row.get("photo_url")
        seeds.append(SeedDestination(
            id=str(row["id"]),
            name=row["name"],
            display_name=row["display_name"],
            country=row["country"],
            type=row["type"],
            popularity_score=float(row["popularity_score"]),
            suggested_duration=row["suggested_duration"],
            best_season=_split(row.get("best_season")),
            highlights=_split(row.get("highlights")),
            lat=float(row["lat"]),
            lng=float(row["lng"]),
            photo_url=None if pd.isna(photo_url) else str(photo_url),
        ))
    return seeds


def load_seed_destinations(path: Path = DEFAULT_SUGGESTIONS_CONFIG.seed_path) -> list[SeedDestination]:
    """Return the static seed destinations, reading the CSV on first call."""
    if path not in _seeds:
        _seeds[path] = _load(path)
    return _seeds[path]


def seed_to_candidate(
    seed: SeedDestination,
    now: datetime,
    default_photo_url: str | None = None,
) -> CandidateDestination:
    """Reshape a seed into a candidate, deriving engagement from its popularity."""
    popularity = seed.popularity_score
    photo = seed.photo_url or default_photo_url
    return CandidateDestination(
        id=seed.id,
        name=seed.name,
        display_name=seed.display_name,
        country=seed.country,
        continent=continent_for_country(seed.country),
        coordinates=Coordinates(latitude=seed.lat, longitude=seed.lng),
        ai_score=popularity * 10,
        popularity_trend=PopularityTrend.stable,
        primary_category=seed.type,
        ai_tags=[seed.type],
        best_time_to_visit=list(seed.best_season),
        suggested_duration=seed.suggested_duration,
        ideal_traveler_type=["general"],
        cost_estimate=CostEstimate(
            budget=BudgetLevel.medium,
            daily_cost_range="50-150 EUR",
            accommodation_cost="80-200 EUR",
        ),
        ai_description=f"Discover {seed.name}, an exceptional destination",
        ai_highlights=list(seed.highlights),
        ai_tips=["Book in advance", "Visit outside peak season"],
        last_ai_update=now,
        data_source=DataSource.user_curated,
        photo_urls=[photo] if photo else [],
        total_likes=int(popularity * 1000),
        total_visits=int(popularity * 500),
        # popularity is out of 10, ratings are out of 5
        average_rating=popularity / 2,
        review_count=int(popularity * 200),
    )
