from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class TripType(str, Enum):
    cultural = "cultural"
    beach = "beach"
    adventure = "adventure"
    city = "city"
    nature = "nature"
    romantic = "romantic"
    family = "family"
    business = "business"


class BudgetLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class PopularityTrend(str, Enum):
    rising = "rising"
    stable = "stable"
    declining = "declining"


class DataSource(str, Enum):
    ai_generated = "ai_generated"
    ai_enhanced = "ai_enhanced"
    user_curated = "user_curated"


class Continent(str, Enum):
    europe = "Europe"
    asia = "Asia"
    africa = "Africa"
    north_america = "North America"
    south_america = "South America"
    oceania = "Oceania"
    antarctica = "Antarctica"
    unknown = "Unknown"


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ── Preferences ──────────────────────────────────────────────────────────


class NewDestinationPreference(BaseModel):
    user_id: str = Field(..., min_length=1)
    destination_id: str = Field(..., min_length=1)
    destination_name: str
    destination_country: str
    rating: int = Field(..., ge=1, le=5)
    visit_date: datetime | None = None
    trip_type: TripType
    budget_level: BudgetLevel
    duration_days: int = Field(..., ge=0)
    liked_places: list[str] = Field(default_factory=list)


class DestinationPreference(NewDestinationPreference):
    id: str
    created_at: datetime
    updated_at: datetime


class PreferenceIn(BaseModel):
    """Request body for saving a preference; the user comes from the session."""

    destination_id: str = Field(..., min_length=1)
    destination_name: str = Field(..., min_length=1)
    destination_country: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    visit_date: datetime | None = None
    trip_type: TripType
    budget_level: BudgetLevel
    duration_days: int = Field(..., ge=0)
    liked_places: list[str] = Field(default_factory=list)


# ── Candidates ───────────────────────────────────────────────────────────


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class CostEstimate(BaseModel):
    budget: BudgetLevel
    daily_cost_range: str = ""
    accommodation_cost: str = ""


class CandidateDestination(BaseModel):
    id: str
    name: str
    display_name: str
    country: str
    region: str | None = None
    continent: Continent = Continent.unknown
    coordinates: Coordinates

    ai_score: float = Field(..., ge=0.0, le=100.0)
    popularity_trend: PopularityTrend = PopularityTrend.stable
    trending_reasons: list[str] = Field(default_factory=list)

    primary_category: str = ""
    secondary_categories: list[str] = Field(default_factory=list)
    ai_tags: list[str] = Field(default_factory=list)

    best_time_to_visit: list[str] = Field(default_factory=list)
    suggested_duration: str = ""
    ideal_traveler_type: list[str] = Field(default_factory=list)
    cost_estimate: CostEstimate

    ai_description: str = ""
    ai_highlights: list[str] = Field(default_factory=list)
    ai_tips: list[str] = Field(default_factory=list)
    ai_warnings: list[str] | None = None

    last_ai_update: datetime
    ai_version: str = "1.0"
    data_source: DataSource = DataSource.ai_generated

    photo_urls: list[str] = Field(default_factory=list)
    video_url: str | None = None

    total_likes: int = Field(default=0, ge=0)
    total_visits: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)

    @field_validator("continent", mode="before")
    @classmethod
    def _known_continent(cls, value):
        if isinstance(value, Continent):
            return value
        try:
            return Continent(str(value).strip())
        except ValueError:
            return Continent.unknown

    @field_validator("last_ai_update")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)


class SeedDestination(BaseModel):
    id: str
    name: str
    display_name: str
    country: str
    type: str
    popularity_score: float = Field(..., ge=0.0, le=10.0)
    suggested_duration: str
    best_season: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    lat: float
    lng: float
    photo_url: str | None = None


# ── Requests / responses ─────────────────────────────────────────────────


class SuggestionFilters(BaseModel):
    trip_type: TripType | None = None
    budget: BudgetLevel | None = None
    continent: Continent | None = None
    duration: int | None = Field(default=None, ge=1)
    max_results: int | None = Field(default=None, ge=1)

    @field_validator("continent")
    @classmethod
    def _filterable_continent(cls, value: Continent | None) -> Continent | None:
        if value is Continent.unknown:
            raise ValueError("continent filter must name a known continent")
        return value


class ScoredSuggestion(BaseModel):
    destination: CandidateDestination
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    match_reasons: list[str] = Field(default_factory=list)
    user_similarity: float = Field(default=0.0, ge=0.0, le=1.0)
    trending_bonus: float = 0.0


class SuggestionResponse(BaseModel):
    suggestions: list[ScoredSuggestion]
    total_candidates: int
    degraded: bool = False


class SuggestionStats(BaseModel):
    total_destinations: int = 0
    ai_generated_count: int = 0
    user_curated_count: int = 0
    total_likes: int = 0
    average_rating: float = 0.0


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
