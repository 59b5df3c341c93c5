from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SuggestionsConfig:
    api_base_url: str = os.getenv("TRIPSHARE_API_BASE_URL", "http://localhost:8085")
    request_timeout: float = 10.0
    fetch_timeout: float = 10.0
    preference_cache_ttl: float = 30 * 60
    candidate_cache_ttl: float = 0.0  # 0 disables the candidate cache
    max_suggestions: int = 20
    min_relevance: float = 0.3
    recency_days: int = 30
    dedupe_candidates: bool = _env_flag("TRIPSHARE_DEDUPE_CANDIDATES")
    seed_path: Path = Path(__file__).resolve().parent.parent / "data" / "seed_destinations.csv"


DEFAULT_SUGGESTIONS_CONFIG = SuggestionsConfig()
