from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_user
from .auth.users import authenticate
from .suggestions.models import (
    LoginRequest,
    NewDestinationPreference,
    PreferenceIn,
    SuggestionFilters,
    SuggestionResponse,
    SuggestionStats,
)
from .suggestions.service import SmartSuggestionsService

logging.basicConfig(
    level=getattr(logging, os.getenv("TRIPSHARE_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="[%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(title="TripShare Smart Suggestions API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "tripshare-secret-change-in-production"),
)

_service = SmartSuggestionsService()


def get_service() -> SmartSuggestionsService:
    return _service


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Traveller endpoints ──────────────────────────────────────────────────


@app.post("/suggestions", response_model=SuggestionResponse)
async def suggestions(
    body: SuggestionFilters,
    user: dict = Depends(require_user),
    service: SmartSuggestionsService = Depends(get_service),
) -> SuggestionResponse:
    return await service.get_smart_suggestions(user["user_id"], body)


@app.get("/suggestions/stats", response_model=SuggestionStats)
async def suggestion_stats(
    user: dict = Depends(require_user),
    service: SmartSuggestionsService = Depends(get_service),
) -> SuggestionStats:
    return await service.get_suggestion_stats()


@app.post("/destinations/{destination_id}/like")
async def like_destination(
    destination_id: str,
    user: dict = Depends(require_user),
    service: SmartSuggestionsService = Depends(get_service),
) -> dict:
    await service.like_destination(user["user_id"], destination_id)
    return {"status": "liked"}


@app.post("/preferences")
async def save_preference(
    body: PreferenceIn,
    user: dict = Depends(require_user),
    service: SmartSuggestionsService = Depends(get_service),
) -> dict:
    preference = NewDestinationPreference(user_id=user["user_id"], **body.model_dump())
    await service.save_user_preference(preference)
    return {"status": "saved"}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(
    user: dict = Depends(require_admin),
    service: SmartSuggestionsService = Depends(get_service),
) -> dict:
    return service.cache_stats()


@app.post("/cache/clear")
def cache_clear(
    user: dict = Depends(require_admin),
    service: SmartSuggestionsService = Depends(get_service),
) -> dict:
    service.clear_cache()
    return {"status": "cleared"}
