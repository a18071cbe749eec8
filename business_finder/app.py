from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query
from starlette.middleware.sessions import SessionMiddleware

from .errors import (
    DetailFetchFailure,
    FavoritesSaveFailure,
    GeolocationUnavailable,
    LookupFailure,
    MissingInput,
    PitchGenerationFailure,
)
from .geo.location import GeolocationResolver, capability_from_report
from .geo.ranking import annotate_distances, rank_businesses
from .llm.groq_client import (
    find_nearby_businesses,
    generate_contact_pitch,
    get_business_details,
)
from .search.models import (
    DEFAULT_RADIUS_KM,
    MAX_RADIUS_KM,
    MIN_RADIUS_KM,
    Business,
    BusinessDetails,
    FavoriteStatus,
    FavoriteToggleResponse,
    FavoritesResponse,
    LocationCoords,
    LocationReport,
    LocationStatus,
    PitchRequest,
    PitchResponse,
    RankedBusiness,
    SearchRequest,
    SearchResponse,
    SearchStatus,
)
from .search.orchestrator import (
    no_results_message,
    search_businesses,
    validate_search_input,
)
from .session.dependencies import get_app_state
from .session.state import AppState

logger = logging.getLogger(__name__)

MISSING_PITCH_CATEGORY_MESSAGE = (
    "Business category is not available. Please perform a search first."
)

app = FastAPI(title="Nearby Business Finder API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "business-finder-secret-change-in-production"),
)


def _out_of_radius_message(radius_km: float) -> str:
    return f"No results found within {radius_km:g}km. Try increasing the search radius."


def _ranked_response(
    businesses: list[Business],
    category: str,
    location: LocationCoords | None,
    radius_km: float,
    *,
    stale: bool = False,
) -> SearchResponse:
    total = len(businesses)
    ranked = rank_businesses(businesses, location, radius_km)

    if total == 0:
        status = SearchStatus.no_results
        message = no_results_message(category)
    elif not ranked:
        status = SearchStatus.out_of_radius
        message = _out_of_radius_message(radius_km)
    else:
        status = SearchStatus.ok
        message = None

    return SearchResponse(
        status=status,
        message=message,
        results=ranked,
        total_found=total,
        stale=stale,
    )


def _favorites_view(state: AppState) -> list[RankedBusiness]:
    return annotate_distances(state.favorites.all(), state.location)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Location ─────────────────────────────────────────────────────────────


@app.post("/location", response_model=LocationStatus)
def report_location(
    body: LocationReport,
    state: AppState = Depends(get_app_state),
) -> LocationStatus:
    # One-shot: only the first report per client is resolved.
    if state.resolver is None:
        state.resolver = GeolocationResolver(capability_from_report(body))
    try:
        state.location = state.resolver.resolve()
        state.location_error = None
    except GeolocationUnavailable as exc:
        state.location = None
        state.location_error = exc.message
    return LocationStatus(location=state.location, location_error=state.location_error)


@app.get("/location", response_model=LocationStatus)
def current_location(state: AppState = Depends(get_app_state)) -> LocationStatus:
    return LocationStatus(location=state.location, location_error=state.location_error)


# ── Search ───────────────────────────────────────────────────────────────


@app.post("/search", response_model=SearchResponse)
def search(
    body: SearchRequest,
    state: AppState = Depends(get_app_state),
) -> SearchResponse:
    if body.location is not None:
        state.location = body.location
        state.location_error = None
    location = state.location

    # A rejected search keeps the previous results.
    try:
        validate_search_input(body.category, location, body.manual_location)
    except MissingInput as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    token = state.begin_search(body.category.strip())
    try:
        outcome = search_businesses(
            body.category, location, body.manual_location, find_nearby_businesses,
        )
    except LookupFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message)

    applied = state.finish_search(token, outcome.businesses)
    logger.info(
        "Search %r returned %d businesses (applied=%s)",
        outcome.category, len(outcome.businesses), applied,
    )
    return _ranked_response(
        outcome.businesses, outcome.category, location, body.radius_km, stale=not applied,
    )


@app.get("/results", response_model=SearchResponse)
def results(
    radius_km: float = Query(default=DEFAULT_RADIUS_KM, ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM),
    state: AppState = Depends(get_app_state),
) -> SearchResponse:
    return _ranked_response(state.results, state.last_category, state.location, radius_km)


# ── Business details & outreach ─────────────────────────────────────────


@app.get("/businesses/{place_id}/details", response_model=BusinessDetails)
def business_details(
    place_id: str,
    state: AppState = Depends(get_app_state),
) -> BusinessDetails:
    state.selected_place_id = place_id
    try:
        return get_business_details(place_id)
    except DetailFetchFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message)


@app.post("/pitch", response_model=PitchResponse)
def pitch(
    body: PitchRequest,
    state: AppState = Depends(get_app_state),
) -> PitchResponse:
    category = (body.category or state.last_category).strip()
    if not category:
        raise HTTPException(status_code=400, detail=MISSING_PITCH_CATEGORY_MESSAGE)
    try:
        text = generate_contact_pitch(body.business_name, category)
    except PitchGenerationFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message)
    return PitchResponse(pitch=text)


# ── Favorites ────────────────────────────────────────────────────────────


@app.get("/favorites", response_model=FavoritesResponse)
def favorites(state: AppState = Depends(get_app_state)) -> FavoritesResponse:
    return FavoritesResponse(favorites=_favorites_view(state), warning=state.favorites.warning)


@app.post("/favorites/toggle", response_model=FavoriteToggleResponse)
def toggle_favorite(
    body: Business,
    state: AppState = Depends(get_app_state),
) -> FavoriteToggleResponse:
    try:
        is_favorite = state.favorites.toggle(body)
    except FavoritesSaveFailure as exc:
        raise HTTPException(status_code=503, detail=exc.message)
    return FavoriteToggleResponse(is_favorite=is_favorite, favorites=_favorites_view(state))


@app.get("/favorites/{place_id}", response_model=FavoriteStatus)
def favorite_status(
    place_id: str,
    state: AppState = Depends(get_app_state),
) -> FavoriteStatus:
    return FavoriteStatus(place_id=place_id, is_favorite=state.favorites.contains(place_id))
