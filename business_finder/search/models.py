from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_RADIUS_KM = 50.0
MIN_RADIUS_KM = 1.0
MAX_RADIUS_KM = 50.0


class LocationCoords(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Business(BaseModel):
    title: str = Field(..., min_length=1)
    uri: str
    place_id: str = Field(..., min_length=1, description="Unique external place identifier")
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class BusinessDetails(BaseModel):
    address: str | None = None
    phone: str | None = None
    hours: list[str] | None = None
    website: str | None = None


class RankedBusiness(BaseModel):
    business: Business
    distance_km: float | None = None


class SearchStatus(str, Enum):
    ok = "ok"
    no_results = "no_results"
    out_of_radius = "out_of_radius"


class SearchRequest(BaseModel):
    category: str = Field(default="", max_length=200)
    manual_location: str = Field(default="", max_length=200)
    location: LocationCoords | None = Field(
        default=None,
        description="Explicit coordinates; the client's resolved location is used when omitted",
    )
    radius_km: float = Field(default=DEFAULT_RADIUS_KM, ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM)


class SearchResponse(BaseModel):
    status: SearchStatus
    message: str | None = None
    results: list[RankedBusiness]
    total_found: int
    stale: bool = False


class LocationReport(BaseModel):
    """Outcome of the browser's one-shot geolocation request."""

    supported: bool = True
    latitude: float | None = None
    longitude: float | None = None
    error_code: int | None = Field(default=None, ge=1, le=3)
    error_message: str | None = None


class LocationStatus(BaseModel):
    location: LocationCoords | None = None
    location_error: str | None = None


class PitchRequest(BaseModel):
    business_name: str = Field(..., min_length=1)
    category: str | None = None


class PitchResponse(BaseModel):
    pitch: str


class FavoritesResponse(BaseModel):
    favorites: list[RankedBusiness]
    warning: str | None = None


class FavoriteToggleResponse(BaseModel):
    is_favorite: bool
    favorites: list[RankedBusiness]


class FavoriteStatus(BaseModel):
    place_id: str
    is_favorite: bool
