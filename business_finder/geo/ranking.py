from __future__ import annotations

import math

import pandas as pd

from ..search.models import Business, LocationCoords, RankedBusiness
from .distance import haversine_km, haversine_km_array


def distance_to(location: LocationCoords | None, business: Business) -> float | None:
    """Distance from *location* to *business*, or ``None`` when either lacks coordinates."""
    if location is None or not business.has_coordinates:
        return None
    return haversine_km(location, business)


def _distance_frame(businesses: list[Business], location: LocationCoords) -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "latitude": [b.latitude for b in businesses],
            "longitude": [b.longitude for b in businesses],
        },
        dtype="float64",
    )
    frame["distance_km"] = haversine_km_array(
        location.latitude,
        location.longitude,
        frame["latitude"].to_numpy(),
        frame["longitude"].to_numpy(),
    )
    return frame


def _to_ranked(business: Business, distance: float) -> RankedBusiness:
    return RankedBusiness(
        business=business,
        distance_km=None if pd.isna(distance) else float(distance),
    )


def annotate_distances(
    businesses: list[Business],
    location: LocationCoords | None,
) -> list[RankedBusiness]:
    """Attach distances without filtering or reordering."""
    if location is None or not businesses:
        return [RankedBusiness(business=b) for b in businesses]

    frame = _distance_frame(businesses, location)
    return [_to_ranked(b, d) for b, d in zip(businesses, frame["distance_km"])]


def rank_businesses(
    businesses: list[Business],
    location: LocationCoords | None,
    radius_km: float,
) -> list[RankedBusiness]:
    """
    Filter *businesses* to those within *radius_km* of *location*, nearest first.

    Businesses without coordinates have no distance: they always pass the
    radius filter and sort after every business with a distance. Equal
    distances keep their input order. Without a location nothing is filtered
    or reordered.
    """
    if math.isnan(radius_km) or radius_km < 0:
        raise ValueError(f"radius_km must be a non-negative number, got {radius_km!r}")

    if location is None or not businesses:
        return [RankedBusiness(business=b) for b in businesses]

    frame = _distance_frame(businesses, location)
    distances = frame["distance_km"]

    mask = distances.isna() | (distances <= radius_km)
    kept = frame.loc[mask].sort_values("distance_km", kind="stable", na_position="last")

    return [_to_ranked(businesses[idx], row["distance_km"]) for idx, row in kept.iterrows()]
