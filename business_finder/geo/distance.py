from __future__ import annotations

import math
from typing import Protocol

import numpy as np

EARTH_RADIUS_KM = 6371.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


def haversine_km(origin: HasCoordinates, target: HasCoordinates) -> float:
    """Great-circle distance in kilometres between two points given in degrees."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = math.radians(target.latitude - origin.latitude)
    d_lon = math.radians(target.longitude - origin.longitude)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push a past 1 for near-antipodal points.
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_km_array(
    origin_lat: float,
    origin_lon: float,
    latitudes: np.ndarray,
    longitudes: np.ndarray,
) -> np.ndarray:
    """Vectorised :func:`haversine_km` from one origin; NaN coordinates give NaN."""
    latitudes = np.asarray(latitudes, dtype=float)
    longitudes = np.asarray(longitudes, dtype=float)

    lat1 = np.radians(origin_lat)
    lat2 = np.radians(latitudes)
    d_lat = np.radians(latitudes - origin_lat)
    d_lon = np.radians(longitudes - origin_lon)

    a = np.sin(d_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
