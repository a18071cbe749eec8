from __future__ import annotations

import math

import pytest
from fastapi.testclient import TestClient

from business_finder.app import app
from business_finder.favorites.config import FavoritesConfig
from business_finder.search.models import Business
from business_finder.session import state as state_module

KM_PER_DEGREE_LAT = 6371.0 * math.pi / 180.0


def make_business(
    place_id: str,
    title: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> Business:
    return Business(
        title=title or f"Business {place_id}",
        uri=f"https://www.google.com/maps/search/?api=1&query_place_id={place_id}",
        place_id=place_id,
        latitude=latitude,
        longitude=longitude,
    )


def north_of(latitude: float, km: float) -> float:
    """Latitude *km* kilometres due north along a meridian."""
    return latitude + km / KM_PER_DEGREE_LAT


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    config = FavoritesConfig(storage_dir=tmp_path / "favorites")
    monkeypatch.setattr(state_module, "DEFAULT_FAVORITES_CONFIG", config)
    state_module.clear_states()
    yield config
    state_module.clear_states()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
