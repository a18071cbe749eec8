from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field

from ..favorites.config import DEFAULT_FAVORITES_CONFIG, FavoritesConfig
from ..favorites.storage import JsonFileStorage
from ..favorites.store import FavoritesStore
from ..geo.location import GeolocationResolver
from ..search.models import Business, LocationCoords

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the finder remembers about one client between requests."""

    client_id: str
    favorites: FavoritesStore
    resolver: GeolocationResolver | None = None
    location: LocationCoords | None = None
    location_error: str | None = None
    last_category: str = ""
    results: list[Business] = field(default_factory=list)
    selected_place_id: str | None = None
    _generations: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)
    _current_generation: int = 0

    def begin_search(self, category: str) -> int:
        """Start a search and return its generation token."""
        token = next(self._generations)
        self._current_generation = token
        self.last_category = category
        self.results = []
        return token

    def finish_search(self, token: int, businesses: list[Business]) -> bool:
        """Store *businesses* unless a newer search started meanwhile."""
        if token != self._current_generation:
            logger.debug(
                "Dropping stale search %d for client %s (latest is %d)",
                token, self.client_id, self._current_generation,
            )
            return False
        self.results = businesses
        return True


_states: dict[str, AppState] = {}


def get_state(client_id: str, config: FavoritesConfig | None = None) -> AppState:
    """Return the state for *client_id*, creating it (and loading favorites) on first use."""
    state = _states.get(client_id)
    if state is None:
        config = config or DEFAULT_FAVORITES_CONFIG
        storage = JsonFileStorage(config.client_dir(client_id))
        state = AppState(client_id=client_id, favorites=FavoritesStore(storage, config.slot))
        _states[client_id] = state
    return state


def clear_states() -> None:
    _states.clear()
