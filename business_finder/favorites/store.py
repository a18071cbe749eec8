from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from ..errors import FavoritesSaveFailure
from ..search.models import Business
from .storage import JsonFileStorage

logger = logging.getLogger(__name__)

CORRUPT_FAVORITES_WARNING = "Saved favorites could not be read and have been reset."


class FavoritesStore:
    """
    Favorite businesses keyed by place id, persisted to one storage slot.

    The slot is read once on construction. Every toggle rewrites the whole
    list; there is no incremental update.
    """

    def __init__(self, storage: JsonFileStorage, slot: str = "favoriteBusinesses") -> None:
        self._storage = storage
        self._slot = slot
        self.warning: str | None = None
        self._favorites: dict[str, Business] = self.load()

    def load(self) -> dict[str, Business]:
        """Read the persisted set; absent or unreadable data gives an empty set."""
        self.warning = None
        try:
            raw = self._storage.get_item(self._slot)
        except OSError:
            logger.warning("Could not read favorites slot %r", self._slot, exc_info=True)
            self.warning = CORRUPT_FAVORITES_WARNING
            return {}
        if raw is None:
            return {}

        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("favorites slot does not hold a list")
            businesses = [Business.model_validate(item) for item in items]
        except (ValueError, ValidationError):
            logger.warning("Failed to parse favorites from slot %r", self._slot, exc_info=True)
            self.warning = CORRUPT_FAVORITES_WARNING
            return {}

        favorites: dict[str, Business] = {}
        for business in businesses:
            favorites.setdefault(business.place_id, business)
        return favorites

    def _persist(self, favorites: dict[str, Business]) -> None:
        payload = json.dumps([b.model_dump() for b in favorites.values()])
        try:
            self._storage.set_item(self._slot, payload)
        except OSError as exc:
            logger.error("Could not write favorites slot %r", self._slot, exc_info=True)
            raise FavoritesSaveFailure(f"Failed to save favorites: {exc}") from exc

    def contains(self, place_id: str) -> bool:
        return place_id in self._favorites

    def all(self) -> list[Business]:
        return list(self._favorites.values())

    def toggle(self, business: Business) -> bool:
        """Add or remove *business*; returns whether it is a favorite afterwards.

        Raises :class:`FavoritesSaveFailure` when the slot cannot be written;
        the in-memory set is then left as it was.
        """
        favorites = dict(self._favorites)
        if business.place_id in favorites:
            del favorites[business.place_id]
            is_favorite = False
        else:
            favorites[business.place_id] = business
            is_favorite = True
        self._persist(favorites)
        self._favorites = favorites
        self.warning = None
        logger.info(
            "%s favorite %s", "Added" if is_favorite else "Removed", business.place_id,
        )
        return is_favorite

    def __len__(self) -> int:
        return len(self._favorites)
