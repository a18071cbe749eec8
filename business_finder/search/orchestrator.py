from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from ..errors import MissingInput
from .models import Business, LocationCoords

logger = logging.getLogger(__name__)

MISSING_CATEGORY_MESSAGE = "Please enter a business category to search."
MISSING_LOCATION_MESSAGE = (
    "Could not get your location. Please enable location services in your "
    "browser or enter a location manually."
)

BusinessLookup = Callable[[str, LocationCoords | None, str | None], list[Business]]


def no_results_message(category: str) -> str:
    return f'No results found for "{category}". Try a different category or location.'


@dataclass
class SearchOutcome:
    category: str
    businesses: list[Business] = field(default_factory=list)

    @property
    def no_results(self) -> bool:
        return not self.businesses

    @property
    def message(self) -> str | None:
        return no_results_message(self.category) if self.no_results else None


def validate_search_input(
    category: str | None,
    location: LocationCoords | None,
    manual_location: str | None,
) -> None:
    """Raise :class:`MissingInput` for a blank category, then for a missing location."""
    if not (category or "").strip():
        raise MissingInput(MISSING_CATEGORY_MESSAGE)
    if location is None and not (manual_location or "").strip():
        raise MissingInput(MISSING_LOCATION_MESSAGE)


def dedupe_by_place_id(businesses: list[Business]) -> list[Business]:
    """Keep the first occurrence of every place id, in order of first appearance."""
    unique: dict[str, Business] = {}
    for business in businesses:
        unique.setdefault(business.place_id, business)
    return list(unique.values())


def search_businesses(
    category: str,
    location: LocationCoords | None,
    manual_location: str | None,
    lookup: BusinessLookup,
) -> SearchOutcome:
    """
    Validate the inputs, run *lookup* and merge duplicate results.

    Coordinates win over manual text when both are given. An empty result
    set is returned as an outcome with ``no_results`` set; lookup failures
    propagate unchanged.
    """
    validate_search_input(category, location, manual_location)

    category = category.strip()
    manual = None if location is not None else (manual_location or "").strip()

    raw = lookup(category, location, manual)
    businesses = dedupe_by_place_id(raw)
    if len(businesses) != len(raw):
        logger.debug("Dropped %d duplicate businesses", len(raw) - len(businesses))

    return SearchOutcome(category=category, businesses=businesses)
