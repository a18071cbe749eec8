from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable

from pydantic import ValidationError

from ..errors import GeolocationUnavailable
from ..search.models import LocationCoords, LocationReport

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Geolocation is not supported by this browser."


class PositionErrorCode(IntEnum):
    """W3C Geolocation API error codes."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


_DEFAULT_REASONS = {
    PositionErrorCode.PERMISSION_DENIED: "User denied Geolocation",
    PositionErrorCode.POSITION_UNAVAILABLE: "Position unavailable",
    PositionErrorCode.TIMEOUT: "Timeout expired",
}


class PositionError(Exception):
    def __init__(self, code: PositionErrorCode, message: str | None = None) -> None:
        self.code = PositionErrorCode(code)
        self.message = message or _DEFAULT_REASONS[self.code]
        super().__init__(self.message)


LocationCapability = Callable[[], LocationCoords]


def failure_message(reason: str) -> str:
    return (
        f"Error getting location: {reason}. "
        "Please enable location services or enter a location below."
    )


class GeolocationResolver:
    """
    One-shot resolver for the current position.

    The capability is asked at most once; the first outcome, coordinates or
    error, is returned on every later call. ``capability=None`` means the
    runtime has no location capability at all.
    """

    def __init__(self, capability: LocationCapability | None) -> None:
        self._capability = capability
        self._outcome: LocationCoords | GeolocationUnavailable | None = None

    def resolve(self) -> LocationCoords:
        if self._outcome is None:
            self._outcome = self._request()
        if isinstance(self._outcome, GeolocationUnavailable):
            raise self._outcome
        return self._outcome

    def _request(self) -> LocationCoords | GeolocationUnavailable:
        if self._capability is None:
            return GeolocationUnavailable(UNSUPPORTED_MESSAGE)
        try:
            coords = self._capability()
            # Capabilities may hand back unchecked values.
            return LocationCoords.model_validate(coords.model_dump())
        except PositionError as exc:
            logger.info("Geolocation failed (code %s): %s", int(exc.code), exc.message)
            return GeolocationUnavailable(failure_message(exc.message))
        except ValidationError as exc:
            logger.info("Geolocation returned invalid coordinates: %s", exc)
            return GeolocationUnavailable(failure_message("Invalid coordinates reported"))


def capability_from_report(report: LocationReport) -> LocationCapability | None:
    """Turn a client-side geolocation report into a location capability."""
    if not report.supported:
        return None

    def _capability() -> LocationCoords:
        if report.error_code is not None:
            raise PositionError(PositionErrorCode(report.error_code), report.error_message)
        if report.latitude is None or report.longitude is None:
            raise PositionError(PositionErrorCode.POSITION_UNAVAILABLE, report.error_message)
        return LocationCoords.model_construct(
            latitude=report.latitude, longitude=report.longitude,
        )

    return _capability
