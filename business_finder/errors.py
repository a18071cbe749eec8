from __future__ import annotations


class FinderError(Exception):
    """Base class for failures surfaced to the user as a message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingInput(FinderError):
    """Blank category, or neither coordinates nor a manual location."""


class LookupFailure(FinderError):
    """The business lookup collaborator failed."""


class DetailFetchFailure(FinderError):
    pass


class PitchGenerationFailure(FinderError):
    pass


class GeolocationUnavailable(FinderError):
    """Current position could not be obtained; fall back to a manual location."""


class FavoritesSaveFailure(FinderError):
    """The favorites slot could not be written; the previous set is kept."""
