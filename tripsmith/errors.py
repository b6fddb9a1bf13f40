"""Exception types raised by the itinerary core."""


class TripsmithError(Exception):
    """Base class for all itinerary-core errors."""

    pass


class NoResponseError(TripsmithError):
    """Completion service returned empty or absent text."""

    pass


class MalformedResponseError(TripsmithError):
    """Completion output could not be parsed into the expected shape.

    ``raw_text`` keeps the model output for diagnostics; it is logged, never
    shown to end users.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class CompletionServiceError(TripsmithError):
    """Completion provider call failed (network, auth, quota)."""

    pass


class StorageUnavailableError(TripsmithError):
    """Persistence requested without a configured or authenticated store."""

    pass


class ConfigurationError(TripsmithError):
    """Required configuration is missing."""

    pass
