"""All schedule wrangler errors."""


class FeedReadError(Exception):
    """Raised when there is an error reading a transit feed."""


class FeedValidationError(Exception):
    """Raised when a feed has validation errors and is being written or compiled strictly."""


class OverridesReadError(Exception):
    """Raised when a pickup/drop-off overrides document can't be read."""


class ProjectReadError(Exception):
    """Raised when a saved project document is malformed."""


class RouteNotFoundError(Exception):
    """Raised when a route is not found in the routes table."""


class StopNotFoundError(Exception):
    """Raised when a stop is not found in the stops table."""


class StopTimeNotFoundError(Exception):
    """Raised when a stop time is not found for a trip."""


class TripNotFoundError(Exception):
    """Raised when a trip is not found in the trips table."""


class UndoHistoryEmptyError(Exception):
    """Raised when undo is requested but there is no earlier state to restore."""
