"""Data models for the GTFS tables of an editable schedule."""

from .tables import (
    AgenciesTable,
    CalendarTable,
    RoutesTable,
    ShapesTable,
    StopsTable,
    StopTimesTable,
    TripsTable,
)
from .types import DirectionID, PickupDropoffType, RouteType, ServiceAvailable

__all__ = [
    "AgenciesTable",
    "CalendarTable",
    "RoutesTable",
    "ShapesTable",
    "StopsTable",
    "StopTimesTable",
    "TripsTable",
    "DirectionID",
    "PickupDropoffType",
    "RouteType",
    "ServiceAvailable",
]
