"""Filters, queries and edits of a gtfs trips table."""

from __future__ import annotations

import uuid
from typing import Optional

import pandas as pd
from pandera.typing import DataFrame

from ..errors import RouteNotFoundError, TripNotFoundError
from ..logger import WranglerLogger
from ..models.gtfs.tables import StopTimesTable, TripsTable
from ..utils.models import validate_call_pyd


@validate_call_pyd
def trips_for_route_ids(
    trips: DataFrame[TripsTable], route_ids: list[str]
) -> DataFrame[TripsTable]:
    """Returns trips records for a given list of route_ids."""
    return trips.loc[trips.route_id.isin(route_ids)]


def trip_ids_for_route_ids(trips: DataFrame[TripsTable], route_ids: list[str]) -> list[str]:
    """Returns the trip_ids which belong to any of route_ids."""
    return trips.loc[trips.route_id.isin(route_ids), "trip_id"].tolist()


def trips_without_stop_times(
    trips: DataFrame[TripsTable], stop_times: DataFrame[StopTimesTable]
) -> DataFrame[TripsTable]:
    """Returns trips which have no stop_times records."""
    return trips.loc[~trips.trip_id.isin(stop_times.trip_id)]


def new_trip_id(existing_trip_ids: list[str]) -> str:
    """Generate a short random trip_id which is not already used."""
    existing = set(existing_trip_ids)
    while True:
        trip_id = f"T_{uuid.uuid4().hex[:8]}"
        if trip_id not in existing:
            return trip_id


def add_trip(
    trips: DataFrame[TripsTable],
    route_id: str,
    service_id: str,
    trip_id: Optional[str] = None,
    **props,
) -> tuple[pd.DataFrame, str]:
    """Returns trips with a new trip appended, and the new trip's id.

    Args:
        trips: trips table.
        route_id: route the trip belongs to.
        service_id: service (calendar) the trip runs on.
        trip_id: id for the new trip. Generated if not provided.
        props: any other trips fields, such as trip_headsign or direction_id.
    """
    if trip_id is None:
        trip_id = new_trip_id(trips.trip_id.tolist())
    elif trip_id in set(trips.trip_id):
        msg = f"Trip {trip_id} already exists."
        WranglerLogger.error(msg)
        raise ValueError(msg)
    new_row = pd.DataFrame(
        [{"trip_id": trip_id, "route_id": route_id, "service_id": service_id, **props}]
    )
    WranglerLogger.debug(f"Adding trip {trip_id} to route {route_id}.")
    return pd.concat([trips, new_row], ignore_index=True), trip_id


def delete_trips(
    trips: DataFrame[TripsTable], stop_times: DataFrame[StopTimesTable], trip_ids: list[str]
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Returns trips and stop_times with trip_ids and all of their stop_times removed.

    Raises:
        TripNotFoundError: if any of trip_ids isn't in trips.
    """
    missing = sorted(set(trip_ids) - set(trips.trip_id))
    if missing:
        msg = f"Trips not found: {missing}"
        WranglerLogger.error(msg)
        raise TripNotFoundError(msg)
    out_trips = trips.loc[~trips.trip_id.isin(trip_ids)]
    out_stop_times = stop_times.loc[~stop_times.trip_id.isin(trip_ids)]
    WranglerLogger.debug(
        f"Deleted {len(trips) - len(out_trips)} trips and "
        f"{len(stop_times) - len(out_stop_times)} stop times."
    )
    return out_trips, out_stop_times


def check_route_exists(routes: pd.DataFrame, route_id: str) -> None:
    """Raises RouteNotFoundError if route_id isn't in routes."""
    if route_id not in set(routes.route_id):
        msg = f"Route not found: {route_id}"
        WranglerLogger.error(msg)
        raise RouteNotFoundError(msg)
