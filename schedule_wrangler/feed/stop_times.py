"""Filters, queries and edits of a gtfs stop_times table."""

from __future__ import annotations

from typing import Any, Optional

import pandas as pd
from pandera.typing import DataFrame

from ..errors import StopTimeNotFoundError
from ..logger import WranglerLogger
from ..models.gtfs.tables import TIME_FIELDS, StopTimesTable
from ..utils.models import validate_call_pyd
from ..utils.time import add_minutes, is_non_decreasing, to_stored


def stop_times_for_trip_id(
    stop_times: DataFrame[StopTimesTable], trip_id: str
) -> DataFrame[StopTimesTable]:
    """Returns stop_time records for a given trip_id, sorted by stop_sequence."""
    stop_times = stop_times.loc[stop_times.trip_id == trip_id]
    return stop_times.sort_values(by=["stop_sequence"])


@validate_call_pyd
def stop_times_for_trip_ids(
    stop_times: DataFrame[StopTimesTable], trip_ids: list[str]
) -> DataFrame[StopTimesTable]:
    """Returns stop_time records for a given list of trip_ids."""
    stop_times = stop_times.loc[stop_times.trip_id.isin(trip_ids)]
    return stop_times.sort_values(by=["trip_id", "stop_sequence"])


def stop_times_for_stop_ids(
    stop_times: DataFrame[StopTimesTable], stop_ids: list[str]
) -> DataFrame[StopTimesTable]:
    """Returns stop_time records which visit any of the given stop_ids."""
    return stop_times.loc[stop_times.stop_id.isin(stop_ids)]


def trip_stop_orders(stop_times: DataFrame[StopTimesTable]) -> dict[str, list[str]]:
    """Mapping of trip_id to its stop_ids in stop_sequence order, repeats included.

    Trips are listed in the order their first stop_time appears in the table.
    """
    if stop_times.empty:
        return {}
    sorted_st = stop_times.sort_values(by=["stop_sequence"], kind="stable")
    orders = sorted_st.groupby("trip_id", sort=False)["stop_id"].agg(list)
    first_seen = stop_times.drop_duplicates("trip_id")["trip_id"].tolist()
    return {trip_id: orders[trip_id] for trip_id in first_seen}


def stop_times_with_blank_times(
    stop_times: DataFrame[StopTimesTable],
) -> DataFrame[StopTimesTable]:
    """Returns placeholder stop_time records where both arrival and departure are unset."""
    blank = (stop_times.arrival_time.str.strip() == "") & (
        stop_times.departure_time.str.strip() == ""
    )
    return stop_times.loc[blank]


def trip_times_non_decreasing(stop_times: DataFrame[StopTimesTable], trip_id: str) -> bool:
    """True if the trip's arrival and departure times never go backwards."""
    trip_st = stop_times_for_trip_id(stop_times, trip_id)
    times = []
    for arr, dep in zip(trip_st.arrival_time, trip_st.departure_time):
        times.extend([arr, dep])
    return is_non_decreasing(times)


def resequence_stop_times(stop_times: pd.DataFrame) -> pd.DataFrame:
    """Renumber stop_sequence densely from 1 within each trip_id, keeping current order.

    Rows are ordered by their current stop_sequence within each trip. Returns a copy.
    """
    if stop_times.empty:
        return stop_times.copy()
    out = stop_times.sort_values(by=["trip_id", "stop_sequence"], kind="stable").copy()
    out["stop_sequence"] = out.groupby("trip_id", sort=False).cumcount() + 1
    return out.sort_index()


def _stop_time_index(stop_times: pd.DataFrame, trip_id: str, stop_sequence: int):
    match = stop_times.loc[
        (stop_times.trip_id == trip_id) & (stop_times.stop_sequence == int(stop_sequence))
    ]
    if match.empty:
        msg = f"No stop time with stop_sequence {stop_sequence} for trip {trip_id}."
        WranglerLogger.error(msg)
        raise StopTimeNotFoundError(msg)
    return match.index[0]


def append_stop_time(
    stop_times: DataFrame[StopTimesTable],
    trip_id: str,
    stop_id: str,
    default_first_time: str = "08:00:00",
    dwell_minutes: int = 5,
) -> pd.DataFrame:
    """Returns stop_times with a new visit to stop_id appended to the end of a trip.

    The new row gets `stop_sequence` one past the trip's current maximum. Its arrival is the
    previous row's departure (or `default_first_time` for an empty trip or an unparseable
    departure) and its departure is `dwell_minutes` later.
    """
    trip_st = stop_times_for_trip_id(stop_times, trip_id)
    next_seq = int(trip_st.stop_sequence.max()) + 1 if len(trip_st) else 1
    base = trip_st.departure_time.iloc[-1] if len(trip_st) else ""
    try:
        arrival = add_minutes(base, 0)
    except ValueError:
        arrival = default_first_time
    departure = add_minutes(arrival, dwell_minutes)

    new_row = pd.DataFrame(
        [
            {
                "trip_id": trip_id,
                "stop_id": stop_id,
                "stop_sequence": next_seq,
                "arrival_time": arrival,
                "departure_time": departure,
            }
        ]
    )
    WranglerLogger.debug(f"Appending stop {stop_id} to trip {trip_id} at sequence {next_seq}.")
    return pd.concat([stop_times, new_row], ignore_index=True)


def remove_stop_time(
    stop_times: DataFrame[StopTimesTable], trip_id: str, stop_sequence: int
) -> tuple[pd.DataFrame, str]:
    """Removes one stop_time row and shifts the trip's later rows down by one sequence number.

    Returns:
        tuple of the updated stop_times and the stop_id of the removed row.

    Raises:
        StopTimeNotFoundError: if the trip has no row with that stop_sequence.
    """
    idx = _stop_time_index(stop_times, trip_id, stop_sequence)
    removed_stop_id = stop_times.at[idx, "stop_id"]
    out = stop_times.drop(index=idx).copy()
    later = (out.trip_id == trip_id) & (out.stop_sequence > int(stop_sequence))
    out.loc[later, "stop_sequence"] = out.loc[later, "stop_sequence"] - 1
    WranglerLogger.debug(
        f"Removed stop {removed_stop_id} at sequence {stop_sequence} from trip {trip_id}; "
        f"shifted {int(later.sum())} later stop times."
    )
    return out, removed_stop_id


def set_stop_time_value(
    stop_times: DataFrame[StopTimesTable],
    trip_id: str,
    stop_sequence: int,
    field: str,
    value: Any,
) -> tuple[pd.DataFrame, Optional[str]]:
    """Returns stop_times with one field of one row changed.

    Time fields accept display values like `9:05` and are converted to the stored form.

    Returns:
        tuple of the updated stop_times and the stop_id the row had before the change.
    """
    if field not in stop_times.columns:
        msg = f"{field} is not a stop_times field."
        WranglerLogger.error(msg)
        raise ValueError(msg)
    idx = _stop_time_index(stop_times, trip_id, stop_sequence)
    previous_stop_id = stop_times.at[idx, "stop_id"]
    if field in TIME_FIELDS:
        value = to_stored(value)
    out = stop_times.copy()
    out.at[idx, field] = value
    return out, previous_stop_id
