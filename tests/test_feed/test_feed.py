"""Tests for the Feed object and its trips and stop_times edits."""

import pandas as pd
import pytest

from schedule_wrangler import load_feed_from_dfs
from schedule_wrangler.errors import (
    FeedReadError,
    RouteNotFoundError,
    StopTimeNotFoundError,
    TripNotFoundError,
)
from schedule_wrangler.feed.stop_times import (
    append_stop_time,
    remove_stop_time,
    resequence_stop_times,
    set_stop_time_value,
    stop_times_for_stop_ids,
    stop_times_for_trip_id,
    stop_times_for_trip_ids,
    stop_times_with_blank_times,
    trip_stop_orders,
    trip_times_non_decreasing,
)
from schedule_wrangler.feed.trips import (
    add_trip,
    check_route_exists,
    delete_trips,
    trips_for_route_ids,
    trips_without_stop_times,
)
from schedule_wrangler.logger import WranglerLogger


def test_feed_from_dfs(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    assert small_feed.table_names == [
        "agencies",
        "stops",
        "routes",
        "calendar",
        "trips",
        "stop_times",
    ]
    assert not small_feed.has_shapes
    # ids and times are kept as strings
    assert small_feed.stop_times.arrival_time.iloc[6] == "9:00:00"
    assert small_feed.trips.direction_id.tolist() == [0, 0, 0, 0]
    assert ("T1", "S3") in small_feed.stop_visit_pairs()
    assert ("T2", "S2") not in small_feed.stop_visit_pairs()
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_feed_with_shapes(small_feed_dfs, small_shapes_df):
    feed = load_feed_from_dfs({**small_feed_dfs, "shapes": small_shapes_df})
    assert "shapes" in feed.table_names
    assert feed.has_shapes
    # optional tables don't leak onto the class
    assert "shapes" not in type(feed).table_names


def test_feed_missing_table(small_feed_dfs):
    del small_feed_dfs["calendar"]
    with pytest.raises(FeedReadError):
        load_feed_from_dfs(small_feed_dfs)


def test_feed_blank_times_become_empty_strings(small_feed_dfs):
    small_feed_dfs["stop_times"].loc[1, ["arrival_time", "departure_time"]] = None
    feed = load_feed_from_dfs(small_feed_dfs)
    assert feed.stop_times.loc[1, "arrival_time"] == ""
    assert len(stop_times_with_blank_times(feed.stop_times)) == 1


def test_feed_deepcopy_and_eq(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    feed_copy = small_feed.deepcopy()
    assert feed_copy == small_feed
    assert feed_copy.hash == small_feed.hash

    feed_copy.trips = feed_copy.trips.loc[feed_copy.trips.trip_id != "T4"]
    assert feed_copy != small_feed
    assert len(small_feed.trips) == 4
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_trips_queries(small_feed):
    assert trips_for_route_ids(small_feed.trips, ["R2"]).trip_id.tolist() == ["T3", "T4"]
    assert trips_without_stop_times(small_feed.trips, small_feed.stop_times).trip_id.tolist() == [
        "T4"
    ]
    check_route_exists(small_feed.routes, "R1")
    with pytest.raises(RouteNotFoundError):
        check_route_exists(small_feed.routes, "R9")


def test_add_trip(small_feed):
    trips, trip_id = add_trip(small_feed.trips, "R1", "WKDY", trip_headsign="Uptown")
    assert trip_id.startswith("T_")
    assert trips.loc[trips.trip_id == trip_id, "trip_headsign"].iloc[0] == "Uptown"

    _, trip_id = add_trip(small_feed.trips, "R1", "WKDY", trip_id="T9")
    assert trip_id == "T9"
    with pytest.raises(ValueError):
        add_trip(small_feed.trips, "R1", "WKDY", trip_id="T1")


def test_delete_trips(small_feed):
    trips, stop_times = delete_trips(small_feed.trips, small_feed.stop_times, ["T1"])
    assert "T1" not in trips.trip_id.tolist()
    assert "T1" not in stop_times.trip_id.tolist()
    assert len(stop_times) == len(small_feed.stop_times) - 4
    with pytest.raises(TripNotFoundError):
        delete_trips(small_feed.trips, small_feed.stop_times, ["T9"])


def test_trip_stop_orders(small_feed):
    st = small_feed.stop_times.iloc[::-1]
    assert trip_stop_orders(st) == {
        "T3": ["S5", "S4"],
        "T2": ["S1", "S3"],
        "T1": ["S1", "S2", "S3", "S4"],
    }


def test_stop_times_filters(small_feed):
    st = small_feed.stop_times
    by_trip = stop_times_for_trip_ids(st, ["T2", "T3"])
    assert by_trip.trip_id.tolist() == ["T2", "T2", "T3", "T3"]
    assert by_trip.stop_id.tolist() == ["S1", "S3", "S5", "S4"]
    by_stop = stop_times_for_stop_ids(st, ["S4"])
    assert sorted(by_stop.trip_id) == ["T1", "T3"]


def test_append_stop_time(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    st = append_stop_time(small_feed.stop_times, "T1", "S5", dwell_minutes=2)
    new = stop_times_for_trip_id(st, "T1").iloc[-1]
    assert new.stop_sequence == 5
    assert new.arrival_time == "08:15:00"
    assert new.departure_time == "08:17:00"

    st = append_stop_time(small_feed.stop_times, "T4", "S5", default_first_time="06:00:00")
    new = stop_times_for_trip_id(st, "T4").iloc[-1]
    assert (new.stop_sequence, new.arrival_time, new.departure_time) == (
        1,
        "06:00:00",
        "06:05:00",
    )
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_remove_stop_time(small_feed):
    st, removed_stop_id = remove_stop_time(small_feed.stop_times, "T1", 2)
    assert removed_stop_id == "S2"
    trip_st = stop_times_for_trip_id(st, "T1")
    assert trip_st.stop_sequence.tolist() == [1, 2, 3]
    assert trip_st.stop_id.tolist() == ["S1", "S3", "S4"]
    # other trips are untouched
    assert stop_times_for_trip_id(st, "T2").stop_sequence.tolist() == [1, 2]
    with pytest.raises(StopTimeNotFoundError):
        remove_stop_time(small_feed.stop_times, "T1", 9)


def test_set_stop_time_value(small_feed):
    st, prev_stop_id = set_stop_time_value(small_feed.stop_times, "T1", 2, "arrival_time", "8:04")
    assert prev_stop_id == "S2"
    assert stop_times_for_trip_id(st, "T1").arrival_time.iloc[1] == "08:04:00"
    # the original is unchanged
    assert stop_times_for_trip_id(small_feed.stop_times, "T1").arrival_time.iloc[1] == "08:05:00"
    with pytest.raises(ValueError):
        set_stop_time_value(small_feed.stop_times, "T1", 2, "not_a_field", "x")


def test_trip_times_non_decreasing(small_feed):
    assert trip_times_non_decreasing(small_feed.stop_times, "T1")
    st, _ = set_stop_time_value(small_feed.stop_times, "T1", 3, "arrival_time", "07:00")
    assert not trip_times_non_decreasing(st, "T1")


def test_resequence_stop_times():
    st = pd.DataFrame(
        {
            "trip_id": ["T1", "T1", "T1", "T2"],
            "stop_id": ["A", "B", "C", "A"],
            "stop_sequence": [10, 2, 30, 5],
        }
    )
    out = resequence_stop_times(st)
    assert out.stop_sequence.tolist() == [2, 1, 3, 1]
