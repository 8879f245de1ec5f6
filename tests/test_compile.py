"""Tests for compiling pickup / drop-off restrictions into trips and stop_times."""

import pytest

from schedule_wrangler.compile import compile_trips
from schedule_wrangler.configs import DefaultConfig, load_wrangler_config
from schedule_wrangler.logger import WranglerLogger
from schedule_wrangler.restrictions import RestrictionStore


def _trip_rows(compiled, trip_id):
    st = compiled.stop_times
    return st.loc[st.trip_id == trip_id].to_dict("records")


def _flags(compiled, trip_id):
    return [
        (r["stop_id"], r["stop_sequence"], r["pickup_type"], r["drop_off_type"])
        for r in _trip_rows(compiled, trip_id)
    ]


def test_compile_without_restrictions(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, RestrictionStore())

    assert compiled.trips.trip_id.tolist() == ["T1", "T2", "T3"]
    assert compiled.skipped_trips == ["T4"]
    assert compiled.split_trips == []
    assert list(compiled.trips.columns) == DefaultConfig.EXPORT.TRIP_COLUMNS
    assert list(compiled.stop_times.columns) == DefaultConfig.EXPORT.STOP_TIME_COLUMNS
    assert len(compiled.stop_times) == len(small_feed.stop_times)
    assert (compiled.stop_times.pickup_type == 0).all()
    assert (compiled.stop_times.drop_off_type == 0).all()
    # times are zero-padded for export
    assert _trip_rows(compiled, "T3")[0]["arrival_time"] == "09:00:00"
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_compile_pickup_dropoff(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    restrictions = RestrictionStore({"T1::S1": "pickup", "T1::S4": "dropoff"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)

    assert compiled.split_trips == []
    assert _flags(compiled, "T1") == [
        ("S1", 1, 0, 1),
        ("S2", 2, 0, 0),
        ("S3", 3, 0, 0),
        ("S4", 4, 1, 0),
    ]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_compile_custom_split(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    restrictions = RestrictionStore({"T1::S2": "custom"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)

    assert compiled.trips.trip_id.tolist() == ["T1__segA", "T1__segB", "T2", "T3"]
    assert compiled.split_trips == ["T1"]
    assert _flags(compiled, "T1__segA") == [("S1", 1, 0, 0), ("S2", 2, 0, 1)]
    assert _flags(compiled, "T1__segB") == [
        ("S2", 1, 1, 0),
        ("S3", 2, 0, 0),
        ("S4", 3, 0, 0),
    ]
    # segments keep the source trip's other fields
    seg_b = compiled.trips.loc[compiled.trips.trip_id == "T1__segB"].iloc[0]
    assert (seg_b.route_id, seg_b.service_id, seg_b.trip_headsign) == ("R1", "WKDY", "Downtown")
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_compile_custom_at_first_and_last_stop(small_feed):
    restrictions = RestrictionStore({"T2::S1": "custom"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)
    assert _flags(compiled, "T2__segA") == [("S1", 1, 0, 1)]
    assert _flags(compiled, "T2__segB") == [("S1", 1, 1, 0), ("S3", 2, 0, 0)]

    restrictions = RestrictionStore({"T2::S3": "custom"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)
    assert _flags(compiled, "T2__segA") == [("S1", 1, 0, 0), ("S3", 2, 0, 1)]
    assert _flags(compiled, "T2__segB") == [("S3", 1, 1, 0)]


def test_compile_several_custom_visits(request, small_feed):
    """A trip with custom visits at S1 and S3 is split once, around the first and last of them.

    The pickup visit at S2 between them is written into both segments with its own flags. This
    keeps the behavior of the editor the rules come from, which is ambiguous for this case.
    """
    WranglerLogger.info(f"--Starting: {request.node.name}")
    restrictions = RestrictionStore({"T1::S1": "custom", "T1::S2": "pickup", "T1::S3": "custom"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)

    assert _flags(compiled, "T1__segA") == [
        ("S1", 1, 0, 1),
        ("S2", 2, 0, 1),
        ("S3", 3, 0, 1),
    ]
    assert _flags(compiled, "T1__segB") == [
        ("S1", 1, 1, 0),
        ("S2", 2, 0, 1),
        ("S3", 3, 1, 0),
        ("S4", 4, 0, 0),
    ]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_compile_drops_blank_stop_times(small_feed):
    stop_times = small_feed.stop_times.copy()
    blank = (stop_times.trip_id == "T1") & (stop_times.stop_sequence == 2)
    stop_times.loc[blank, ["arrival_time", "departure_time"]] = ""

    compiled = compile_trips(small_feed.trips, stop_times, RestrictionStore())
    assert compiled.dropped_stop_times == 1
    assert _flags(compiled, "T1") == [("S1", 1, 0, 0), ("S3", 2, 0, 0), ("S4", 3, 0, 0)]


def test_compile_trip_with_only_blank_stop_times(small_feed):
    stop_times = small_feed.stop_times.copy()
    stop_times.loc[stop_times.trip_id == "T2", ["arrival_time", "departure_time"]] = ""

    compiled = compile_trips(small_feed.trips, stop_times, RestrictionStore())
    assert "T2" in compiled.trips.trip_id.tolist()
    assert "T2" not in compiled.stop_times.trip_id.tolist()
    assert compiled.dropped_stop_times == 2
    assert "T2" not in compiled.skipped_trips


def test_compile_does_not_modify_inputs(small_feed):
    trips_before = small_feed.trips.copy()
    stop_times_before = small_feed.stop_times.copy()
    compile_trips(small_feed.trips, small_feed.stop_times, RestrictionStore({"T1::S2": "custom"}))
    assert small_feed.trips.equals(trips_before)
    assert small_feed.stop_times.equals(stop_times_before)


def test_compile_sequences_are_dense(small_feed):
    restrictions = RestrictionStore({"T1::S3": "custom", "T3::S5": "dropoff"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions)
    for _, trip_st in compiled.stop_times.groupby("trip_id"):
        assert trip_st.stop_sequence.tolist() == list(range(1, len(trip_st) + 1))


@pytest.mark.parametrize("suffixes", [("_a", "_b"), ("-1", "-2")])
def test_compile_segment_suffix_config(small_feed, suffixes):
    config = load_wrangler_config(
        {"EXPORT": {"SEGMENT_A_SUFFIX": suffixes[0], "SEGMENT_B_SUFFIX": suffixes[1]}}
    )
    restrictions = RestrictionStore({"T1::S2": "custom"})
    compiled = compile_trips(small_feed.trips, small_feed.stop_times, restrictions, config=config)
    assert compiled.trips.trip_id.tolist()[:2] == [f"T1{suffixes[0]}", f"T1{suffixes[1]}"]
