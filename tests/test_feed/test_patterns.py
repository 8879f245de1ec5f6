"""Tests for stop patterns."""

import pandas as pd
import pytest

from schedule_wrangler.feed.patterns import (
    Pattern,
    distinct_stop_order,
    extract_patterns,
    is_subsequence,
    patterns_for_feed,
    sort_pattern_trips,
)
from schedule_wrangler.logger import WranglerLogger

extract_patterns_cases = [
    # Test case format: (trip_sequences, expected [(stop_ids, trip_ids)])
    (
        {"T1": ["A", "B", "C"], "T2": ["A", "C"], "T3": ["A", "B", "C", "D"]},
        [(["A", "B", "C", "D"], ["T1", "T2", "T3"])],
    ),
    (
        {"T1": ["A", "B"], "T2": ["C", "D"]},
        [(["A", "B"], ["T1"]), (["C", "D"], ["T2"])],
    ),
    (
        {"T1": ["A", "B", "A", "C"], "T2": ["A", "B", "C"]},
        [(["A", "B", "C"], ["T1", "T2"])],
    ),
    (
        {"T1": ["A", "B", "C"], "T2": ["A", "B", "D"], "T3": ["A", "B"]},
        [(["A", "B", "C"], ["T1", "T3"]), (["A", "B", "D"], ["T2", "T3"])],
    ),
    (
        {"T1": [], "T2": ["A"]},
        [(["A"], ["T2"])],
    ),
    ({}, []),
]


@pytest.mark.parametrize("case", extract_patterns_cases)
def test_extract_patterns(request, case):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    trip_sequences, expected = case
    patterns = extract_patterns(trip_sequences)
    assert [(p.stop_ids, p.trip_ids) for p in patterns] == expected
    assert [p.pattern_id for p in patterns] == [f"P{i}" for i in range(1, len(expected) + 1)]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_patterns_are_maximal():
    patterns = extract_patterns(
        {"T1": ["A", "B", "C"], "T2": ["B", "C"], "T3": ["C", "B"], "T4": ["X"]}
    )
    for p in patterns:
        for other in patterns:
            if p is not other:
                assert not is_subsequence(p.stop_ids, other.stop_ids)
    all_trips = {t for p in patterns for t in p.trip_ids}
    assert all_trips == {"T1", "T2", "T3", "T4"}


def test_distinct_stop_order():
    assert distinct_stop_order(["A", "B", "A", "C", "B"]) == ["A", "B", "C"]


def test_is_subsequence():
    assert is_subsequence(["A", "C"], ["A", "B", "C"])
    assert not is_subsequence(["C", "A"], ["A", "B", "C"])
    assert is_subsequence([], ["A"])


def test_patterns_for_feed(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    patterns = patterns_for_feed(small_feed.stop_times)
    assert [(p.stop_ids, p.trip_ids) for p in patterns] == [
        (["S1", "S2", "S3", "S4"], ["T1", "T2"]),
        (["S5", "S4"], ["T3"]),
    ]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_sort_pattern_trips(request, small_feed):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    pattern = patterns_for_feed(small_feed.stop_times)[0]
    # T2 leaves S1 at 07:30, before T1 at 08:00
    assert sort_pattern_trips(pattern, small_feed.trips, small_feed.stop_times) == ["T2", "T1"]
    WranglerLogger.info(f"--Finished: {request.node.name}")


sort_pattern_trips_cases = [
    # Test case format: ([(trip_id, service_id, arrival, departure) at first stop], expected)
    (
        [("A", "Z", "07:00:00", "07:00:00"), ("B", "A", "09:00:00", "09:00:00")],
        ["B", "A"],
    ),
    (
        [("A", "WKDY", "", ""), ("B", "WKDY", "09:00:00", "09:00:00")],
        ["B", "A"],
    ),
    (
        [("B", "WKDY", "08:00:00", "08:00:00"), ("A", "WKDY", "08:00:00", "08:00:00")],
        ["A", "B"],
    ),
    (
        [("A", "WKDY", "07:00:00", ""), ("B", "WKDY", "08:00:00", "08:00:00")],
        ["A", "B"],
    ),
    (
        [
            ("A", "Z", "07:00:00", "07:00:00"),
            ("B", "A", "", ""),
            ("C", "A", "08:00:00", "08:00:00"),
        ],
        ["C", "B", "A"],
    ),
]


@pytest.mark.parametrize("case", sort_pattern_trips_cases)
def test_sort_pattern_trips_keys(request, case):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    trip_times, expected = case
    trips = pd.DataFrame(
        {
            "trip_id": [t[0] for t in trip_times],
            "service_id": [t[1] for t in trip_times],
        }
    )
    st_records = []
    for trip_id, _, arrival, departure in trip_times:
        st_records.append(
            {
                "trip_id": trip_id,
                "stop_id": "S1",
                "stop_sequence": 1,
                "arrival_time": arrival,
                "departure_time": departure,
            }
        )
        st_records.append(
            {
                "trip_id": trip_id,
                "stop_id": "S2",
                "stop_sequence": 2,
                "arrival_time": "10:00:00",
                "departure_time": "10:00:00",
            }
        )
    stop_times = pd.DataFrame(st_records)
    pattern = Pattern("P1", ["S1", "S2"], trip_ids=trips.trip_id.tolist())

    assert sort_pattern_trips(pattern, trips, stop_times) == expected
    WranglerLogger.info(f"--Finished: {request.node.name}")
