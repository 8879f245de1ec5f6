"""Stop visit patterns implied by a set of trips.

A pattern is a distinct ordered sequence of stops which one or more trips follow. Only the
*maximal* sequences are kept: a trip's distinct stop order that can be found, gaps allowed and
in the same order, inside another trip's order is an express or short-turn variant of it and
doesn't get a pattern of its own.

For example, trips with stop orders `[A, B, C]`, `[A, C]` and `[A, B, C, D]` share one pattern
`[A, B, C, D]`, while trips with `[A, B]` and `[C, D]` get one pattern each.

Every trip is listed under every pattern that contains its stop order, so a trip can belong to
more than one pattern.

!!! note "Scaling"

    Pairs of unique sequences are compared with a two-pointer scan, which is
    O(len(a) * len(b)) per pair and quadratic in the number of unique sequences. This is fine for
    hundreds of trips but would need an index for much larger feeds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import pandas as pd
from pandera.typing import DataFrame

from ..logger import WranglerLogger
from ..models.gtfs.tables import StopTimesTable, TripsTable
from ..utils.time import time_str_to_seconds
from .stop_times import trip_stop_orders


@dataclass
class Pattern:
    """A maximal stop order and the trips that follow it or part of it.

    Attributes:
        pattern_id: `P1`, `P2`, ... in the order the sequences were first seen.
        stop_ids: the distinct ordered stop_ids of the pattern.
        trip_ids: trips whose stop order is contained in `stop_ids`.
    """

    pattern_id: str
    stop_ids: list[str]
    trip_ids: list[str] = field(default_factory=list)

    @property
    def first_stop_id(self) -> Optional[str]:
        """The first stop of the pattern, if any."""
        return self.stop_ids[0] if self.stop_ids else None


def distinct_stop_order(stop_ids: Iterable[str]) -> list[str]:
    """Stop ids with repeats removed, keeping the first visit to each stop."""
    seen: set = set()
    order = []
    for stop_id in stop_ids:
        if stop_id in seen:
            continue
        seen.add(stop_id)
        order.append(stop_id)
    return order


def is_subsequence(needle: Sequence, haystack: Sequence) -> bool:
    """True if every element of needle appears in haystack in the same order, gaps allowed."""
    i = 0
    for item in haystack:
        if i == len(needle):
            break
        if item == needle[i]:
            i += 1
    return i == len(needle)


def extract_patterns(trip_sequences: dict[str, Sequence[str]]) -> list[Pattern]:
    """Maximal stop patterns for trips, each listing the trips it contains.

    Args:
        trip_sequences: mapping of trip_id to its stop_ids in visit order. Repeats are allowed
            and are collapsed to the first visit. Trips with no stops are ignored.

    Returns:
        Patterns in the order their sequence was first seen.
    """
    trip_orders = {
        trip_id: tuple(distinct_stop_order(stops))
        for trip_id, stops in trip_sequences.items()
        if len(stops)
    }

    unique_orders = list(dict.fromkeys(trip_orders.values()))

    maximal_orders = [
        order
        for order in unique_orders
        if not any(other != order and is_subsequence(order, other) for other in unique_orders)
    ]

    patterns = [
        Pattern(pattern_id=f"P{i}", stop_ids=list(order))
        for i, order in enumerate(maximal_orders, start=1)
    ]
    for trip_id, order in trip_orders.items():
        for pattern in patterns:
            if is_subsequence(order, pattern.stop_ids):
                pattern.trip_ids.append(trip_id)

    WranglerLogger.debug(
        f"Found {len(patterns)} patterns from {len(unique_orders)} unique stop orders "
        f"across {len(trip_orders)} trips."
    )
    return patterns


def patterns_for_feed(stop_times: DataFrame[StopTimesTable]) -> list[Pattern]:
    """Maximal stop patterns for all trips with stop_times."""
    return extract_patterns(trip_stop_orders(stop_times))


def _time_at_stop(trip_st: pd.DataFrame, stop_id: Optional[str]) -> float:
    """Seconds at the trip's first visit to stop_id, departure before arrival. Blank is inf."""
    visits = trip_st.loc[trip_st.stop_id == stop_id]
    if visits.empty:
        return math.inf
    first = visits.iloc[0]
    for time_field in ["departure_time", "arrival_time"]:
        secs = time_str_to_seconds(first[time_field])
        if secs is not None:
            return float(secs)
    return math.inf


def sort_pattern_trips(
    pattern: Pattern,
    trips: DataFrame[TripsTable],
    stop_times: DataFrame[StopTimesTable],
) -> list[str]:
    """Pattern trip_ids ordered for display.

    Sorted by service_id, then the time at the pattern's first stop (blank times last), then
    trip_id.
    """
    service_by_trip = dict(zip(trips.trip_id, trips.service_id.fillna("")))
    pattern_st = stop_times.loc[stop_times.trip_id.isin(pattern.trip_ids)].sort_values(
        by=["stop_sequence"], kind="stable"
    )
    st_by_trip = dict(tuple(pattern_st.groupby("trip_id", sort=False)))

    def _sort_key(trip_id: str):
        trip_st = st_by_trip.get(trip_id, pattern_st.iloc[0:0])
        return (
            str(service_by_trip.get(trip_id, "")),
            _time_at_stop(trip_st, pattern.first_stop_id),
            str(trip_id),
        )

    return sorted(pattern.trip_ids, key=_sort_key)
