"""Compile pickup / drop-off restrictions into export-ready trips and stop_times tables.

The editable tables are never changed. For each trip with stop_times, in stop_sequence order:

- Each stop visit takes the mode of its restriction, `normal` if there is none.
- `pickup` visits get `drop_off_type = 1`, `dropoff` visits get `pickup_type = 1` and `normal`
    visits get both set to 0.
- A trip without any `custom` visit is written once, under its own trip_id.
- A trip with `custom` visits is written as two trips:
    - `<trip_id>__segA` from the first visit through the last `custom` visit, where `custom`
        visits are pickup-only.
    - `<trip_id>__segB` from the first `custom` visit through the last visit, where `custom`
        visits are dropoff-only.
- Visits with both arrival and departure unset are left out.
- stop_sequence is renumbered 1..N in emitted order within every output trip.

Trips without any stop_times are left out entirely. A trip whose stop_times are all unset keeps
its trips record but has no stop_times.

!!! warning "Several custom visits"

    When a trip has more than one `custom` visit with other visits between them, the trip is
    still split once, around the first and last of them. A `pickup` or `dropoff` visit between
    them is written into both segments with its own flags.

Usage:

```python
from schedule_wrangler.compile import compile_trips

compiled = compile_trips(feed.trips, feed.stop_times, restrictions)
compiled.trips, compiled.stop_times
```
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd
from pandera.typing import DataFrame

from .configs import DefaultConfig, WranglerConfig
from .feed.stop_times import resequence_stop_times
from .logger import WranglerLogger
from .models.gtfs.tables import StopTimesTable, TripsTable
from .params import NO_SERVICE, REGULAR_SERVICE
from .restrictions import RestrictionStore
from .utils.time import is_blank, normalize_time_str

MODE_FLAGS: dict[str, tuple[int, int]] = {
    "normal": (REGULAR_SERVICE, REGULAR_SERVICE),
    "pickup": (REGULAR_SERVICE, NO_SERVICE),
    "dropoff": (NO_SERVICE, REGULAR_SERVICE),
}
"""Mapping of mode to `(pickup_type, drop_off_type)`."""


@dataclass
class CompiledTables:
    """Export-ready trips and stop_times plus counts for reporting.

    Attributes:
        trips: compiled trips with the configured export trip columns.
        stop_times: compiled stop_times with the configured export stop_time columns.
        skipped_trips: trips left out because they have no stop_times.
        split_trips: trips written as two segments because of a `custom` visit.
        dropped_stop_times: stop_times left out because both times were unset.
    """

    trips: pd.DataFrame
    stop_times: pd.DataFrame
    skipped_trips: list[str] = field(default_factory=list)
    split_trips: list[str] = field(default_factory=list)
    dropped_stop_times: int = 0


def _segments(
    trip_id: str, modes: list[str], config: WranglerConfig
) -> list[tuple[str, slice, list[str]]]:
    """`(output trip_id, row slice, modes)` for each trip the source trip compiles to."""
    custom_idx = [i for i, m in enumerate(modes) if m == "custom"]
    if not custom_idx:
        return [(trip_id, slice(0, len(modes)), modes)]

    first, last = custom_idx[0], custom_idx[-1]
    seg_a_modes = ["pickup" if m == "custom" else m for m in modes[: last + 1]]
    seg_b_modes = ["dropoff" if m == "custom" else m for m in modes[first:]]
    return [
        (f"{trip_id}{config.EXPORT.SEGMENT_A_SUFFIX}", slice(0, last + 1), seg_a_modes),
        (f"{trip_id}{config.EXPORT.SEGMENT_B_SUFFIX}", slice(first, len(modes)), seg_b_modes),
    ]


def compile_trips(
    trips: DataFrame[TripsTable],
    stop_times: DataFrame[StopTimesTable],
    restrictions: RestrictionStore,
    config: WranglerConfig = DefaultConfig,
) -> CompiledTables:
    """Compile restrictions into new trips and stop_times tables.

    Args:
        trips: editable trips table. Not modified.
        stop_times: editable stop_times table. Not modified.
        restrictions: pickup / drop-off rules keyed by `(trip_id, stop_id)`.
        config: WranglerConfig for segment suffixes and export columns. Defaults to
            DefaultConfig.

    Returns:
        CompiledTables with the compiled trips and stop_times.
    """
    trip_cols = config.EXPORT.TRIP_COLUMNS
    st_cols = config.EXPORT.STOP_TIME_COLUMNS

    st_by_trip = {
        trip_id: trip_st
        for trip_id, trip_st in stop_times.sort_values(
            by=["stop_sequence"], kind="stable"
        ).groupby("trip_id", sort=False)
    }

    out_trips: list[dict] = []
    out_stop_times: list[dict] = []
    compiled = CompiledTables(trips=pd.DataFrame(), stop_times=pd.DataFrame())

    for trip in trips.to_dict("records"):
        trip_id = trip["trip_id"]
        trip_st = st_by_trip.get(trip_id)
        if trip_st is None or trip_st.empty:
            compiled.skipped_trips.append(trip_id)
            continue

        rows = trip_st.to_dict("records")
        modes = [restrictions.mode_for(trip_id, r["stop_id"]) for r in rows]
        segments = _segments(trip_id, modes, config)
        if len(segments) > 1:
            compiled.split_trips.append(trip_id)

        for out_trip_id, row_slice, seg_modes in segments:
            out_trips.append({**trip, "trip_id": out_trip_id})
            for row, mode in zip(rows[row_slice], seg_modes):
                if is_blank(row.get("arrival_time")) and is_blank(row.get("departure_time")):
                    compiled.dropped_stop_times += 1
                    continue
                pickup_type, drop_off_type = MODE_FLAGS[mode]
                out_stop_times.append(
                    {
                        "trip_id": out_trip_id,
                        "arrival_time": normalize_time_str(row.get("arrival_time")),
                        "departure_time": normalize_time_str(row.get("departure_time")),
                        "stop_id": row["stop_id"],
                        "stop_sequence": len(out_stop_times) + 1,
                        "pickup_type": pickup_type,
                        "drop_off_type": drop_off_type,
                    }
                )

    compiled.trips = pd.DataFrame(out_trips).reindex(columns=trip_cols)
    compiled_st = resequence_stop_times(pd.DataFrame(out_stop_times)).reindex(columns=st_cols)
    st_dtypes = {"stop_sequence": "int64", "pickup_type": "Int64", "drop_off_type": "Int64"}
    compiled.stop_times = compiled_st.astype(
        {c: t for c, t in st_dtypes.items() if c in compiled_st.columns}
    )

    WranglerLogger.info(
        f"Compiled {len(trips)} trips into {len(compiled.trips)} trips and "
        f"{len(compiled.stop_times)} stop times."
    )
    if compiled.skipped_trips:
        WranglerLogger.warning(
            f"Skipped {len(compiled.skipped_trips)} trips without stop times: "
            f"{compiled.skipped_trips}"
        )
    WranglerLogger.debug(
        f"Split {len(compiled.split_trips)} trips at custom stops; dropped "
        f"{compiled.dropped_stop_times} stop times without times."
    )
    return compiled
