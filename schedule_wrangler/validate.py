"""Validation of a feed before it is exported.

Issues are either errors, which make the export invalid GTFS, or warnings, which are suspicious
but exportable:

Errors:
- a required table is empty
- duplicate `stop_id`, `route_id`, `trip_id` or `service_id`
- a trip with a `route_id` or `service_id` that doesn't exist
- a stop time with a `stop_id` that doesn't exist
- a stop time with a time not in `H:MM:SS` / `HH:MM:SS` form. Stop times with both times
    unset are placeholders and are skipped.

Warnings:
- a trip with a `shape_id` that has no shape points
- a trip whose times go backwards
- a shape whose points aren't in `shape_pt_sequence` order

Usage:

```python
report = validate_feed(feed)
if not report.ok:
    for issue in report.errors:
        print(issue)
```
"""

from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .feed.feed import Feed
from .feed.stop_times import trip_times_non_decreasing
from .logger import WranglerLogger
from .params import GTFS_FILENAMES
from .utils.time import is_blank, time_str_to_seconds

GTFS_TIME_RE = re.compile(r"^\d{1,2}:\d{2}:\d{2}$")

PK_FIELDS = {
    "stops": "stop_id",
    "routes": "route_id",
    "trips": "trip_id",
    "calendar": "service_id",
}


class Issue(BaseModel):
    """A single validation finding.

    Attributes:
        level: `error` or `warning`.
        file: GTFS file name the issue is in, e.g. `trips.txt`.
        row: 1-based row in the table, if the issue is about one row.
        message: description of the issue.
    """

    level: Literal["error", "warning"]
    file: str
    row: Optional[int] = None
    message: str

    def __str__(self) -> str:
        """`<level> <file>[:<row>]: <message>`."""
        loc = f"{self.file}:{self.row}" if self.row is not None else self.file
        return f"{self.level} {loc}: {self.message}"


class ValidationReport(BaseModel):
    """Errors and warnings for a feed."""

    errors: list[Issue] = Field(default_factory=list)
    warnings: list[Issue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if there are no errors."""
        return not self.errors

    def error(self, file: str, message: str, row: Optional[int] = None):
        """Add an error."""
        self.errors.append(Issue(level="error", file=file, row=row, message=message))

    def warning(self, file: str, message: str, row: Optional[int] = None):
        """Add a warning."""
        self.warnings.append(Issue(level="warning", file=file, row=row, message=message))


def _filename(table_name: str) -> str:
    return f"{GTFS_FILENAMES[table_name]}.txt"


def _check_required_tables(feed: Feed, report: ValidationReport):
    for table_name in Feed.table_names:
        if len(feed.get_table(table_name)) == 0:
            report.error(_filename(table_name), "File is required but empty.")


def _check_duplicate_ids(feed: Feed, report: ValidationReport):
    for table_name, pk in PK_FIELDS.items():
        table = feed.get_table(table_name)
        seen: set = set()
        for i, value in enumerate(table[pk].tolist(), start=1):
            if value in seen:
                report.error(_filename(table_name), f"Duplicate {pk}: {value}", row=i)
            seen.add(value)


def _check_trip_references(feed: Feed, report: ValidationReport):
    route_ids = set(feed.routes.route_id)
    service_ids = set(feed.calendar.service_id)
    shape_ids = set(feed.shapes.shape_id) if "shapes" in feed.table_names else set()
    for i, trip in enumerate(feed.trips.to_dict("records"), start=1):
        if trip["route_id"] not in route_ids:
            report.error("trips.txt", f"Unknown route_id {trip['route_id']}", row=i)
        if trip["service_id"] not in service_ids:
            report.error("trips.txt", f"Unknown service_id {trip['service_id']}", row=i)
        shape_id = trip.get("shape_id")
        if not is_blank(shape_id) and shape_id not in shape_ids:
            report.warning(
                "trips.txt", f"shape_id {shape_id} set but no matching shapes", row=i
            )


def _check_stop_times(feed: Feed, report: ValidationReport):
    stop_ids = set(feed.stops.stop_id)
    for i, st in enumerate(feed.stop_times.to_dict("records"), start=1):
        if st["stop_id"] not in stop_ids:
            report.error("stop_times.txt", f"Unknown stop_id {st['stop_id']}", row=i)
        arr, dep = st["arrival_time"], st["departure_time"]
        if is_blank(arr) and is_blank(dep):
            continue
        if not GTFS_TIME_RE.match(str(arr)) or not GTFS_TIME_RE.match(str(dep)):
            report.error("stop_times.txt", "Bad time format (HH:MM:SS)", row=i)


def _check_trip_times(feed: Feed, report: ValidationReport):
    stop_times = feed.stop_times
    for trip_id in stop_times.trip_id.unique():
        if trip_times_non_decreasing(stop_times, trip_id):
            continue
        trip_st = stop_times.loc[stop_times.trip_id == trip_id].sort_values("stop_sequence")
        prev_dep = None
        for st in trip_st.to_dict("records"):
            arr = time_str_to_seconds(st["arrival_time"])
            dep = time_str_to_seconds(st["departure_time"])
            if prev_dep is not None and arr is not None and arr < prev_dep:
                report.warning(
                    "stop_times.txt",
                    f"Trip {trip_id}: arrival earlier than previous departure at seq "
                    f"{st['stop_sequence']}",
                )
            if arr is not None and dep is not None and dep < arr:
                report.warning(
                    "stop_times.txt",
                    f"Trip {trip_id}: departure earlier than arrival at seq "
                    f"{st['stop_sequence']}",
                )
            if dep is not None:
                prev_dep = dep
            elif arr is not None:
                prev_dep = arr


def _check_shapes(feed: Feed, report: ValidationReport):
    if "shapes" not in feed.table_names:
        return
    for shape_id, pts in feed.shapes.groupby("shape_id", sort=False):
        seqs = pts.shape_pt_sequence.tolist()
        if seqs != sorted(seqs):
            report.warning("shapes.txt", f"shape_id {shape_id}: non-sequential shape_pt_sequence")


def validate_feed(feed: Feed) -> ValidationReport:
    """Check a feed for problems which make or could make its export invalid.

    Args:
        feed: Feed to check.

    Returns:
        ValidationReport with errors and warnings.
    """
    report = ValidationReport()
    _check_required_tables(feed, report)
    _check_duplicate_ids(feed, report)
    _check_trip_references(feed, report)
    _check_stop_times(feed, report)
    _check_trip_times(feed, report)
    _check_shapes(feed, report)

    WranglerLogger.info(
        f"Feed validation found {len(report.errors)} errors and {len(report.warnings)} warnings."
    )
    for issue in report.errors:
        WranglerLogger.debug(str(issue))
    for issue in report.warnings:
        WranglerLogger.debug(str(issue))
    return report
