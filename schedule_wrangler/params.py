"""Parameters for Schedule Wrangler which should not be changed by the user.

Parameters that are here are used throughout the codebase and are stated here for easy reference.
Additional parameters that are more narrowly scoped are defined in the appropriate modules.

Changing these parameters may have unintended consequences and should only be done
by developers who understand the codebase.
"""

RESTRICTION_KEY_SEP: str = "::"
"""Separator between trip_id and stop_id in a restriction key."""

REGULAR_SERVICE: int = 0
"""pickup_type / drop_off_type value meaning the boarding or alighting is allowed."""

NO_SERVICE: int = 1
"""pickup_type / drop_off_type value meaning the boarding or alighting is not allowed."""

SMALL_RECS: int = 5
"""Number of records to display in a dataframe summary."""

REQUIRED_FEED_TABLES: list[str] = ["agencies", "stops", "routes", "calendar", "trips", "stop_times"]

OPTIONAL_FEED_TABLES: list[str] = ["shapes"]

GTFS_FILENAMES: dict[str, str] = {
    "agencies": "agency",
    "stops": "stops",
    "routes": "routes",
    "calendar": "calendar",
    "trips": "trips",
    "stop_times": "stop_times",
    "shapes": "shapes",
}
"""Mapping of feed table name to the GTFS file stem it is read from and written to."""

STR_COLUMNS: list[str] = [
    "agency_id",
    "stop_id",
    "route_id",
    "service_id",
    "trip_id",
    "shape_id",
    "arrival_time",
    "departure_time",
    "start_date",
    "end_date",
]
"""Columns which are always read as strings so that ids and times keep their leading zeros."""
