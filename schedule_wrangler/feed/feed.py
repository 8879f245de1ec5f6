"""Main functionality for GTFS tables including Feed object."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Optional

import pandas as pd

from ..logger import WranglerLogger
from ..models._base.db import DBModelMixin
from ..models.gtfs.tables import (
    AgenciesTable,
    CalendarTable,
    RoutesTable,
    ShapesTable,
    StopsTable,
    StopTimesTable,
    TripsTable,
)
from ..params import OPTIONAL_FEED_TABLES, REQUIRED_FEED_TABLES
from ..utils import df_accessors  # noqa: F401


class Feed(DBModelMixin):
    """Wrapper class around an editable GTFS feed.

    Most functionality derives from mixin class DBModelMixin which provides:

    - validation of tables to schemas when setting a table attribute (e.g. self.trips = trips_df)
    - logging of dangling fks when setting a table attribute
    - hashing and deep copy functionality
    - overload of __eq__ to apply only to tables in table_names.
    - convenience methods for accessing tables

    Attributes:
        table_names (list[str]): list of table names in GTFS feed.
        tables (list[DataFrame]):: list tables as dataframes.
        agencies (DataFrame[AgenciesTable]): agencies dataframe
        stops (DataFrame[StopsTable]): stops dataframe
        routes (DataFrame[RoutesTable]): routes dataframe
        calendar (DataFrame[CalendarTable]): calendar (services) dataframe
        trips (DataFrame[TripsTable]): trips dataframe
        stop_times (DataFrame[StopTimesTable]): stop_times dataframe
        shapes (Optional[DataFrame[ShapesTable]]): shapes dataframe
        feed_path (Optional[Path]): where the feed was read from, if anywhere.
    """

    _table_models: ClassVar[dict] = {
        "agencies": AgenciesTable,
        "stops": StopsTable,
        "routes": RoutesTable,
        "calendar": CalendarTable,
        "trips": TripsTable,
        "stop_times": StopTimesTable,
        "shapes": ShapesTable,
    }

    table_names: ClassVar[list[str]] = REQUIRED_FEED_TABLES

    optional_table_names: ClassVar[list[str]] = OPTIONAL_FEED_TABLES

    def __init__(self, feed_path: Optional[Path] = None, **kwargs):
        """Create a Feed object from a dictionary of DataFrames representing a GTFS feed.

        Args:
            feed_path: where the feed was read from. Informational only.
            kwargs: A dictionary containing DataFrames representing the tables of a GTFS feed.
        """
        self.feed_path = feed_path
        self.initialize_tables(**kwargs)

        extra_attr = {k: v for k, v in kwargs.items() if k not in self.table_names}
        if extra_attr:
            WranglerLogger.info(f"Ignoring unrecognized Feed tables: {list(extra_attr.keys())}")

    @property
    def has_shapes(self) -> bool:
        """True if the feed has a non-empty shapes table."""
        return "shapes" in self.table_names and len(self.get_table("shapes")) > 0

    def stop_visit_pairs(self) -> set[tuple[str, str]]:
        """Set of `(trip_id, stop_id)` pairs present in stop_times."""
        return set(zip(self.stop_times["trip_id"], self.stop_times["stop_id"]))

    def __repr__(self) -> str:
        """Table record counts."""
        counts = ", ".join(f"{t}={len(self.get_table(t))}" for t in self.table_names)
        return f"Feed({counts})"
