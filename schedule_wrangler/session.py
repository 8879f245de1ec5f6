"""EditSession class for editing a feed and its pickup / drop-off restrictions.

An EditSession holds a Feed and a RestrictionStore together so that edits which remove trips or
stop times also remove the restrictions that depended on them, and keeps an undo history of
earlier states.

Usage:

    ```python
    import schedule_wrangler as sw

    session = sw.EditSession(sw.load_feed("path/to/gtfs.zip"))
    trip_id = session.add_trip("R1", "WKDY")
    session.add_stop_time(trip_id, "S1")
    session.add_stop_time(trip_id, "S2")
    session.set_restriction(trip_id, "S2", "dropoff")
    session.undo()
    session.export("output_dir", zip_file=True)
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .compile import CompiledTables, compile_trips
from .configs import ConfigInputTypes, DefaultConfig, load_wrangler_config
from .errors import (
    StopNotFoundError,
    StopTimeNotFoundError,
    TripNotFoundError,
    UndoHistoryEmptyError,
)
from .feed.feed import Feed
from .feed.patterns import Pattern, patterns_for_feed, sort_pattern_trips
from .feed.stop_times import append_stop_time, remove_stop_time, set_stop_time_value
from .feed.trips import add_trip, check_route_exists, delete_trips, trip_ids_for_route_ids
from .io import load_project, write_export, write_project
from .logger import WranglerLogger
from .models.restrictions import RestrictionRecord
from .query import filter_df
from .restrictions import MergeResult, RestrictionStore, RuleInput
from .utils.utils import dict_to_hexkey
from .validate import ValidationReport, validate_feed


class EditSession:
    """Editable feed plus restrictions with undo.

    Attributes:
        feed: Feed being edited.
        restrictions: RestrictionStore of pickup / drop-off rules for the feed's stop visits.
        config: WranglerConfig used for edit defaults, undo history and exports.
    """

    def __init__(
        self,
        feed: Feed,
        restrictions: Optional[RestrictionStore] = None,
        config: ConfigInputTypes = DefaultConfig,
    ):
        """Constructor for EditSession.

        Args:
            feed: Feed to edit.
            restrictions: restrictions for the feed. Rules for stop visits which aren't in the
                feed are pruned. Defaults to an empty store.
            config: WranglerConfig or anything `load_wrangler_config` accepts. Defaults to
                DefaultConfig.
        """
        self.config = load_wrangler_config(config)
        self.feed = feed
        self.restrictions = restrictions if restrictions is not None else RestrictionStore()
        self.restrictions.prune(self.feed.stop_visit_pairs())

        self._history: list[tuple[Feed, RestrictionStore]] = []
        self._last_state_hash: Optional[str] = None
        self._record()

    @classmethod
    def from_project(
        cls, path: Union[Path, str], config: ConfigInputTypes = DefaultConfig
    ) -> EditSession:
        """Start a session from a project file written by `save`."""
        feed, restrictions = load_project(path)
        return cls(feed, restrictions, config=config)

    def __repr__(self) -> str:
        """Feed and restriction counts."""
        return f"EditSession({self.feed}, {self.restrictions})"

    # Undo history

    @property
    def state_hash(self) -> str:
        """Hash of the feed tables and restrictions."""
        return f"{self.feed.hash}-{dict_to_hexkey(self.restrictions.to_dict())}"

    @property
    def can_undo(self) -> bool:
        """True if there is an earlier state to go back to."""
        return len(self._history) > 1

    def _record(self) -> None:
        """Push the current state onto the undo history if it changed."""
        state_hash = self.state_hash
        if state_hash == self._last_state_hash:
            return
        self._history.append((self.feed.deepcopy(), self.restrictions.copy()))
        # current state plus UNDO_HISTORY_LIMIT earlier ones
        while len(self._history) > self.config.EDITS.UNDO_HISTORY_LIMIT + 1:
            self._history.pop(0)
        self._last_state_hash = state_hash

    def undo(self) -> None:
        """Go back to the state before the last change.

        Raises:
            UndoHistoryEmptyError: if there is no earlier state.
        """
        if not self.can_undo:
            msg = "Nothing to undo."
            WranglerLogger.error(msg)
            raise UndoHistoryEmptyError(msg)
        self._history.pop()
        prev_feed, prev_restrictions = self._history[-1]
        self.feed = prev_feed.deepcopy()
        self.restrictions = prev_restrictions.copy()
        self._last_state_hash = self.state_hash
        WranglerLogger.info(f"Undid last change. {len(self._history) - 1} earlier states left.")

    # Trips and routes

    def _check_trip_exists(self, trip_id: str) -> None:
        if trip_id not in set(self.feed.trips.trip_id):
            msg = f"Trip not found: {trip_id}"
            WranglerLogger.error(msg)
            raise TripNotFoundError(msg)

    def add_trip(
        self, route_id: str, service_id: str, trip_id: Optional[str] = None, **props
    ) -> str:
        """Add a trip without stop times to a route. Returns the new trip_id.

        Raises:
            RouteNotFoundError: if route_id isn't in routes.
            ValueError: if trip_id is already used.
        """
        check_route_exists(self.feed.routes, route_id)
        trips, trip_id = add_trip(self.feed.trips, route_id, service_id, trip_id=trip_id, **props)
        self.feed.trips = trips
        self._record()
        WranglerLogger.info(f"Added trip {trip_id} to route {route_id}.")
        return trip_id

    def _delete_trips(self, trip_ids: list[str]) -> None:
        trips, stop_times = delete_trips(self.feed.trips, self.feed.stop_times, trip_ids)
        # stop_times first so nothing references the removed trips when trips is set.
        self.feed.stop_times = stop_times
        self.feed.trips = trips
        self.restrictions.delete_trips(trip_ids)

    def delete_trip(self, trip_id: str) -> None:
        """Delete a trip with all of its stop times and restrictions.

        Raises:
            TripNotFoundError: if trip_id isn't in trips.
        """
        self._delete_trips([trip_id])
        self._record()
        WranglerLogger.info(f"Deleted trip {trip_id}.")

    def delete_route(self, route_id: str) -> list[str]:
        """Delete a route with all of its trips, their stop times and restrictions.

        Returns:
            trip_ids which were deleted with the route.

        Raises:
            RouteNotFoundError: if route_id isn't in routes.
        """
        check_route_exists(self.feed.routes, route_id)
        trip_ids = trip_ids_for_route_ids(self.feed.trips, [route_id])
        if trip_ids:
            self._delete_trips(trip_ids)
        self.feed.routes = self.feed.routes.loc[self.feed.routes.route_id != route_id]
        self._record()
        WranglerLogger.info(f"Deleted route {route_id} and {len(trip_ids)} trips.")
        return trip_ids

    # Stop times

    def add_stop_time(self, trip_id: str, stop_id: str) -> int:
        """Append a visit to stop_id at the end of a trip. Returns its stop_sequence.

        The arrival is the previous stop time's departure, or `EDITS.DEFAULT_FIRST_TIME` for
        the first stop time of a trip, and the departure is `EDITS.DEFAULT_DWELL_MINUTES` later.

        Raises:
            TripNotFoundError: if trip_id isn't in trips.
            StopNotFoundError: if stop_id isn't in stops.
        """
        self._check_trip_exists(trip_id)
        if stop_id not in set(self.feed.stops.stop_id):
            msg = f"Stop not found: {stop_id}"
            WranglerLogger.error(msg)
            raise StopNotFoundError(msg)
        stop_times = append_stop_time(
            self.feed.stop_times,
            trip_id,
            stop_id,
            default_first_time=self.config.EDITS.DEFAULT_FIRST_TIME,
            dwell_minutes=self.config.EDITS.DEFAULT_DWELL_MINUTES,
        )
        self.feed.stop_times = stop_times
        self._record()
        trip_st = self.feed.stop_times.loc[self.feed.stop_times.trip_id == trip_id]
        return int(trip_st.stop_sequence.max())

    def set_stop_time_field(
        self, trip_id: str, stop_sequence: int, field: str, value: Any
    ) -> None:
        """Change one field of one stop time.

        Time fields accept display values such as `9:05`. If the stop_id is changed, the
        restriction for the old stop visit is removed unless the trip still visits that stop.

        Raises:
            StopTimeNotFoundError: if the trip has no stop time with that stop_sequence.
            ValueError: if field isn't a stop_times field.
        """
        stop_times, prev_stop_id = set_stop_time_value(
            self.feed.stop_times, trip_id, stop_sequence, field, value
        )
        self.feed.stop_times = stop_times
        if field == "stop_id" and (trip_id, prev_stop_id) not in self.feed.stop_visit_pairs():
            self.restrictions.delete_stop_time(trip_id, prev_stop_id)
        self._record()

    def remove_stop_time(self, trip_id: str, stop_sequence: int) -> str:
        """Remove one stop time and move the trip's later stop times up by one.

        The restriction for the removed `(trip_id, stop_id)` visit is removed too.

        Returns:
            stop_id of the removed stop time.

        Raises:
            StopTimeNotFoundError: if the trip has no stop time with that stop_sequence.
        """
        stop_times, removed_stop_id = remove_stop_time(
            self.feed.stop_times, trip_id, stop_sequence
        )
        self.feed.stop_times = stop_times
        self.restrictions.delete_stop_time(trip_id, removed_stop_id)
        self._record()
        WranglerLogger.info(
            f"Removed stop {removed_stop_id} at sequence {stop_sequence} from trip {trip_id}."
        )
        return removed_stop_id

    # Restrictions

    def set_restriction(self, trip_id: str, stop_id: str, rule: RuleInput) -> RestrictionRecord:
        """Set the pickup / drop-off rule for a stop visit of a trip.

        Args:
            trip_id: trip the rule applies to.
            stop_id: stop visited by the trip.
            rule: a mode such as `"pickup"`, a dict like `{"mode": "custom", ...}` or a
                RestrictionRecord.

        Raises:
            StopTimeNotFoundError: if the trip doesn't visit stop_id.
            pydantic.ValidationError: if the rule is invalid.
        """
        if (trip_id, stop_id) not in self.feed.stop_visit_pairs():
            msg = f"Trip {trip_id} has no stop time at stop {stop_id}."
            WranglerLogger.error(msg)
            raise StopTimeNotFoundError(msg)
        record = self.restrictions.set(trip_id, stop_id, rule)
        self._record()
        return record

    def clear_restriction(self, trip_id: str, stop_id: str) -> bool:
        """Remove the rule for a stop visit. Returns True if there was one."""
        removed = self.restrictions.delete(trip_id, stop_id)
        self._record()
        return removed

    def import_overrides(self, document: dict) -> MergeResult:
        """Merge an overrides document, skipping rules for visits that aren't in the feed."""
        result = self.restrictions.merge(document, self.feed.stop_visit_pairs())
        self._record()
        return result

    # Read-only views

    def patterns(self) -> list[Pattern]:
        """Maximal stop patterns of the feed's trips."""
        return patterns_for_feed(self.feed.stop_times)

    def pattern_trips(self, pattern: Pattern) -> list[str]:
        """A pattern's trip_ids in display order."""
        return sort_pattern_trips(pattern, self.feed.trips, self.feed.stop_times)

    def filter_table(self, table_name: str, query: Optional[str]) -> pd.DataFrame:
        """Records of a feed table which match a query. See `schedule_wrangler.query`."""
        return filter_df(self.feed.get_table(table_name), query)

    def validate(self) -> ValidationReport:
        """Validate the feed."""
        return validate_feed(self.feed)

    def compile(self) -> CompiledTables:
        """Compile restrictions into export-ready trips and stop_times."""
        return compile_trips(
            self.feed.trips, self.feed.stop_times, self.restrictions, config=self.config
        )

    # Output

    def export(
        self, out_dir: Union[Path, str], zip_file: bool = False, validate: bool = True
    ) -> CompiledTables:
        """Write the compiled feed. See `schedule_wrangler.io.write_export`."""
        return write_export(
            self.feed,
            self.restrictions,
            out_dir,
            zip_file=zip_file,
            config=self.config,
            validate=validate,
        )

    def save(self, path: Union[Path, str]) -> None:
        """Write the feed and restrictions as a project file."""
        write_project(self.feed, self.restrictions, path)
