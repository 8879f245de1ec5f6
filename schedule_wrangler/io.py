"""Functions for reading and writing feeds, exports, projects and overrides documents."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import pandas as pd
import yaml
from pydantic import ValidationError

from .compile import CompiledTables, compile_trips
from .configs import DefaultConfig, WranglerConfig
from .errors import FeedReadError, FeedValidationError, OverridesReadError, ProjectReadError
from .feed.feed import Feed
from .logger import WranglerLogger
from .models._base.db import RequiredTableError
from .params import GTFS_FILENAMES
from .restrictions import RestrictionStore
from .utils.data import df_to_records
from .utils.io_dict import load_dict, write_dict
from .utils.io_table import (
    FileReadError,
    prep_dir,
    read_table,
    unzip_file,
    write_table,
    write_tables_to_zip,
)
from .utils.models import TableValidationError, empty_df_from_datamodel
from .validate import validate_feed

EXPORT_TABLES = ["agencies", "stops", "routes", "calendar"]


def _feed_path_ref(path: Path) -> Path:
    if not path.exists():
        msg = f"Feed path does not exist: {path}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg)
    if path.suffix == ".zip":
        path = unzip_file(path)
    return path


def _find_table_file(feed_dir: Path, table_name: str) -> Optional[Path]:
    """Path to a table's file in a feed directory, looking one level down for zipped folders."""
    filename = f"{GTFS_FILENAMES[table_name]}.txt"
    candidates = [feed_dir / filename, *sorted(feed_dir.glob(f"*/{filename}"))]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def load_feed(feed_path: Union[Path, str]) -> Feed:
    """Create a Feed object from a GTFS directory or `.zip` file.

    Args:
        feed_path: directory of GTFS `.txt` files or a zip of them.

    Returns:
        Feed: feed with the required tables plus shapes if there is a shapes.txt.

    Raises:
        FeedReadError: if the path doesn't exist, a required file is missing or a file can't be
            read.
    """
    feed_path = Path(feed_path)
    feed_dir = _feed_path_ref(feed_path)
    if not feed_dir.is_dir():
        msg = f"Feed path not a directory or zip file: {feed_path}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg)

    WranglerLogger.info(f"Reading GTFS feed tables from {feed_path}")

    feed_files = {t: _find_table_file(feed_dir, t) for t in Feed.table_names}
    _missing_files = [f"{GTFS_FILENAMES[t]}.txt" for t, f in feed_files.items() if f is None]
    if _missing_files:
        msg = f"Required GTFS file(s) not in {feed_path}: {_missing_files}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg)

    for table_name in Feed.optional_table_names:
        opt_file = _find_table_file(feed_dir, table_name)
        if opt_file is not None:
            feed_files[table_name] = opt_file

    try:
        feed_dfs = {table: read_table(file) for table, file in feed_files.items()}
    except FileReadError as e:
        raise FeedReadError(str(e)) from e

    feed = load_feed_from_dfs(feed_dfs)
    feed.feed_path = feed_path
    WranglerLogger.info(f"Loaded {feed}")
    return feed


def load_feed_from_dfs(feed_dfs: dict[str, pd.DataFrame]) -> Feed:
    """Create a Feed object from a dictionary of DataFrames representing a GTFS feed.

    Args:
        feed_dfs: mapping of table name (`agencies`, `stops`, `routes`, `calendar`, `trips`,
            `stop_times` and optionally `shapes`) to DataFrame.

    Raises:
        FeedReadError: if a required table is missing or a table doesn't fit its schema.

    Example:
        >>> feed_dfs = {
        ...     "agencies": agency_df,
        ...     "stops": stops_df,
        ...     "routes": routes_df,
        ...     "calendar": calendar_df,
        ...     "trips": trips_df,
        ...     "stop_times": stop_times_df,
        ... }
        >>> feed = load_feed_from_dfs(feed_dfs)
    """
    try:
        return Feed(**feed_dfs)
    except (RequiredTableError, TableValidationError) as e:
        msg = f"Could not create feed from tables: {e}"
        WranglerLogger.error(msg)
        raise FeedReadError(msg) from e


def _export_tables(
    feed: Feed, compiled: CompiledTables, config: WranglerConfig
) -> dict[str, pd.DataFrame]:
    """Mapping of GTFS filename to table to write."""
    tables = {f"{GTFS_FILENAMES[t]}.txt": feed.get_table(t) for t in EXPORT_TABLES}
    tables["trips.txt"] = compiled.trips
    tables["stop_times.txt"] = compiled.stop_times
    if config.EXPORT.INCLUDE_SHAPES and feed.has_shapes:
        tables["shapes.txt"] = feed.shapes
    return tables


def write_export(
    feed: Feed,
    restrictions: RestrictionStore,
    out_dir: Union[Path, str] = ".",
    zip_file: bool = False,
    config: WranglerConfig = DefaultConfig,
    validate: bool = True,
    overwrite: bool = True,
) -> CompiledTables:
    """Compile restrictions and write an export-ready GTFS feed.

    agency, stops, routes and calendar are written as they are. trips and stop_times are the
    compiled tables. shapes is written if the feed has any and `INCLUDE_SHAPES` is set.

    Args:
        feed: Feed to export.
        restrictions: pickup / drop-off rules to compile into trips and stop_times.
        out_dir: directory to write to.
        zip_file: if True, writes a single `gtfs.zip` to out_dir instead of separate files.
        config: WranglerConfig. Defaults to DefaultConfig.
        validate: if True, validates the feed first.
        overwrite: if True, will overwrite files if they already exist. Defaults to True.

    Returns:
        CompiledTables which were written.

    Raises:
        FeedValidationError: if validate is True, `VALIDATION.STRICT_EXPORT` is set and the
            feed has validation errors.
    """
    out_dir = Path(out_dir)
    if validate:
        report = validate_feed(feed)
        if not report.ok:
            msg = f"Feed has {len(report.errors)} validation errors: " + "; ".join(
                str(i) for i in report.errors[:5]
            )
            if config.VALIDATION.STRICT_EXPORT:
                WranglerLogger.error(msg)
                raise FeedValidationError(msg)
            WranglerLogger.warning(msg)

    compiled = compile_trips(feed.trips, feed.stop_times, restrictions, config=config)
    tables = _export_tables(feed, compiled, config)

    if zip_file:
        zip_path = out_dir / "gtfs.zip"
        write_tables_to_zip(tables, zip_path, overwrite=overwrite)
        WranglerLogger.info(f"Wrote {len(tables)} files to {zip_path}")
    else:
        prep_dir(out_dir)
        for filename, df in tables.items():
            write_table(df, out_dir / filename, overwrite=overwrite)
        WranglerLogger.info(f"Wrote {len(tables)} files to {out_dir}")
    return compiled


def write_project(
    feed: Feed, restrictions: Optional[RestrictionStore], path: Union[Path, str]
) -> None:
    """Write a feed and its restrictions as a JSON project document.

    The document has one list of records per table plus the restriction `rules`.
    """
    path = Path(path)
    project = {t: df_to_records(feed.get_table(t)) for t in feed.table_names}
    project["rules"] = (restrictions or RestrictionStore()).to_dict()["rules"]
    write_dict(project, path)
    WranglerLogger.info(f"Wrote project to {path}")


def load_project(path: Union[Path, str]) -> tuple[Feed, RestrictionStore]:
    """Read a JSON project document written by `write_project`.

    Returns:
        tuple of the Feed and its RestrictionStore.

    Raises:
        ProjectReadError: if the file can't be parsed or doesn't hold a usable feed.
    """
    path = Path(path)
    try:
        project = load_dict(path)
    except (FileNotFoundError, NotImplementedError, ValueError, yaml.YAMLError) as e:
        msg = f"Could not read project file {path}: {e}"
        WranglerLogger.error(msg)
        raise ProjectReadError(msg) from e
    if not isinstance(project, dict):
        msg = f"Project file {path} must hold a JSON object."
        WranglerLogger.error(msg)
        raise ProjectReadError(msg)

    table_names = [*Feed.table_names, *Feed.optional_table_names]
    try:
        feed_dfs = {
            t: pd.DataFrame(project[t])
            if project[t]
            else empty_df_from_datamodel(Feed._table_models[t])
            for t in table_names
            if t in project
        }
        feed = load_feed_from_dfs(feed_dfs)
        restrictions = RestrictionStore.from_dict({"rules": project.get("rules") or {}})
    except (FeedReadError, ValidationError, ValueError) as e:
        msg = f"Project file {path} isn't a valid project: {e}"
        WranglerLogger.error(msg)
        raise ProjectReadError(msg) from e
    restrictions.prune(feed.stop_visit_pairs())
    WranglerLogger.info(f"Loaded project {path}: {feed} with {restrictions}")
    return feed, restrictions


def read_overrides(path: Union[Path, str]) -> dict:
    """Read an overrides document `{"rules": {...}}` from a json, yaml or toml file.

    The document is returned as read so it can be merged against a feed with
    `RestrictionStore.merge`.

    Raises:
        OverridesReadError: if the file doesn't exist or can't be parsed.
    """
    path = Path(path)
    try:
        document = load_dict(path)
    except (FileNotFoundError, NotImplementedError, ValueError, yaml.YAMLError) as e:
        msg = f"Could not read overrides file {path}: {e}"
        WranglerLogger.error(msg)
        raise OverridesReadError(msg) from e
    if not isinstance(document, dict):
        msg = f"Overrides file {path} must hold an object with `rules`."
        WranglerLogger.error(msg)
        raise OverridesReadError(msg)
    return document


def write_overrides(restrictions: RestrictionStore, path: Union[Path, str]) -> None:
    """Write the restrictions as an overrides document."""
    write_dict(restrictions.to_dict(), Path(path))
    WranglerLogger.info(f"Wrote {len(restrictions)} overrides to {path}")
