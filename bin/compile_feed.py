#!/usr/bin/env python3
"""Compile pickup / drop-off overrides into a GTFS feed and write it out.

Usage: python compile_feed.py <feed_path> <out_dir> [--overrides <file>] [--config <file>]\
    [--zip] [--no-validate].

Arguments:
    feed_path         Path to a GTFS directory or zip file.
    out_dir           Path to the output directory.

Options:
    --overrides <file>  Overrides document (json, yaml or toml) with pickup / drop-off rules.
    --config <file>     Wrangler config file (json, yaml or toml).
    --zip               Write a single gtfs.zip instead of separate files.
    --no-validate       Don't validate the feed before writing it.
"""

import argparse
import sys
from pathlib import Path

from schedule_wrangler import (
    RestrictionStore,
    WranglerLogger,
    load_feed,
    load_wrangler_config,
    read_overrides,
    setup_logging,
    write_export,
)


def compile_feed(feed_path, out_dir, overrides=None, config=None, zip_file=False, validate=True):
    """Load a feed, merge overrides, then validate, compile and write it with `write_export`."""
    config = load_wrangler_config(config)
    feed = load_feed(feed_path)
    restrictions = RestrictionStore()
    if overrides is not None:
        result = restrictions.merge(read_overrides(overrides), feed.stop_visit_pairs())
        WranglerLogger.info(
            f"Overrides: {result.added} added, {result.skipped} skipped as not in feed."
        )
    compiled = write_export(
        feed, restrictions, out_dir, zip_file=zip_file, config=config, validate=validate
    )
    WranglerLogger.info(
        f"Exported {len(compiled.trips)} trips ({len(compiled.split_trips)} split) and "
        f"{len(compiled.stop_times)} stop times to {out_dir}."
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Compile pickup / drop-off overrides into a GTFS feed."
    )
    parser.add_argument("feed_path", type=Path, help="Path to a GTFS directory or zip file.")
    parser.add_argument("out_dir", type=Path, help="Path to the output directory.")
    parser.add_argument(
        "--overrides", type=Path, default=None, help="Overrides document with pickup/drop-off rules."
    )
    parser.add_argument("--config", type=Path, default=None, help="Wrangler config file.")
    parser.add_argument(
        "--zip", action="store_true", help="Write a single gtfs.zip instead of separate files."
    )
    parser.add_argument(
        "--no-validate", action="store_true", help="Don't validate the feed before writing it."
    )
    args = parser.parse_args()
    setup_logging()
    try:
        compile_feed(
            args.feed_path,
            args.out_dir,
            overrides=args.overrides,
            config=args.config,
            zip_file=args.zip,
            validate=not args.no_validate,
        )
    except Exception as e:
        WranglerLogger.error(f"Compile_feed error: {e}")
        sys.exit(1)
