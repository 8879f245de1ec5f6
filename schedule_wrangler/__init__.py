"""Schedule Wrangler Package."""

__version__ = "0.1.0"

from .compile import compile_trips
from .configs import load_wrangler_config
from .feed.feed import Feed
from .io import (
    load_feed,
    load_feed_from_dfs,
    load_project,
    read_overrides,
    write_export,
    write_overrides,
    write_project,
)
from .logger import WranglerLogger, setup_logging
from .restrictions import RestrictionStore
from .session import EditSession
from .utils.df_accessors import *
from .validate import validate_feed

__all__ = [
    "WranglerLogger",
    "setup_logging",
    "load_wrangler_config",
    "Feed",
    "load_feed",
    "load_feed_from_dfs",
    "load_project",
    "write_project",
    "read_overrides",
    "write_overrides",
    "write_export",
    "RestrictionStore",
    "EditSession",
    "compile_trips",
    "validate_feed",
]
