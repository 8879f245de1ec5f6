"""Configuration module for schedule_wrangler."""

from pathlib import Path
from typing import Optional, Union

from ..logger import WranglerLogger
from .utils import _config_data_from_files
from .wrangler import DefaultConfig, WranglerConfig

ConfigInputTypes = Union[dict, Path, list[Path], WranglerConfig]


def load_wrangler_config(data: Optional[ConfigInputTypes] = None) -> WranglerConfig:
    """Load the WranglerConfiguration."""
    if isinstance(data, WranglerConfig):
        return data
    if data is None:
        return WranglerConfig()
    if isinstance(data, dict):
        return WranglerConfig(**data)
    if isinstance(data, Path) or (
        isinstance(data, list) and all(isinstance(d, Path) for d in data)
    ):
        return load_wrangler_config(_config_data_from_files(data))
    msg = "No valid configuration data found."
    WranglerLogger.error(msg + f"\n   Found: {data}.")
    raise ValueError(msg)


__all__ = ["DefaultConfig", "WranglerConfig", "load_wrangler_config"]
