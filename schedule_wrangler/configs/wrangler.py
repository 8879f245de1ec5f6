"""Configuration for parameters for Schedule Wrangler.

Users can change a handful of parameters which control the way Wrangler edits and exports
schedules. These parameters can be saved as a wrangler config file which can be read in repeatedly
to make sure the same parameters are used each time.

Usage:
    Specify the config when starting an editing session or compiling an export.

    ```python
    session = EditSession(feed, config=my_config)
    write_export(feed, restrictions, out_dir, config=my_config)
    ```

    `my_config` can be a:

    - Path to a config file in yaml/toml/json (recommended),
    - List of paths to config files (in case you want to split up various sub-configurations)
    - Dictionary which is in the same structure of a config file, or
    - A `WranglerConfig()`  instance.

If not provided, Wrangler will use reasonable defaults.

??? Example "Default Wrangler Configuration Values"

    If not explicitly provided, the following default values are used:

    ```yaml

    EXPORT:
        SEGMENT_A_SUFFIX: __segA
        SEGMENT_B_SUFFIX: __segB
        INCLUDE_SHAPES: true
        TRIP_COLUMNS: [route_id, service_id, trip_id, trip_headsign, shape_id, direction_id]
        STOP_TIME_COLUMNS: [trip_id, arrival_time, departure_time, stop_id, stop_sequence,
            pickup_type, drop_off_type]
    EDITS:
        DEFAULT_FIRST_TIME: "08:00:00"
        DEFAULT_DWELL_MINUTES: 5
        UNDO_HISTORY_LIMIT: 50
    VALIDATION:
        STRICT_EXPORT: true
    ```

Extended usage:
    Load the default configuration:

    ```python
    from schedule_wrangler.configs import DefaultConfig
    ```

    Access the configuration:

    ```python
    DefaultConfig.EDITS.DEFAULT_DWELL_MINUTES
    >> 5
    ```

    Load a configuration from a file:

    ```python
    from schedule_wrangler.configs import load_wrangler_config

    config = load_wrangler_config(Path("path/to/config.yaml"))
    ```
"""

from pydantic import Field
from pydantic.dataclasses import dataclass

from .utils import ConfigItem


@dataclass
class ExportConfig(ConfigItem):
    """Configuration for compiling and writing an export.

    Attributes:
        SEGMENT_A_SUFFIX: suffix added to the trip_id of the leading derived trip when a trip
            with a `custom` restriction is split.
        SEGMENT_B_SUFFIX: suffix added to the trip_id of the trailing derived trip.
        INCLUDE_SHAPES: if True, shapes.txt is written when the feed has shapes.
        TRIP_COLUMNS: columns, in order, of the exported trips table.
        STOP_TIME_COLUMNS: columns, in order, of the exported stop_times table.
    """

    SEGMENT_A_SUFFIX: str = "__segA"
    SEGMENT_B_SUFFIX: str = "__segB"
    INCLUDE_SHAPES: bool = True
    TRIP_COLUMNS: list[str] = Field(
        default_factory=lambda: [
            "route_id",
            "service_id",
            "trip_id",
            "trip_headsign",
            "shape_id",
            "direction_id",
        ]
    )
    STOP_TIME_COLUMNS: list[str] = Field(
        default_factory=lambda: [
            "trip_id",
            "arrival_time",
            "departure_time",
            "stop_id",
            "stop_sequence",
            "pickup_type",
            "drop_off_type",
        ]
    )


@dataclass
class EditsConfig(ConfigItem):
    """Configuration for interactive edits.

    Attributes:
        DEFAULT_FIRST_TIME: arrival time given to the first stop time added to an empty trip.
        DEFAULT_DWELL_MINUTES: minutes added to the previous departure when appending a stop
            time to a trip.
        UNDO_HISTORY_LIMIT: maximum number of earlier states kept for undo.
    """

    DEFAULT_FIRST_TIME: str = "08:00:00"
    DEFAULT_DWELL_MINUTES: int = 5
    UNDO_HISTORY_LIMIT: int = Field(default=50, ge=1)


@dataclass
class ValidationConfig(ConfigItem):
    """Configuration for feed validation.

    Attributes:
        STRICT_EXPORT: if True, writing an export raises when the feed has validation errors.
    """

    STRICT_EXPORT: bool = True


@dataclass
class WranglerConfig(ConfigItem):
    """Configuration for Schedule Wrangler.

    Attributes:
        EXPORT: Parameters for compiling and writing exports.
        EDITS: Parameters for interactive edits.
        VALIDATION: Parameters for feed validation.
    """

    EXPORT: ExportConfig = Field(default_factory=ExportConfig)
    EDITS: EditsConfig = Field(default_factory=EditsConfig)
    VALIDATION: ValidationConfig = Field(default_factory=ValidationConfig)


DefaultConfig = WranglerConfig()
