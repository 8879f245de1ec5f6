"""Data models for the editable GTFS tables using pandera library.

The module includes the following classes:

- AgenciesTable: Represents the Agency table in the GTFS dataset.
- StopsTable: Represents the Stops table in the GTFS dataset.
- RoutesTable: Represents the Routes table in the GTFS dataset.
- CalendarTable: Represents the Calendar (service) table in the GTFS dataset.
- TripsTable: Represents the Trips table in the GTFS dataset.
- StopTimesTable: Represents the Stop Times table in the GTFS dataset.
- ShapesTable: Optional. Represents the Shapes table in the GTFS dataset.

The models coerce types and add missing optional columns but deliberately don't enforce
uniqueness or referential integrity: a feed being edited is allowed to be inconsistent and
those problems are reported by `schedule_wrangler.validate.validate_feed`.

!!! example "Validating a table to the StopTimesTable"

    ```python
    from schedule_wrangler.models.gtfs.tables import StopTimesTable
    from schedule_wrangler.utils.models import validate_df_to_model

    validated_stop_times_df = validate_df_to_model(stop_times_df, StopTimesTable)
    ```
"""

from typing import ClassVar, Optional

import pandas as pd
import pandera as pa
from pandera.typing import Series

from .._base.db import TableForeignKeys, TablePrimaryKeys
from .types import DirectionID, PickupDropoffType, RouteType, ServiceAvailable

TIME_FIELDS = ["arrival_time", "departure_time"]

SERVICE_VALUES = [s.value for s in ServiceAvailable]

WEEKDAY_FIELDS = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


class AgenciesTable(pa.DataFrameModel):
    """Represents the Agency table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#agencytxt>

    Attributes:
        agency_id (str): The agency_id. Primary key.
        agency_name (str): The agency name.
        agency_url (str): The agency URL.
        agency_timezone (str): The agency timezone.
    """

    agency_id: Series[str] = pa.Field(coerce=True, nullable=True)
    agency_name: Series[str] = pa.Field(coerce=True, nullable=True)
    agency_url: Series[str] = pa.Field(coerce=True, nullable=True)
    agency_timezone: Series[str] = pa.Field(coerce=True, nullable=True)

    # Optional Fields
    agency_lang: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)
    agency_phone: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the AgenciesTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["agency_id"]


class StopsTable(pa.DataFrameModel):
    """Represents the Stops table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#stopstxt>

    Attributes:
        stop_id (str): The stop_id. Primary key.
        stop_name (Optional[str]): The stop name.
        stop_lat (float): The stop latitude.
        stop_lon (float): The stop longitude.
        stop_code (Optional[str]): The stop code.
    """

    stop_id: Series[str] = pa.Field(coerce=True, nullable=False)
    stop_name: Series[str] = pa.Field(coerce=True, nullable=True)
    stop_lat: Series[float] = pa.Field(coerce=True, nullable=True, ge=-90, le=90)
    stop_lon: Series[float] = pa.Field(coerce=True, nullable=True, ge=-180, le=180)

    # Optional Fields
    stop_code: Optional[Series[str]] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the StopsTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["stop_id"]


class RoutesTable(pa.DataFrameModel):
    """Represents the Routes table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#routestxt>

    Attributes:
        route_id (str): The route_id. Primary key.
        route_short_name (Optional[str]): The route short name.
        route_long_name (Optional[str]): The route long name.
        route_type (RouteType): The route type. Defaults to 3 (bus).
        agency_id (Optional[str]): Foreign key to agency_id in the agencies table.
    """

    route_id: Series[str] = pa.Field(coerce=True, nullable=False)
    route_short_name: Series[str] = pa.Field(coerce=True, nullable=True)
    route_long_name: Series[str] = pa.Field(coerce=True, nullable=True)
    route_type: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=RouteType.BUS.value, isin=[t.value for t in RouteType]
    )
    agency_id: Series[str] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the RoutesTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["route_id"]
        _fk: ClassVar[TableForeignKeys] = {"agency_id": ("agencies", "agency_id")}


class CalendarTable(pa.DataFrameModel):
    """Represents the Calendar table in the GTFS dataset, which defines each service.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#calendartxt>

    Attributes:
        service_id (str): The service_id. Primary key.
        monday..sunday (int): 1 if the service runs on that day of the week, else 0.
        start_date (str): First day of service as `YYYYMMDD`.
        end_date (str): Last day of service as `YYYYMMDD`.
    """

    service_id: Series[str] = pa.Field(coerce=True, nullable=False)
    monday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    tuesday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    wednesday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    thursday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    friday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    saturday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    sunday: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, default=0, isin=SERVICE_VALUES
    )
    start_date: Series[str] = pa.Field(coerce=True, nullable=True)
    end_date: Series[str] = pa.Field(coerce=True, nullable=True)

    class Config:
        """Config for the CalendarTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["service_id"]


class TripsTable(pa.DataFrameModel):
    """Represents the Trips table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#tripstxt>

    Attributes:
        trip_id (str): Primary key.
        route_id (str): Foreign key to `route_id` in the routes table.
        service_id (str): Foreign key to `service_id` in the calendar table.
        trip_headsign (Optional[str]): The trip headsign.
        shape_id (Optional[str]): Foreign key to `shape_id` in the shapes table.
        direction_id (Optional[DirectionID]): The direction id. Values can be:
            - 0: Outbound
            - 1: Inbound
    """

    trip_id: Series[str] = pa.Field(coerce=True, nullable=False)
    route_id: Series[str] = pa.Field(coerce=True, nullable=False)
    service_id: Series[str] = pa.Field(coerce=True, nullable=False)
    trip_headsign: Series[str] = pa.Field(coerce=True, nullable=True)
    shape_id: Series[str] = pa.Field(coerce=True, nullable=True)
    direction_id: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, isin=[d.value for d in DirectionID]
    )

    class Config:
        """Config for the TripsTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["trip_id"]
        _fk: ClassVar[TableForeignKeys] = {
            "route_id": ("routes", "route_id"),
            "service_id": ("calendar", "service_id"),
        }


class StopTimesTable(pa.DataFrameModel):
    """Represents the Stop Times table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#stop_timestxt>

    The primary key of this table is a composite key of `trip_id` and `stop_sequence`. A trip
    may visit the same `stop_id` more than once.

    Times are kept as stored strings (`H:MM:SS`, hours may exceed 23) and an empty string means
    the time is unset. A row with both times unset is a placeholder while editing and is left out
    of exports.

    Attributes:
        trip_id (str): Foreign key to `trip_id` in the trips table.
        stop_id (str): Foreign key to `stop_id` in the stops table.
        stop_sequence (int): The stop sequence, 1-based.
        arrival_time (str): The arrival time or "".
        departure_time (str): The departure time or "".
        pickup_type (Optional[PickupDropoffType]): The pickup type. Values can be:
            - 0: Regularly scheduled pickup
            - 1: No pickup available
            - 2: Must phone agency to arrange pickup
            - 3: Must coordinate with driver to arrange pickup
        drop_off_type (Optional[PickupDropoffType]): The drop off type, with the same values.
    """

    trip_id: Series[str] = pa.Field(coerce=True, nullable=False)
    stop_id: Series[str] = pa.Field(coerce=True, nullable=False)
    stop_sequence: Series[int] = pa.Field(coerce=True, nullable=False, ge=0)
    arrival_time: Series[str] = pa.Field(coerce=True, nullable=False, default="")
    departure_time: Series[str] = pa.Field(coerce=True, nullable=False, default="")
    pickup_type: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, isin=[p.value for p in PickupDropoffType]
    )
    drop_off_type: Series[pd.Int64Dtype] = pa.Field(
        coerce=True, nullable=True, isin=[p.value for p in PickupDropoffType]
    )

    @pa.dataframe_parser
    def blank_unset_times(cls, df):
        """Represent unset arrival and departure times as empty strings."""
        df = df.copy()
        for field in TIME_FIELDS:
            if field not in df.columns:
                df[field] = ""
            df[field] = df[field].where(df[field].notna(), "").astype(str).str.strip()
        return df

    class Config:
        """Config for the StopTimesTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["trip_id", "stop_sequence"]
        _fk: ClassVar[TableForeignKeys] = {
            "trip_id": ("trips", "trip_id"),
            "stop_id": ("stops", "stop_id"),
        }


class ShapesTable(pa.DataFrameModel):
    """Represents the Shapes table in the GTFS dataset.

    For field definitions, see the GTFS reference: <https://gtfs.org/documentation/schedule/reference/#shapestxt>

    Attributes:
        shape_id (str): The shape_id.
        shape_pt_lat (float): The shape point latitude.
        shape_pt_lon (float): The shape point longitude.
        shape_pt_sequence (int): The shape point sequence.
    """

    shape_id: Series[str] = pa.Field(coerce=True, nullable=False)
    shape_pt_lat: Series[float] = pa.Field(coerce=True, nullable=False, ge=-90, le=90)
    shape_pt_lon: Series[float] = pa.Field(coerce=True, nullable=False, ge=-180, le=180)
    shape_pt_sequence: Series[int] = pa.Field(coerce=True, nullable=False, ge=0)

    class Config:
        """Config for the ShapesTable data model."""

        coerce = True
        add_missing_columns = True
        _pk: ClassVar[TablePrimaryKeys] = ["shape_id", "shape_pt_sequence"]
