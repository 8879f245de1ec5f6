"""Dataframe accessors that allow functions to be called directly on the dataframe."""

import hashlib

import pandas as pd

from ..query import filter_df


@pd.api.extensions.register_dataframe_accessor("row_query")
class RowQueryAccessor:
    """Filter any feed table with a query expression or free text.

    Usage:

    ```
    selected_trips_df = trips_df.row_query('route_id == "18" || trip_headsign ~= airport')
    ```
    """

    def __init__(self, pandas_obj):
        """Initialization function for the row query accessor."""
        self._obj = pandas_obj

    def __call__(self, query: str) -> pd.DataFrame:
        """Returns the rows matching the query."""
        return filter_df(self._obj, query)


@pd.api.extensions.register_dataframe_accessor("df_hash")
class dfHash:
    """Creates a dataframe hash from the column names and row values, ignoring the index.

    All missing values (None, NaN, NA) hash the same.
    """

    def __init__(self, pandas_obj):
        """Initialization function for the dataframe hash."""
        self._obj = pandas_obj

    def __call__(self):
        """Function to hash the dataframe."""
        _str_df = self._obj.astype(object).where(self._obj.notna(), None).astype(str)
        _row_hashes = pd.util.hash_pandas_object(_str_df, index=False).values
        _value = str(list(self._obj.columns)).encode() + _row_hashes.tobytes()
        hash = hashlib.sha1(_value).hexdigest()
        return hash
