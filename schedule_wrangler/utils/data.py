"""Utility functions for pandas data manipulation."""

import json
from typing import Any, Union

import pandas as pd

from ..logger import WranglerLogger


def fk_in_pk(
    pk: Union[pd.Series, list], fk: Union[pd.Series, list], ignore_nan: bool = True
) -> tuple[bool, list]:
    """Check if all foreign keys are in the primary keys, optionally ignoring NaN and blanks."""
    if isinstance(fk, list):
        fk = pd.Series(fk)

    if ignore_nan:
        fk = fk.dropna()
        fk = fk[fk.astype(str).str.strip() != ""]

    missing_flag = ~fk.isin(pk)

    if missing_flag.any():
        WranglerLogger.warning(
            f"Following keys referenced in {fk.name} but missing in "
            f"primary key table: \n{fk[missing_flag]} "
        )
        return False, fk[missing_flag].tolist()

    return True, []


def df_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a dataframe to a list of JSON-safe dicts with NaN replaced by None."""
    if df.empty:
        return []
    return json.loads(df.to_json(orient="records"))
