"""Helper functions for data models."""

import copy
from functools import wraps
from pathlib import Path
from typing import _GenericAlias, get_args, get_origin, get_type_hints

import pandas as pd
import pandera as pa
from pandas import DataFrame
from pandera import DataFrameModel
from pandera.errors import SchemaError, SchemaErrors
from pandera.typing import DataFrame as PanderaDataFrame
from pydantic import validate_call

from ..logger import WranglerLogger
from ..params import SMALL_RECS


class TableValidationError(Exception):
    """Raised when a table validation fails."""


def empty_df_from_datamodel(model: DataFrameModel) -> pd.DataFrame:
    """Create an empty DataFrame with the columns of the specified model.

    Args:
        model: A pandera data model to create empty DataFrame from.

    Returns:
        An empty DataFrame that validates to the specified model.
    """
    schema = model.to_schema()
    data: dict[str, list] = {col: [] for col in schema.columns}
    return model.validate(pd.DataFrame(data))


def default_from_datamodel(data_model: pa.DataFrameModel, field: str):
    """Returns default value from pandera data model for a given field name."""
    if field in data_model.__fields__ and hasattr(data_model.__fields__[field][1], "default"):
        return data_model.__fields__[field][1].default
    return None


def fill_df_with_defaults_from_model(df, model):
    """Fill a DataFrame with default values from a Pandera DataFrameModel.

    Args:
        df: DataFrame to fill with default values.
        model: Pandera DataFrameModel to get default values from.
    """
    for c in df.columns:
        default_value = default_from_datamodel(model, c)
        if default_value is not None:
            df[c] = df[c].fillna(default_value)
    return df


@validate_call(config={"arbitrary_types_allowed": True})
def validate_df_to_model(
    df: DataFrame, model: type, output_file: Path = Path("validation_failure_cases.csv")
) -> DataFrame:
    """Wrapper to validate a DataFrame against a Pandera DataFrameModel with better logging.

    Also copies the attrs from the input DataFrame to the validated DataFrame.

    Args:
        df: DataFrame to validate.
        model: Pandera DataFrameModel to validate against.
        output_file: Optional file to write validation errors to. Defaults to
            validation_failure_cases.csv.
    """
    attrs = copy.deepcopy(df.attrs)
    err_msg = f"Validation to {model.__name__} failed."
    try:
        model_df = model.validate(df, lazy=True)
        model_df = fill_df_with_defaults_from_model(model_df, model)
        model_df.attrs = attrs
        return model_df
    except (TypeError, ValueError) as e:
        WranglerLogger.error(f"Validation to {model.__name__} failed.\n{e}")
        raise TableValidationError(err_msg) from e
    except SchemaErrors as e:
        WranglerLogger.error(
            f"Validation to {model.__name__} failed with {len(e.failure_cases)} "
            f"errors: \n{e.failure_cases}"
        )
        if len(e.failure_cases) > SMALL_RECS:
            e.failure_cases.to_csv(output_file)
            WranglerLogger.info(f"Detailed error cases written to {output_file}")
        else:
            WranglerLogger.error("Detailed failure cases:\n%s", e.failure_cases)
        raise TableValidationError(err_msg) from e
    except SchemaError as e:
        WranglerLogger.error(f"Validation to {model.__name__} failed with error: {e}")
        WranglerLogger.error(f"Failure Cases:\n{e.failure_cases}")
        raise TableValidationError(err_msg) from e


def _is_type_from_type_hint(type_hint_value, type_to_check):
    def check_type_hint(value):
        if isinstance(value, _GenericAlias):
            if value.__origin__ == type_to_check:
                return True
        return False

    if isinstance(type_hint_value, _GenericAlias):
        if get_origin(type_hint_value) is type_to_check:
            return True
        return any(check_type_hint(arg) for arg in get_args(type_hint_value))
    return check_type_hint(type_hint_value)


def validate_call_pyd(func):
    """Decorator to validate the function i/o using Pydantic models without Pandera."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        type_hints = get_type_hints(func)
        # Modify the type hints to replace pandera DataFrame models with pandas DataFrames
        modified_type_hints = {
            key: value
            for key, value in type_hints.items()
            if not _is_type_from_type_hint(value, PanderaDataFrame)
        }

        new_func = func
        new_func.__annotations__ = modified_type_hints
        validated_func = validate_call(new_func, config={"arbitrary_types_allowed": True})

        return validated_func(*args, **kwargs)

    return wrapper
