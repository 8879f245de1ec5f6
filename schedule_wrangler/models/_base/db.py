"""Mixin for a set of interrelated pandera-validated tables."""

from __future__ import annotations

import copy
import hashlib
from collections import defaultdict
from typing import ClassVar, Optional

import pandas as pd
from pandera import DataFrameModel

from ...logger import WranglerLogger
from ...utils.data import fk_in_pk
from ...utils.models import validate_df_to_model


class RequiredTableError(Exception):
    """Raised when a required table is missing or hasn't been set yet."""


class ForeignKeyValueError(Exception):
    """Raised when foreign key values are missing from the table they reference."""


TablePrimaryKeys = list[str]


"""TableForeignKeys is a dictionary of foreign keys for a single table.

Uses the form:
    {<field>:[<fk_table>,<fk_field>]}

Example:
    {"route_id": ("routes", "route_id")}
"""
TableForeignKeys = dict[str, tuple[str, str]]


"""Dict of each table's foreign keys.

`{ <table>:{<field>:[<fk_table>,<fk_field>]} }`

Example:
    {"stop_times":
        {"stop_id": ("stops", "stop_id")}
        {"trip_id": ("trips", "trip_id")}
    }
"""
DbForeignKeys = dict[str, TableForeignKeys]


"""Mapping of tables that have fields that other tables use as fks.

`{ <table>:{<field>:[(<table using FK>,<field using fk>)]} }`
"""
DbForeignKeyUsage = dict[str, dict[str, list[tuple[str, str]]]]


class DBModelMixin:
    """An mixin class for interrelated pandera DataFrameModel tables.

    Contains a bunch of convenience methods and overrides the dunder methods
        __deepcopy__ and __eq__.

    Foreign keys are checked whenever a table is set, but a missing reference is only logged:
    feeds are often edited while they are inconsistent and `validate_feed` reports the problems.

    Methods:
        hash: hash of tables
        deepcopy: deepcopy of tables which references a custom __deepcopy__
        get_table: retrieve table by name
        table_names_with_field: returns tables in `table_names` with field name

    Attr:
        table_names: list of dataframe table names that are required as part of this "db"
            schema.
        optional_table_names: list of optional table names that will be added to `table_names` iff
            they are found.
        _table_models: mapping of `<table_name>:<DataFrameModel>` to use for validation when
            `__setattr__` is called.

    Where metadata variable _fk = {<table_field>:[<fk table>,<fk field>]}

    e.g.: `_fk = {"route_id": ["routes", "route_id"]}`
    """

    optional_table_names: ClassVar[list[str]] = []

    table_names: ClassVar[list[str]] = []

    _table_models: ClassVar[dict[str, DataFrameModel]] = {}

    def __setattr__(self, key, value):
        """Override the default setattr behavior to handle DataFrame validation.

        Note: this is NOT called when a dataframe is mutated in place!

        Args:
            key (str): The attribute name.
            value: The value to be assigned to the attribute.

        Raises:
            TableValidationError: If the DataFrame does not conform to the schema.
        """
        if isinstance(value, pd.DataFrame):
            WranglerLogger.debug(f"Validating + coercing value to {key}")
            df = self.validate_coerce_table(key, value)
            super().__setattr__(key, df)
        else:
            super().__setattr__(key, value)

    def validate_coerce_table(self, table_name: str, table: pd.DataFrame) -> pd.DataFrame:
        """Validate and coerce a table to its model and log any dangling foreign keys."""
        if table_name not in self._table_models:
            return table
        table_model = self._table_models[table_name]
        validated_df = validate_df_to_model(table, table_model)

        # Do this in both directions so that ordering of tables being added doesn't matter.
        self.check_table_fks(table_name, table=validated_df, raise_error=False)
        self.check_referenced_fks(table_name, table=validated_df)
        return validated_df

    def initialize_tables(self, **kwargs):
        """Initializes the tables for the database.

        Args:
            **kwargs: Keyword arguments representing the tables to be initialized.

        Raises:
            RequiredTableError: If any required tables are missing in the initialization.
        """
        _missing_tables = [t for t in self.table_names if t not in kwargs]
        if _missing_tables:
            msg = f"Missing required tables: {_missing_tables}"
            WranglerLogger.error(msg)
            raise RequiredTableError(msg)

        # Instance-level copy so adding optional tables doesn't leak to the class.
        _opt_tables = [k for k in self.optional_table_names if k in kwargs]
        object.__setattr__(self, "table_names", [*self.table_names, *_opt_tables])

        for table in self.table_names:
            WranglerLogger.debug(f"Initializing {table}")
            self.__setattr__(table, kwargs[table])

    @classmethod
    def fks(cls) -> DbForeignKeys:
        """Return the fk field constraints as `{ <table>:{<field>:[<fk_table>,<fk_field>]} }`."""
        fk_fields = {}
        for table_name, table_model in cls._table_models.items():
            config = table_model.Config
            if not hasattr(config, "_fk"):
                continue
            fk_fields[table_name] = config._fk
        return fk_fields

    @classmethod
    def fields_as_fks(cls) -> DbForeignKeyUsage:
        """Returns mapping of tables that have fields that other tables use as fks.

        `{ <table>:{<field>:[(<table using FK>,<field using fk>)]} }`
        """
        pks_as_fks: defaultdict = defaultdict(lambda: defaultdict(list))
        for t, field_fk in cls.fks().items():
            for f, fk in field_fk.items():
                fk_table, fk_field = fk
                pks_as_fks[fk_table][fk_field].append((t, f))
        return {k: dict(v) for k, v in pks_as_fks.items()}

    def _set_table_or_none(self, table_name: str) -> Optional[pd.DataFrame]:
        if table_name not in self.table_names or table_name not in self.__dict__:
            return None
        return self.__dict__[table_name]

    def check_referenced_fks(self, table_name: str, table: Optional[pd.DataFrame] = None) -> bool:
        """True if this table has all the values other tables reference from it.

        For example, if routes.route_id is referenced in the trips table, a route_id deleted from
        routes shouldn't still be in trips.route_id.
        """
        if table is None:
            table = self.get_table(table_name)
        all_valid = True
        for pk_field, refs in self.fields_as_fks().get(table_name, {}).items():
            if pk_field not in table:
                continue
            for ref_table_name, ref_field in refs:
                ref_table = self._set_table_or_none(ref_table_name)
                if ref_table is None or ref_field not in ref_table:
                    continue
                valid, _missing = fk_in_pk(table[pk_field], ref_table[ref_field])
                all_valid = all_valid and valid
                if _missing:
                    WranglerLogger.warning(
                        f"Values missing from {table_name}.{pk_field} that are referenced by "
                        f"{ref_table_name}.{ref_field}: {_missing}"
                    )
        return all_valid

    def check_table_fks(
        self, table_name: str, table: Optional[pd.DataFrame] = None, raise_error: bool = True
    ) -> bool:
        """Return True if the foreign key fields in table have valid references.

        Tables that reference a table which isn't set yet are skipped.
        """
        fks = self.fks()
        if table_name not in fks:
            return True
        if table is None:
            table = self.get_table(table_name)
        all_valid = True
        for field, fk in fks[table_name].items():
            pkref_table_name, pkref_field = fk
            if field not in table:
                continue
            pkref_table = self._set_table_or_none(pkref_table_name)
            if pkref_table is None:
                WranglerLogger.debug(
                    f"PK table {pkref_table_name} for FK {table_name}.{field} not set - "
                    "skipping validation."
                )
                continue
            valid, missing = fk_in_pk(pkref_table[pkref_field], table[field])
            if missing:
                WranglerLogger.warning(
                    f"{pkref_table_name}.{pkref_field} missing values used as FK in "
                    f"{table_name}.{field}: {missing}"
                )
            all_valid = valid and all_valid

        if not all_valid and raise_error:
            msg = f"FK fields/ values referenced in {table_name} missing."
            WranglerLogger.error(msg)
            raise ForeignKeyValueError(msg)
        return all_valid

    def check_fks(self) -> bool:
        """Check all FKs in set of tables."""
        all_valid = True
        for table_name in self.table_names:
            valid = self.check_table_fks(table_name, raise_error=False)
            all_valid = valid and all_valid
        return all_valid

    @property
    def tables(self) -> list[pd.DataFrame]:
        """List of the tables in `table_names` order."""
        return [self.get_table(t) for t in self.table_names]

    @property
    def tables_dict(self) -> dict[str, pd.DataFrame]:
        """Mapping of `<table_name>: <table>`."""
        return {t: self.get_table(t) for t in self.table_names}

    @property
    def describe_df(self) -> pd.DataFrame:
        """Number of records in each table."""
        num_records = [len(self.get_table(t)) for t in self.table_names]
        return pd.DataFrame({"Table": self.table_names, "Records": num_records})

    def get_table(self, table_name: str) -> pd.DataFrame:
        """Get table by name."""
        if table_name not in self.table_names:
            msg = f"{table_name} table not in db."
            raise ValueError(msg)
        if table_name not in self.__dict__:
            msg = f"Required table not set yet: {table_name}"
            raise RequiredTableError(msg)
        return self.__dict__[table_name]

    def table_names_with_field(self, field: str) -> list[str]:
        """Returns tables in the class instance which contain the field."""
        return [t for t in self.table_names if field in self.get_table(t).columns]

    @property
    def hash(self) -> str:
        """A hash representing the contents of the tables in self.table_names."""
        _table_hashes = [self.get_table(t).df_hash() for t in self.table_names]
        _value = str.encode("-".join(_table_hashes))

        _hash = hashlib.sha256(_value).hexdigest()
        return _hash

    def __eq__(self, other):
        """Override the default Equals behavior."""
        if isinstance(other, self.__class__):
            return self.hash == other.hash
        return False

    def __deepcopy__(self, memo):
        """Custom implementation of __deepcopy__ method.

        Dataframes are copied without being re-validated.
        """
        new_instance = self.__class__.__new__(self.__class__)

        for attr_name, attr_value in self.__dict__.items():
            if isinstance(attr_value, (pd.DataFrame, list, dict)):
                object.__setattr__(new_instance, attr_name, copy.deepcopy(attr_value, memo))
            else:
                object.__setattr__(new_instance, attr_name, attr_value)

        return new_instance

    def deepcopy(self):
        """Convenience method to exceute deep copy of instance."""
        return copy.deepcopy(self)
