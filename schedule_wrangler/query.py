"""Row filter expressions for feed tables.

Two kinds of query strings are supported:

1. **Expressions** made of conditions joined with `&&` (and) and `||` (or), where `&&` binds
    tighter than `||` and there are no parentheses:

    ```
    route_id == "18" && service_id == 6 || trip_headsign ~= downtown
    ```

    A condition is `<field> <comparator> <value>` with comparators `==`, `!=`, `>`, `<`, `>=`,
    `<=`, `~=` (contains, case-insensitive) and `!~=` (does not contain). Values may be wrapped
    in single or double quotes. If both sides parse as finite numbers the comparison is numeric,
    otherwise it is a string comparison. A field missing from the record compares as `""`, and
    a blank value parses as the number 0.

2. **Free text**: any query without a comparator or logical operator matches records where any
    field contains the text, case-insensitive.

A condition which can't be parsed never matches, so it fails its own `&&` group but other
`||` groups still get evaluated.

Usage:

```python
from schedule_wrangler.query import filter_df, matches_query

matches_query({"route_id": "18", "service_id": "6"}, 'route_id == "18" && service_id == "6"')
>> True

express_trips_df = filter_df(trips_df, "trip_headsign ~= express")
# or equivalently, through the dataframe accessor
express_trips_df = trips_df.row_query("trip_headsign ~= express")
```
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pandas as pd

from .logger import WranglerLogger

COMPARATORS = ["==", "!=", ">=", "<=", ">", "<", "~=", "!~="]

ADVANCED_QUERY_RE = re.compile(r"(&&|\|\||==|!=|>=|<=|>|<|~=|!~=)")
CONDITION_RE = re.compile(r"^\s*([a-zA-Z0-9_]+)\s*(==|!=|>=|<=|>|<|~=|!~=)\s*(.+?)\s*$")


@dataclass(frozen=True)
class Condition:
    """A single `<field> <op> <value>` clause of a query."""

    field: str
    op: str
    value: str


QueryGroups = list[list[Optional[Condition]]]


def is_advanced_query(query: str) -> bool:
    """True if the query contains any comparator or logical operator."""
    return bool(ADVANCED_QUERY_RE.search(query))


def _unquote(token: str) -> str:
    token = token.strip()
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):  # noqa: PLR2004
        return token[1:-1]
    return token


def parse_condition(raw: str) -> Optional[Condition]:
    """Parse one condition, returning None if it doesn't fit `<field> <op> <value>`."""
    match = CONDITION_RE.match(raw)
    if not match:
        return None
    field, op, rhs = match.groups()
    return Condition(field=field, op=op, value=_unquote(rhs))


def parse_query(query: str) -> QueryGroups:
    """Split a query into OR groups of AND-ed conditions.

    Unparseable conditions are kept as None so that they fail their group.
    """
    return [[parse_condition(raw) for raw in part.split("&&")] for part in query.split("||")]


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if value is pd.NA or value is pd.NaT:
        return ""
    return str(value)


def _as_number(value: str) -> Optional[float]:
    """Finite number a string parses as. Blank strings are 0."""
    value = value.strip()
    if not value:
        return 0.0
    if "_" in value:
        return None
    try:
        num = float(value)
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def compare(op: str, left: Any, right: Any) -> bool:
    """Evaluate `left <op> right`.

    Numeric when both sides parse as finite numbers, string otherwise. `~=` and `!~=` are
    always case-insensitive containment of right within left. Unknown operators are False.
    """
    lstr = _as_str(left)
    rstr = _as_str(right)

    if op == "~=":
        return rstr.lower() in lstr.lower()
    if op == "!~=":
        return rstr.lower() not in lstr.lower()

    lnum = _as_number(lstr)
    rnum = _as_number(rstr)
    if lnum is not None and rnum is not None:
        lval, rval = lnum, rnum
    else:
        lval, rval = lstr, rstr

    if op == "==":
        return lval == rval
    if op == "!=":
        return lval != rval
    if op == ">":
        return lval > rval
    if op == "<":
        return lval < rval
    if op == ">=":
        return lval >= rval
    if op == "<=":
        return lval <= rval
    return False


def _matches_groups(record: Mapping[str, Any], groups: QueryGroups) -> bool:
    for group in groups:
        if all(
            cond is not None and compare(cond.op, record.get(cond.field), cond.value)
            for cond in group
        ):
            return True
    return False


def _matches_free_text(record: Mapping[str, Any], text: str) -> bool:
    text = text.lower()
    return any(text in _as_str(v).lower() for v in record.values())


def matches_query(record: Mapping[str, Any], query: Optional[str]) -> bool:
    """True if the record satisfies the query. A blank query matches every record."""
    query = (query or "").strip()
    if not query:
        return True
    if is_advanced_query(query):
        return _matches_groups(record, parse_query(query))
    return _matches_free_text(record, query)


def query_mask(df: pd.DataFrame, query: Optional[str]) -> pd.Series:
    """Boolean series, aligned to df's index, of rows which satisfy the query."""
    query = (query or "").strip()
    if not query:
        return pd.Series(True, index=df.index)
    if is_advanced_query(query):
        groups = parse_query(query)
        flags = [_matches_groups(r, groups) for r in df.to_dict("records")]
    else:
        flags = [_matches_free_text(r, query) for r in df.to_dict("records")]
    return pd.Series(flags, index=df.index, dtype=bool)


def filter_df(df: pd.DataFrame, query: Optional[str]) -> pd.DataFrame:
    """Rows of df which satisfy the query."""
    mask = query_mask(df, query)
    WranglerLogger.debug(f"Query `{query}` matched {int(mask.sum())}/{len(df)} records.")
    return df.loc[mask]
