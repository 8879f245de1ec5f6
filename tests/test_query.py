"""Tests for the table query language."""

import pandas as pd
import pytest

from schedule_wrangler.logger import WranglerLogger
from schedule_wrangler.query import (
    compare,
    filter_df,
    is_advanced_query,
    matches_query,
    parse_condition,
)

RECORD = {
    "route_id": "R10",
    "route_short_name": "Express",
    "route_type": 3,
    "route_color": None,
}

matches_query_cases = [
    # Test case format: (query, expected_match)
    ("", True),
    ("   ", True),
    ("express", True),
    ("r10", True),
    ("subway", False),
    ("route_type == 3", True),
    ("route_type == 3.0", True),
    ("route_type > 2 && route_type < 4", True),
    ("route_type >= 4", False),
    ("route_short_name ~= EXP", True),
    ("route_short_name !~= exp", False),
    ("route_id == 'R10'", True),
    ('route_id == "R10"', True),
    ("route_id != R10", False),
    ("route_type == 4 || route_short_name ~= press", True),
    ("route_type == 4 || route_short_name ~= local", False),
    ("missing_field == ''", True),
    ("route_color == ''", True),
    ("fare == 0", True),
    ("fare >= 0", True),
    ("fare != 0", False),
    ("route_color < 1", True),
    ("route_type == 3 && garbage", False),
    ("garbage || route_type == 3", True),
]


@pytest.mark.parametrize("case", matches_query_cases)
def test_matches_query(request, case):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    query, expected = case
    assert matches_query(RECORD, query) == expected
    WranglerLogger.info(f"--Finished: {request.node.name}")


compare_cases = [
    # Test case format: (op, left, right, expected)
    ("<", "9", "10", True),
    ("<", "abc", "abd", True),
    ("<", "9", "abc", True),
    ("==", "", "0", True),
    ("<", "  ", "1", True),
    ("==", "1_000", "1000", False),
    ("==", "inf", "inf", True),
    (">", "inf", "1", True),
    ("~=", "Downtown", "TOWN", True),
    ("!~=", None, "x", True),
    ("=~", "a", "a", False),
]


@pytest.mark.parametrize("case", compare_cases)
def test_compare(case):
    op, left, right, expected = case
    assert compare(op, left, right) == expected


def test_is_advanced_query():
    assert is_advanced_query("stop_sequence > 1")
    assert is_advanced_query("a || b")
    assert not is_advanced_query("main street")


def test_parse_condition():
    cond = parse_condition(" stop_id == 'S 1' ")
    assert (cond.field, cond.op, cond.value) == ("stop_id", "==", "S 1")
    assert parse_condition("stop id == S1") is None


def test_filter_df(request):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    df = pd.DataFrame(
        {
            "stop_id": ["S1", "S2", "S3"],
            "stop_sequence": [1, 2, 10],
        },
        index=[5, 6, 7],
    )
    result = filter_df(df, "stop_sequence >= 2")
    assert result.index.tolist() == [6, 7]
    assert filter_df(df, "").equals(df)
    assert df.row_query("s3").stop_id.tolist() == ["S3"]
    WranglerLogger.info(f"--Finished: {request.node.name}")
