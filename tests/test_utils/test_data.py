"""Tests for /utils/data.

Run just these tests using `pytest tests/test_utils/test_data.py`
"""

import numpy as np
import pandas as pd

from schedule_wrangler.utils.data import df_to_records, fk_in_pk


def test_fk_in_pk():
    pk = pd.Series(["R1", "R2"])
    assert fk_in_pk(pk, pd.Series(["R1", "R1", "R2"])) == (True, [])
    assert fk_in_pk(pk, pd.Series(["R1", "R9"])) == (False, ["R9"])
    # unset references are ignored
    assert fk_in_pk(pk, pd.Series(["R1", None, np.nan, " "])) == (True, [])


def test_df_to_records():
    df = pd.DataFrame(
        {
            "stop_id": ["S1", "S2"],
            "stop_lat": [44.95, np.nan],
            "pickup_type": pd.array([1, None], dtype="Int64"),
        }
    )
    assert df_to_records(df) == [
        {"stop_id": "S1", "stop_lat": 44.95, "pickup_type": 1},
        {"stop_id": "S2", "stop_lat": None, "pickup_type": None},
    ]
    assert df_to_records(df.iloc[0:0]) == []
