"""Module for testing the utils.io_table and utils.io_dict modules."""

import pandas as pd
import pytest

from schedule_wrangler import WranglerLogger
from schedule_wrangler.utils.io_dict import load_dict, load_merge_dict, write_dict
from schedule_wrangler.utils.io_table import FileReadError, read_table, write_table


def test_read_table_keeps_strings(request, tmp_path):
    WranglerLogger.info(f"--Starting: {request.node.name}")
    path = tmp_path / "stops.txt"
    path.write_text(
        "\ufeffstop_id, stop_code,stop_lat\n007, 0012,44.9\n010,,45.0\n", encoding="utf-8"
    )
    df = read_table(path)
    assert df.columns.tolist() == ["stop_id", "stop_code", "stop_lat"]
    assert df.stop_id.tolist() == ["007", "010"]
    assert df.stop_lat.tolist() == [44.9, 45.0]
    WranglerLogger.info(f"--Finished: {request.node.name}")


def test_read_empty_table(tmp_path):
    path = tmp_path / "shapes.txt"
    path.write_text("")
    assert read_table(path).empty


def test_read_table_errors(tmp_path):
    path = tmp_path / "trips.txt"
    path.write_text('trip_id,route_id\n"T1,R1\n')
    with pytest.raises(FileReadError):
        read_table(path)
    with pytest.raises(NotImplementedError):
        read_table(tmp_path / "trips.parquet")


def test_write_table(tmp_path):
    df = pd.DataFrame({"trip_id": ["T1"], "route_id": ["R1"]})
    path = tmp_path / "out" / "trips.txt"
    write_table(df, path)
    assert path.read_text().splitlines() == ["trip_id,route_id", "T1,R1"]
    with pytest.raises(FileExistsError):
        write_table(df, path)
    write_table(df, path, overwrite=True)


dict_suffix_cases = ["json", "yaml", "yml", "toml"]


@pytest.mark.parametrize("suffix", dict_suffix_cases)
def test_write_load_dict(suffix, tmp_path):
    data = {"rules": {"T1::S1": {"mode": "pickup"}}}
    path = tmp_path / f"data.{suffix}"
    write_dict(data, path)
    assert load_dict(path) == data


def test_load_merge_dict(tmp_path):
    write_dict({"EXPORT": {"SEGMENT_A_SUFFIX": "_a"}}, tmp_path / "a.json")
    write_dict({"EDITS": {"DEFAULT_DWELL_MINUTES": 1}}, tmp_path / "b.yaml")
    assert load_merge_dict([tmp_path / "a.json", tmp_path / "b.yaml"]) == {
        "EXPORT": {"SEGMENT_A_SUFFIX": "_a"},
        "EDITS": {"DEFAULT_DWELL_MINUTES": 1},
    }
