from pathlib import Path

import pandas as pd
import pytest

pd.set_option("display.max_rows", 500)
pd.set_option("display.max_columns", 500)
pd.set_option("display.width", 50000)


@pytest.fixture(scope="session", autouse=True)
def _test_logging(test_out_dir):
    from schedule_wrangler import setup_logging

    setup_logging(
        info_log_filename=test_out_dir / "tests.info.log",
        debug_log_filename=test_out_dir / "tests.debug.log",
    )


@pytest.fixture(scope="session")
def base_dir():
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def bin_dir(base_dir):
    return base_dir / "bin"


@pytest.fixture(scope="session")
def test_dir():
    return Path(__file__).resolve().parent


@pytest.fixture(scope="session")
def test_out_dir(test_dir):
    _test_out_dir = Path(test_dir) / "out"

    if not _test_out_dir.exists():
        _test_out_dir.mkdir()

    return _test_out_dir


@pytest.fixture(scope="session", autouse=True)
def _clear_out_dir(test_out_dir):
    import shutil

    for item in test_out_dir.iterdir():
        if item.is_dir():
            shutil.rmtree(item)
        elif item.suffix != ".log":
            item.unlink()


@pytest.fixture
def small_feed_dfs():
    """Tables of a small feed.

    Route R1 has trips T1 (S1 > S2 > S3 > S4) and T2 (S1 > S3, an express of T1).
    Route R2 has trip T3 (S5 > S4). Trip T4 on R2 has no stop times yet.
    """
    agencies = pd.DataFrame(
        {
            "agency_id": ["A1"],
            "agency_name": ["Metro"],
            "agency_url": ["https://metro.example.com"],
            "agency_timezone": ["America/Chicago"],
        }
    )
    stops = pd.DataFrame(
        {
            "stop_id": ["S1", "S2", "S3", "S4", "S5"],
            "stop_name": ["Main St", "Oak Ave", "Elm St", "Downtown", "Airport"],
            "stop_lat": [44.95, 44.96, 44.97, 44.98, 44.88],
            "stop_lon": [-93.10, -93.11, -93.12, -93.13, -93.20],
        }
    )
    routes = pd.DataFrame(
        {
            "route_id": ["R1", "R2"],
            "agency_id": ["A1", "A1"],
            "route_short_name": ["1", "Express"],
            "route_long_name": ["Main Line", "Airport Express"],
            "route_type": [3, 3],
        }
    )
    calendar = pd.DataFrame(
        {
            "service_id": ["WKDY"],
            "monday": [1],
            "tuesday": [1],
            "wednesday": [1],
            "thursday": [1],
            "friday": [1],
            "saturday": [0],
            "sunday": [0],
            "start_date": ["20240101"],
            "end_date": ["20241231"],
        }
    )
    trips = pd.DataFrame(
        {
            "trip_id": ["T1", "T2", "T3", "T4"],
            "route_id": ["R1", "R1", "R2", "R2"],
            "service_id": ["WKDY", "WKDY", "WKDY", "WKDY"],
            "trip_headsign": ["Downtown", "Downtown", "Downtown", "Downtown"],
            "direction_id": [0, 0, 0, 0],
        }
    )
    stop_times = pd.DataFrame(
        {
            "trip_id": ["T1", "T1", "T1", "T1", "T2", "T2", "T3", "T3"],
            "stop_id": ["S1", "S2", "S3", "S4", "S1", "S3", "S5", "S4"],
            "stop_sequence": [1, 2, 3, 4, 1, 2, 1, 2],
            "arrival_time": [
                "08:00:00",
                "08:05:00",
                "08:10:00",
                "08:15:00",
                "07:30:00",
                "07:40:00",
                "9:00:00",
                "09:20:00",
            ],
            "departure_time": [
                "08:00:00",
                "08:06:00",
                "08:11:00",
                "08:15:00",
                "07:30:00",
                "07:40:00",
                "9:00:00",
                "09:20:00",
            ],
        }
    )
    return {
        "agencies": agencies,
        "stops": stops,
        "routes": routes,
        "calendar": calendar,
        "trips": trips,
        "stop_times": stop_times,
    }


@pytest.fixture
def small_feed(small_feed_dfs):
    from schedule_wrangler import load_feed_from_dfs

    return load_feed_from_dfs(small_feed_dfs)


@pytest.fixture
def small_shapes_df():
    return pd.DataFrame(
        {
            "shape_id": ["SH1", "SH1", "SH1"],
            "shape_pt_lat": [44.95, 44.96, 44.97],
            "shape_pt_lon": [-93.10, -93.11, -93.12],
            "shape_pt_sequence": [1, 2, 3],
        }
    )


@pytest.fixture
def small_feed_dir(small_feed_dfs, tmp_path):
    """small_feed_dfs written as a GTFS directory."""
    from schedule_wrangler.params import GTFS_FILENAMES

    feed_dir = tmp_path / "small_gtfs"
    feed_dir.mkdir()
    for table_name, df in small_feed_dfs.items():
        df.to_csv(feed_dir / f"{GTFS_FILENAMES[table_name]}.txt", index=False)
    return feed_dir
