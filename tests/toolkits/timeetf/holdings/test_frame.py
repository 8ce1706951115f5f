import pandas as pd

from toolkits.timeetf.holdings import WindowedSeries
from toolkits.timeetf.holdings.frame import FRAME_COLUMNS, fund_filename, series_to_frame, write_series_csv


def _series() -> WindowedSeries:
    return WindowedSeries(
        dates=["2025-03-05", "2025-03-04"],
        data={
            "TIME 글로벌우주테크&방산액티브": {
                "2025-03-05": [["RKLB", "Rocket Lab", "1,200", "4.5"], ["CASH", "예금", "-", ""]],
                "2025-03-04": [["RKLB", "Rocket Lab", "1,000", "4.0"]],
            },
            "A/B Fund": {"2025-03-04": [["AAA", "Alpha", "10", "1.0"]]},
        },
    )


def test_series_to_frame_parses_measurements_newest_first():
    df = series_to_frame(_series(), "TIME 글로벌우주테크&방산액티브")

    assert list(df.columns) == FRAME_COLUMNS
    assert df["date"].tolist() == ["2025-03-05", "2025-03-05", "2025-03-04"]
    assert df["quantity"].iloc[0] == 1200
    assert df["weight"].iloc[2] == 4.0
    assert pd.isna(df["quantity"].iloc[1])
    assert pd.isna(df["weight"].iloc[1])


def test_series_to_frame_unknown_fund_is_empty():
    df = series_to_frame(_series(), "Unknown")

    assert df.empty
    assert list(df.columns) == FRAME_COLUMNS


def test_write_series_csv_writes_one_file_per_fund(tmp_path):
    paths = write_series_csv(_series(), tmp_path / "csv")

    assert sorted(path.name for path in paths) == sorted(
        ["TIME 글로벌우주테크&방산액티브.csv", "A_B Fund.csv"]
    )
    loaded = pd.read_csv(tmp_path / "csv" / "A_B Fund.csv")
    assert loaded["instrument_id"].tolist() == ["AAA"]
    assert fund_filename("a:b") == "a_b"
