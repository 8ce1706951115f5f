from __future__ import annotations

import json
from pathlib import Path

import pytest

from py_scripts.timeetf_holdings.build_latest import main
from py_scripts.timeetf_holdings.cli import parse_args
from py_scripts.timeetf_holdings.pipeline import run_pipeline
from toolkits.timeetf.holdings import BuildSettings, JsonSnapshotStore, Mode, SnapshotKind

TODAY = {
    "FundX": [["AAA", "Alpha", "100", "5.0"], ["BBB", "Beta", "50", "2.0"]],
}
PREVIOUS = {
    "FundX": [["AAA", "Alpha", "80", "4.0"], ["CCC", "Gamma", "10", "1.0"]],
    "FundGone": [["GGG", "Gone", "10", "1.0"]],
}


@pytest.fixture()
def history(tmp_path) -> Path:
    root = tmp_path / "history"
    store = JsonSnapshotStore(root)
    for kind in SnapshotKind:
        store.write_document(kind, "2025-01-10", {"FundX": [["OLD", "Old", "1", "1.0"]]})
        store.write_document(kind, "2025-06-01", PREVIOUS)
        store.write_document(kind, "2025-06-02", TODAY)
    return root


@pytest.fixture()
def funds_config(tmp_path) -> Path:
    path = tmp_path / "funds.toml"
    path.write_text(
        'funds = ["FundX", "FundGone"]\nfund_group_a = ["FundX"]\nfund_group_b = ["FundGone"]\n',
        encoding="utf-8",
    )
    return path


def _argv(history: Path, output: Path, funds_config: Path, *extra: str) -> list[str]:
    return [
        "--history-dir",
        str(history),
        "--output-dir",
        str(output),
        "--funds-config",
        str(funds_config),
        "--now",
        "2025-06-02T08:00:00",
        *extra,
    ]


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_pipeline_writes_all_artifacts(tmp_path, history, funds_config):
    output = tmp_path / "latest"
    args = parse_args(_argv(history, output, funds_config), settings=BuildSettings(_env_file=None))

    result = run_pipeline(args)

    assert sorted(path.name for path in output.iterdir()) == [
        "holdings.json",
        "last_updated.json",
        "shares.json",
        "summaries_shares.json",
        "summaries_weight.json",
    ]
    holdings = _read(output / "holdings.json")
    assert holdings["dates"] == ["2025-06-02", "2025-06-01"]
    assert "2025-01-10" not in holdings["data"]["FundX"]

    weight = _read(output / "summaries_weight.json")
    assert weight["latestDate"] == "2025-06-02"
    assert weight["prevDate"] == "2025-06-01"
    assert weight["mode"] == "weight"
    assert weight["threshold"] == 0.5
    assert weight["fundGroupA"] == ["FundX"]
    assert weight["fundGroupB"] == ["FundGone"]
    assert weight["summaries"] == {
        "FundX": {
            "added": [["BBB", "Beta", 2.0]],
            "removed": [["CCC", "Gamma", 1.0]],
            "increased": [["AAA", "Alpha", 1.0]],
            "decreased": [],
        }
    }

    shares = _read(output / "summaries_shares.json")
    assert shares["mode"] == "shares"
    assert shares["threshold"] == 10
    assert shares["summaries"]["FundX"]["increased"] == [["AAA", "Alpha", 20]]

    metadata = _read(output / "last_updated.json")
    assert metadata == {
        "date": "2025-06-02",
        "updatedAtLocal": "2025-06-02 08:00",
        "fundCount": 2,
        "datesAvailable": ["2025-06-02", "2025-06-01"],
    }
    assert result.reports[Mode.WEIGHT] is not None


def test_pipeline_output_is_byte_identical_across_runs(tmp_path, history, funds_config):
    settings = BuildSettings(_env_file=None)
    first = tmp_path / "first"
    second = tmp_path / "second"

    run_pipeline(parse_args(_argv(history, first, funds_config), settings=settings))
    run_pipeline(parse_args(_argv(history, second, funds_config), settings=settings))

    for path in first.iterdir():
        assert path.read_bytes() == (second / path.name).read_bytes()


def test_pipeline_threshold_override_from_cli(tmp_path, history, funds_config):
    output = tmp_path / "latest"
    args = parse_args(
        _argv(history, output, funds_config, "--weight-threshold", "2.0"), settings=BuildSettings(_env_file=None)
    )

    run_pipeline(args)

    weight = _read(output / "summaries_weight.json")
    assert weight["threshold"] == 2.0
    assert weight["summaries"]["FundX"]["increased"] == []


def test_pipeline_with_single_date_skips_summaries(tmp_path, funds_config):
    history = tmp_path / "history"
    JsonSnapshotStore(history).write_document(SnapshotKind.HOLDINGS, "2025-06-02", TODAY)
    output = tmp_path / "latest"

    result = run_pipeline(parse_args(_argv(history, output, funds_config), settings=BuildSettings(_env_file=None)))

    assert sorted(path.name for path in output.iterdir()) == ["holdings.json", "last_updated.json"]
    assert result.reports == {Mode.WEIGHT: None, Mode.SHARES: None}
    assert result.windows[SnapshotKind.SHARES] is None


def test_pipeline_on_empty_history_writes_only_metadata(tmp_path, funds_config):
    output = tmp_path / "latest"

    run_pipeline(
        parse_args(_argv(tmp_path / "missing", output, funds_config), settings=BuildSettings(_env_file=None))
    )

    assert [path.name for path in output.iterdir()] == ["last_updated.json"]
    metadata = _read(output / "last_updated.json")
    assert metadata["date"] is None
    assert metadata["fundCount"] == 0
    assert metadata["datesAvailable"] == []


def test_pipeline_exports_csv_when_requested(tmp_path, history, funds_config):
    output = tmp_path / "latest"
    export = tmp_path / "csv"

    run_pipeline(
        parse_args(
            _argv(history, output, funds_config, "--export-csv-dir", str(export)),
            settings=BuildSettings(_env_file=None),
        )
    )

    assert (export / "holdings" / "FundX.csv").exists()
    assert (export / "shares" / "FundGone.csv").exists()


def test_main_returns_error_code_on_malformed_snapshot(tmp_path, funds_config):
    history = tmp_path / "history"
    (history / "holdings").mkdir(parents=True)
    (history / "holdings" / "2025-06-02.json").write_text("{broken", encoding="utf-8")

    code = main(_argv(history, tmp_path / "latest", funds_config))

    assert code == 1


def test_parse_args_rejects_bad_now(tmp_path):
    with pytest.raises(SystemExit):
        parse_args(["--now", "yesterday"], settings=BuildSettings(_env_file=None))


@pytest.mark.parametrize("value", ["Mars/Olympus", "../etc/passwd"])
def test_parse_args_rejects_unknown_timezone(value):
    with pytest.raises(SystemExit):
        parse_args(["--timezone", value], settings=BuildSettings(_env_file=None))


def test_parse_args_accepts_iana_timezone():
    args = parse_args(["--timezone", "UTC"], settings=BuildSettings(_env_file=None))

    assert args.timezone == "UTC"
