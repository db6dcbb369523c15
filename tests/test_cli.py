"""
Tests for pairs_backtester.cli
------------------------------
Coverage:
- Command: backtest (stdout summary, artifacts, seed override).
- Argument parsing via main().
"""

import json

import pandas as pd
from pairs_backtester.cli import cmd_backtest, main


def test_backtest_cmd_writes_artifacts(tmp_path, small_yaml, capsys):
    out = tmp_path / "out"
    res = cmd_backtest(str(small_yaml), out_dir=str(out), run_id="bt")

    root = out / "bt"
    for name in [
        "summary.json",
        "trades.csv",
        "trades.parquet",
        "by_exit_reason.csv",
        "run_meta.json",
    ]:
        assert (root / name).exists(), name

    summary = json.loads((root / "summary.json").read_text())
    trades = pd.read_csv(root / "trades.csv")
    assert summary["trade_count"] == len(trades)
    assert res["artifacts_dir"] == str(root)

    meta = json.loads((root / "run_meta.json").read_text())
    assert meta["cmd"] == "backtest"
    assert meta["seed"] == 11
    assert meta["n_observations"] == 600

    printed = capsys.readouterr().out.splitlines()
    assert json.loads(printed[0])["run_id"] == "bt"


def test_backtest_cmd_without_out_dir(tmp_path, small_yaml, capsys):
    res = cmd_backtest(str(small_yaml), run_id="console")
    assert "artifacts_dir" not in res
    assert not any(tmp_path.glob("**/summary.json"))
    out = capsys.readouterr().out
    assert out.startswith("{")


def test_same_seed_repeats_run(small_yaml, capsys):
    a = cmd_backtest(str(small_yaml), run_id="a")
    b = cmd_backtest(str(small_yaml), run_id="b")
    capsys.readouterr()

    strip = lambda d: {k: v for k, v in d.items() if k != "run_id"}  # noqa: E731
    assert strip(a) == strip(b)


def test_seed_override_changes_run(tmp_path, small_yaml, capsys):
    cmd_backtest(str(small_yaml), out_dir=str(tmp_path), run_id="base")
    cmd_backtest(str(small_yaml), out_dir=str(tmp_path), run_id="reseeded", seed=12345)
    capsys.readouterr()

    base = json.loads((tmp_path / "base" / "run_meta.json").read_text())
    reseeded = json.loads((tmp_path / "reseeded" / "run_meta.json").read_text())

    assert base["seed"] == 11
    assert reseeded["seed"] == 12345
    assert reseeded["config_dump"]["generator"]["seed"] == 12345
    assert reseeded["observations_sha256"] != base["observations_sha256"]


def test_main_backtest(tmp_path, small_yaml, capsys):
    main(
        [
            "--log-level",
            "INFO",
            "backtest",
            "--config",
            str(small_yaml),
            "--out-dir",
            str(tmp_path),
            "--run-id",
            "m1",
            "--last-n",
            "2",
        ]
    )
    lines = capsys.readouterr().out.splitlines()
    head = json.loads(lines[0])
    assert head["run_id"] == "m1"
    if head["trade_count"] > 0:
        assert lines[1].startswith("Last ")
        assert len(lines) == 2 + min(2, head["trade_count"])
    assert (tmp_path / "m1" / "run_meta.json").exists()
