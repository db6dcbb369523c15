"""
Tests for pairs_backtester.run_meta
-----------------------------------
Coverage:
- Config hashing and dump.
- Observation fingerprint (provenance of generated data).
- run_meta.json writing.
"""

import json
from pathlib import Path

from pairs_backtester.config import Config
from pairs_backtester.generator import generate_pairs, make_rng
from pairs_backtester.repro import frame_fingerprint, sha256_file
from pairs_backtester.run_meta import build_run_meta, write_run_meta


def test_run_meta_hashes_config(base_config_path: Path) -> None:
    cfg = Config()
    meta = build_run_meta(
        cmd="pytest",
        argv=["backtest"],
        run_id="r1",
        config_path=str(base_config_path),
        config_obj=cfg,
        seed=cfg.generator.seed,
    )
    assert meta["config_sha256"] == sha256_file(base_config_path)
    assert meta["config_dump"]["strategy"]["beta_window"] == 200
    assert len(meta["config_dump_sha256"]) == 64
    assert meta["seed"] == 42
    assert "python" in meta["env"]


def test_observation_fingerprint_is_stable() -> None:
    a = generate_pairs(200, rng=make_rng(1))
    b = generate_pairs(200, rng=make_rng(1))
    c = generate_pairs(200, rng=make_rng(2))

    assert frame_fingerprint(a) == frame_fingerprint(b)
    assert frame_fingerprint(a) != frame_fingerprint(c)

    meta = build_run_meta(cmd="pytest", argv=[], run_id="r2", observations=a)
    assert meta["n_observations"] == 200
    assert meta["observations_sha256"] == frame_fingerprint(a)


def test_write_run_meta(tmp_path: Path) -> None:
    meta = build_run_meta(cmd="pytest", argv=[], run_id="r3", outputs_dir=tmp_path)
    path = write_run_meta(tmp_path / "nested", meta)
    assert path.name == "run_meta.json"
    assert json.loads(path.read_text(encoding="utf-8"))["run_id"] == "r3"
