"""
Run Metadata
------------
Captures execution provenance (git SHA, config hash, seed, observation
fingerprint, CLI args) and writes it next to the run's report artifacts.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from pairs_backtester.repro import (
    dataclass_to_dict,
    env_info,
    frame_fingerprint,
    sha256_file,
    sha256_text,
    stable_json_dumps,
    try_git_describe,
    try_git_sha,
    utc_now_iso,
)


def build_run_meta(
    *,
    cmd: str,
    argv: list[str],
    run_id: str,
    outputs_dir: str | Path | None = None,
    config_path: Optional[str] = None,
    config_obj: Optional[Any] = None,
    observations: Optional[pd.DataFrame] = None,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Constructs a metadata dictionary for the current execution context."""
    meta: Dict[str, Any] = {
        "cmd": cmd,
        "run_id": run_id,
        "argv": argv,
        "outputs_dir": str(outputs_dir) if outputs_dir is not None else None,
        "timestamp_utc": utc_now_iso(),
        "git_sha": try_git_sha(),
        "git_describe": try_git_describe(),
        "seed": seed,
        "env": env_info(),
    }

    if config_path:
        meta["config_path"] = config_path
        meta["config_sha256"] = sha256_file(config_path)

    if config_obj is not None:
        cfg_dict = dataclass_to_dict(config_obj)
        meta["config_dump"] = cfg_dict
        meta["config_dump_sha256"] = sha256_text(stable_json_dumps(cfg_dict))

    if observations is not None:
        meta["n_observations"] = int(len(observations))
        meta["observations_sha256"] = frame_fingerprint(observations)

    return meta


def write_run_meta(outputs_dir: str | Path, meta: Dict[str, Any]) -> Path:
    """Writes run_meta.json into the output directory."""
    out_dir = Path(outputs_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    path = out_dir / "run_meta.json"
    path.write_text(json.dumps(meta, indent=2), encoding="utf-8")
    return path
