"""
Reproducibility Helpers
-----------------------
Hashing, git versioning, environment capture and stable serialization,
so a run can be tied back to its code, config and input observations.
"""

from __future__ import annotations

import hashlib
import json
import os
import platform
import subprocess
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, cast

import numpy as np
import pandas as pd


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def stable_json_dumps(obj: Any) -> str:
    """Sorted, compact JSON for hashing and comparison."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def sha256_file(path: str | Path, *, chunk_size: int = 1024 * 1024) -> str:
    """SHA256 of a file, read in chunks."""
    h = hashlib.sha256()
    with Path(path).open("rb") as f:
        while True:
            b = f.read(chunk_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def frame_fingerprint(df: pd.DataFrame) -> str:
    """SHA256 over the row hashes of a DataFrame (values and index)."""
    row_hashes = pd.util.hash_pandas_object(df, index=True).to_numpy()
    return hashlib.sha256(row_hashes.tobytes()).hexdigest()


def _git(*args: str) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def try_git_sha() -> Optional[str]:
    return _git("rev-parse", "HEAD")


def try_git_describe() -> Optional[str]:
    return _git("describe", "--tags", "--always")


def env_info() -> Dict[str, Any]:
    """Interpreter and library versions relevant to numeric reproducibility."""
    return {
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "executable": sys.executable,
        "cwd": os.getcwd(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
    }


def dataclass_to_dict(dc: Any) -> Dict[str, Any]:
    if not is_dataclass(dc):
        raise TypeError("dataclass_to_dict expected a dataclass instance")
    return asdict(cast(Any, dc))
