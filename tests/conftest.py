"""
Pytest Fixtures
---------------
Shared resources for testing.
- scenario_pairs: the 4000-step cointegrated pair with a noise regime break.
- scenario_cfg / scenario_result: default strategy and its run on scenario_pairs.
- small_pairs: a short seeded pair for fast perturbation tests.
"""

from __future__ import annotations
from pathlib import Path
import pandas as pd
import pytest

from pairs_backtester.config import StrategyCfg
from pairs_backtester.engine import run_pairs
from pairs_backtester.generator import generate_pairs, make_rng

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def base_config_path() -> Path:
    return REPO_ROOT / "configs" / "base.yaml"


@pytest.fixture(scope="session")
def scenario_pairs() -> pd.DataFrame:
    return generate_pairs(
        4000,
        rng=make_rng(42),
        beta=1.25,
        x0=100.0,
        noise_sigma_low=0.5,
        noise_sigma_high=1.5,
        break_at=2000,
    )


@pytest.fixture(scope="session")
def scenario_cfg() -> StrategyCfg:
    return StrategyCfg(
        beta_window=200, z_window=200, z_entry=2.0, z_exit=0.5, max_hold=400
    )


@pytest.fixture(scope="session")
def scenario_result(scenario_pairs, scenario_cfg):
    return run_pairs(scenario_pairs, scenario_cfg)


@pytest.fixture
def small_pairs() -> pd.DataFrame:
    return generate_pairs(400, rng=make_rng(7), break_at=200)


@pytest.fixture
def small_cfg() -> StrategyCfg:
    return StrategyCfg(beta_window=40, z_window=30, z_entry=1.5, z_exit=0.3, max_hold=60)


@pytest.fixture
def small_yaml(tmp_path: Path) -> Path:
    p = tmp_path / "small.yaml"
    p.write_text(
        """
name: small
generator:
  n_obs: 600
  seed: 11
strategy:
  beta_window: 60
  z_window: 60
  z_entry: 1.5
  z_exit: 0.3
  max_hold: 80
report:
  last_n: 3
""",
        encoding="utf-8",
    )
    return p
