"""
Synthetic Pair Generator
------------------------
Builds a cointegrated (x, y) pair: x follows a latent random walk and
y = beta * x + noise, with the noise level switching once at `break_at`
to stress the rolling estimator with a regime break.

All randomness flows through an explicitly passed numpy Generator.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .config import GeneratorCfg

logger = logging.getLogger(__name__)


def make_rng(seed: int | None) -> np.random.Generator:
    """Creates the seeded random state shared by one generation run."""
    return np.random.default_rng(seed)


def generate_pairs(
    n_obs: int,
    *,
    rng: np.random.Generator,
    beta: float = 1.25,
    x0: float = 100.0,
    step_sigma: float = 0.2,
    noise_sigma_low: float = 0.5,
    noise_sigma_high: float = 1.5,
    break_at: int | None = None,
) -> pd.DataFrame:
    """
    Generates `n_obs` paired observations indexed by integer time `t`.

    x_t = x_{t-1} + step_sigma * N(0, 1)   (x_{-1} = x0)
    y_t = beta * x_t + sigma_t * N(0, 1)
    sigma_t = noise_sigma_low for t < break_at, noise_sigma_high afterwards.
    """
    if n_obs < 0:
        raise ValueError("n_obs must be >= 0")
    if break_at is None:
        break_at = n_obs // 2

    # one (dx, eps) draw per step, in time order
    draws = rng.standard_normal(size=(n_obs, 2))

    x = float(x0) + np.cumsum(step_sigma * draws[:, 0])
    t = np.arange(n_obs)
    sigma = np.where(t < break_at, noise_sigma_low, noise_sigma_high)
    y = beta * x + sigma * draws[:, 1]

    logger.debug(
        "generated %d pairs (beta=%.4f, regime break at t=%d)", n_obs, beta, break_at
    )

    return pd.DataFrame(
        {"x": x.astype(float), "y": y.astype(float)},
        index=pd.RangeIndex(n_obs, name="t"),
    )


def generate_from_config(
    cfg: GeneratorCfg, *, seed: int | None = None
) -> pd.DataFrame:
    """Generates pairs from a GeneratorCfg; `seed` overrides cfg.seed."""
    rng = make_rng(cfg.seed if seed is None else seed)
    return generate_pairs(
        cfg.n_obs,
        rng=rng,
        beta=cfg.beta,
        x0=cfg.x0,
        step_sigma=cfg.step_sigma,
        noise_sigma_low=cfg.noise_sigma_low,
        noise_sigma_high=cfg.noise_sigma_high,
        break_at=cfg.break_at,
    )
