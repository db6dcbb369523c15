"""
Spread & Normalizer
-------------------
Residual spread from a fitted relationship and its rolling z-score.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .estimator import FitResult

# variance floor; keeps z finite on a flat spread window
VAR_EPS = 1e-12


@dataclass(frozen=True)
class ZScore:
    value: float
    mean: float
    std: float


def spread_at(fit: FitResult, x: float, y: float) -> float:
    """spread = y - (a + b·x)"""
    return float(y) - fit.predict(float(x))


def rolling_zscore(spread: np.ndarray, sig: int, window: int) -> ZScore:
    """
    Z-score of spread[sig] against the population mean/std of
    spread[sig - window + 1 .. sig].
    """
    start = sig - window + 1
    if window <= 0 or start < 0:
        raise ValueError(f"z window [{start}, {sig}] is not fully available")

    w = np.asarray(spread[start : sig + 1], dtype=float)
    if not np.all(np.isfinite(w)):
        raise ValueError(f"z window [{start}, {sig}] contains undefined spread values")

    mu = float(w.mean())
    d = w - mu
    var = float(np.dot(d, d)) / w.size
    sd = float(np.sqrt(max(var, VAR_EPS)))
    return ZScore(value=(float(w[-1]) - mu) / sd, mean=mu, std=sd)
