"""
Rolling Estimator
-----------------
Ordinary least squares fit of y on x over a trailing window.
The fit is recomputed from the raw window on every call; no running
sums are carried between steps.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# below this Σ(x - x̄)² the window is treated as flat in x
DEN_EPS = 1e-12


@dataclass(frozen=True)
class FitResult:
    """Intercept/slope of y ≈ a + b·x, valid for the window ending at `t_end`."""

    a: float
    b: float
    t_end: int

    def predict(self, x: float) -> float:
        return self.a + self.b * x


def rolling_ols(x: np.ndarray, y: np.ndarray, t_end: int, window: int) -> FitResult:
    """
    Fits y ≈ a + b·x over indices [t_end - window + 1, t_end] inclusive.

    Uses centered sums:
        b = Σ(x - x̄)(y - ȳ) / Σ(x - x̄)²
        a = ȳ - b·x̄
    A near-zero denominator falls back to b = 0, a = ȳ.
    """
    start = t_end - window + 1
    if window <= 0 or start < 0 or t_end >= len(x):
        raise ValueError(
            f"window [{start}, {t_end}] is not fully available (len={len(x)})"
        )

    xs = np.asarray(x[start : t_end + 1], dtype=float)
    ys = np.asarray(y[start : t_end + 1], dtype=float)

    mx = float(xs.mean())
    my = float(ys.mean())
    dx = xs - mx
    den = float(np.dot(dx, dx))

    if den > DEN_EPS:
        b = float(np.dot(dx, ys - my)) / den
    else:
        b = 0.0
    a = my - b * mx
    return FitResult(a=a, b=b, t_end=int(t_end))
