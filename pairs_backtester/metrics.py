"""
Performance Metrics
-------------------
Summary statistics over a trade log in hedged spread units
(PnL, win/loss counts, drawdown, SQN, holding time).
Includes a grouping helper for slicing by side or exit reason.
"""

from __future__ import annotations

from typing import Any

import pandas as pd
import numpy as np

from .ledger import ExitReason


def _realized_pnl(trades: pd.DataFrame | None) -> pd.Series:
    """Extracts realized_pnl as a float Series, handling missing values."""
    if trades is None or len(trades) == 0 or "realized_pnl" not in trades.columns:
        return pd.Series(dtype=float)
    return pd.to_numeric(trades["realized_pnl"], errors="coerce").fillna(0.0)


def equity_curve(trades: pd.DataFrame) -> pd.Series:
    """Cumulative realized PnL, in trade order."""
    return _realized_pnl(trades).cumsum()


def max_drawdown(curve: pd.Series | None) -> float:
    """Largest peak-to-trough drop of a cumulative PnL curve starting at 0."""
    if curve is None or len(curve) == 0:
        return 0.0

    values = pd.to_numeric(curve, errors="coerce").fillna(0.0).to_numpy()
    values = np.concatenate(([0.0], values))

    roll_max = np.maximum.accumulate(values)
    dd = roll_max - values
    return float(dd.max()) if dd.size else 0.0


def sqn(trades: pd.DataFrame) -> float:
    """System Quality Number on per-trade PnL."""
    r = _realized_pnl(trades)
    if len(r) < 2 or r.std(ddof=0) == 0:
        return 0.0
    return float(r.mean() / r.std(ddof=0) * (len(r) ** 0.5))


def _exit_counts(trades: pd.DataFrame | None) -> dict[str, int]:
    counts = {f"exits_{r.value}": 0 for r in ExitReason}
    if trades is None or len(trades) == 0 or "exit_reason" not in trades.columns:
        return counts
    for reason, n in trades["exit_reason"].astype(str).value_counts().items():
        key = f"exits_{reason}"
        if key in counts:
            counts[key] = int(n)
    return counts


def summary(trades: pd.DataFrame) -> dict[str, Any]:
    """Run summary: counts, PnL, drawdown and exit breakdown."""
    r = _realized_pnl(trades)
    n = int(len(r))

    if n == 0:
        return {
            "trade_count": 0,
            "win_count": 0,
            "loss_count": 0,
            "total_pnl": 0.0,
            "win_rate": 0.0,
            "avg_pnl": 0.0,
            "avg_win": 0.0,
            "avg_loss": 0.0,
            "max_drawdown": 0.0,
            "sqn": 0.0,
            "avg_holding": 0.0,
            **_exit_counts(trades),
        }

    # a flat (zero) trade counts as a win
    wins = r[r >= 0]
    losses = r[r < 0]

    holding = 0.0
    if "holding" in trades.columns:
        holding = float(pd.to_numeric(trades["holding"], errors="coerce").mean())
    elif {"entry_time", "exit_time"}.issubset(trades.columns):
        holding = float((trades["exit_time"] - trades["entry_time"]).mean())

    return {
        "trade_count": n,
        "win_count": int(len(wins)),
        "loss_count": int(len(losses)),
        "total_pnl": float(r.sum()),
        "win_rate": float(len(wins) / n),
        "avg_pnl": float(r.mean()),
        "avg_win": float(wins.mean()) if len(wins) else 0.0,
        "avg_loss": float(losses.mean()) if len(losses) else 0.0,
        "max_drawdown": max_drawdown(equity_curve(trades)),
        "sqn": sqn(trades),
        "avg_holding": holding,
        **_exit_counts(trades),
    }


def grouped_summary(trades: pd.DataFrame, by: str) -> pd.DataFrame:
    """Computes summary statistics grouped by a specific column."""
    if trades is None or len(trades) == 0:
        return pd.DataFrame()

    if by not in trades.columns:
        raise ValueError(f"Grouping column '{by}' not present")

    rows: list[dict[str, Any]] = []
    for key, g in trades.groupby(by, dropna=False):
        s = summary(g)
        s[by] = str(key)
        rows.append(s)

    out = pd.DataFrame(rows).set_index(by)
    return out.sort_index()
