"""
Pairs Trading Engine
--------------------
Rolling-OLS hedge ratio -> residual spread -> rolling z-score -> position
state machine (FLAT / LONG_SPREAD / SHORT_SPREAD) with hedged PnL accrual.

Closed-bar discipline: the decision at step t is built from observations
up to t-1 only. Index t is touched solely to mark the open position to market.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

import numpy as np
import pandas as pd

from .config import ConfigError, StrategyCfg
from .estimator import rolling_ols
from .ledger import ExitReason, Side, Trade, TradeLedger
from .normalizer import rolling_zscore, spread_at

logger = logging.getLogger(__name__)

_STEP_COLS = ["a", "b", "spread", "mean", "std", "z", "side"]


@dataclass(frozen=True)
class Position:
    """
    Engine state. Entry fields are meaningful only when side is not FLAT;
    accumulated_pnl keeps the last closed value until the next open.
    """

    side: Side = Side.FLAT
    entry_time: int = -1
    entry_spread: float = 0.0
    entry_z: float = float("nan")
    accumulated_pnl: float = 0.0

    @property
    def is_flat(self) -> bool:
        return self.side is Side.FLAT


@dataclass(frozen=True)
class StepInputs:
    """Everything one step needs. z/spread/b come from index t-1; dx/dy span t-1 -> t."""

    t: int
    z: float
    spread: float
    b: float
    dx: float
    dy: float


def close_position(
    pos: Position,
    *,
    exit_time: int,
    exit_spread: float,
    exit_z: float,
    reason: ExitReason,
) -> Trade:
    if pos.is_flat:
        raise ValueError("cannot close a FLAT position")
    return Trade(
        entry_time=pos.entry_time,
        exit_time=int(exit_time),
        side=pos.side,
        entry_spread=pos.entry_spread,
        exit_spread=float(exit_spread),
        realized_pnl=pos.accumulated_pnl,
        exit_reason=reason,
        entry_z=pos.entry_z,
        exit_z=float(exit_z),
    )


def step(
    pos: Position, inp: StepInputs, cfg: StrategyCfg
) -> tuple[Position, Trade | None]:
    """
    One state-machine transition, evaluated in fixed order:
      1. accrue hedged PnL s·(Δy - b·Δx) if a position is open
      2. exit on |z| < z_exit (Z_EXIT) or holding >= max_hold (TIME_STOP);
         no entry is considered on a step that held a position
      3. if flat: z > z_entry opens SHORT_SPREAD, z < -z_entry opens LONG_SPREAD
    """
    if not pos.is_flat:
        pnl = pos.accumulated_pnl + pos.side.sign * (inp.dy - inp.b * inp.dx)
        pos = replace(pos, accumulated_pnl=pnl)

        z_hit = abs(inp.z) < cfg.z_exit
        timed_out = (inp.t - pos.entry_time) >= cfg.max_hold
        if z_hit or timed_out:
            reason = ExitReason.Z_EXIT if z_hit else ExitReason.TIME_STOP
            trade = close_position(
                pos,
                exit_time=inp.t,
                exit_spread=inp.spread,
                exit_z=inp.z,
                reason=reason,
            )
            return Position(accumulated_pnl=pnl), trade
        return pos, None

    if inp.z > cfg.z_entry:
        side = Side.SHORT_SPREAD
    elif inp.z < -cfg.z_entry:
        side = Side.LONG_SPREAD
    else:
        return pos, None

    opened = Position(
        side=side,
        entry_time=inp.t,
        entry_spread=inp.spread,
        entry_z=inp.z,
        accumulated_pnl=0.0,
    )
    return opened, None


@dataclass
class PairsResult:
    trades: tuple[Trade, ...]
    ledger: TradeLedger
    steps: pd.DataFrame
    spread: np.ndarray

    def summary(self) -> dict[str, Any]:
        return self.ledger.summary()

    def trades_frame(self) -> pd.DataFrame:
        return self.ledger.to_frame()


def _observation_arrays(observations: pd.DataFrame) -> tuple[np.ndarray, np.ndarray]:
    missing = {"x", "y"} - set(observations.columns)
    if missing:
        raise ValueError(
            f"observations missing required columns {sorted(missing)}; "
            f"got columns={list(observations.columns)}"
        )
    x = pd.to_numeric(observations["x"], errors="coerce").to_numpy(dtype=float)
    y = pd.to_numeric(observations["y"], errors="coerce").to_numpy(dtype=float)
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise ValueError("observations contain non-finite x/y values")
    return x, y


def run_pairs(observations: pd.DataFrame, cfg: StrategyCfg) -> PairsResult:
    """
    Runs the strategy as a sequential fold over the observation sequence.

    Spreads are recorded from index beta_window - 1 onwards, each with the
    fit of its own trailing window. Decisions start at step
    beta_window + z_window - 1, when the z window holds only defined spreads.
    A position still open after the last step is closed with reason EOD.
    """
    cfg.validate()
    x, y = _observation_arrays(observations)
    n = len(x)
    t0 = cfg.warmup
    if n <= t0:
        raise ConfigError(
            f"Configuration Error: {n} observations cannot cover "
            f"beta_window + z_window - 1 = {t0} warm-up steps"
        )

    spread = np.full(n, np.nan, dtype=float)
    ledger = TradeLedger()
    pos = Position()
    rows: dict[int, dict[str, Any]] = {}
    last_z = float("nan")

    for t in range(cfg.beta_window, n):
        sig = t - 1
        fit = rolling_ols(x, y, sig, cfg.beta_window)
        spread[sig] = spread_at(fit, x[sig], y[sig])
        if t < t0:
            continue

        zs = rolling_zscore(spread, sig, cfg.z_window)
        last_z = zs.value
        inp = StepInputs(
            t=t,
            z=zs.value,
            spread=float(spread[sig]),
            b=fit.b,
            dx=float(x[t] - x[sig]),
            dy=float(y[t] - y[sig]),
        )

        was_flat = pos.is_flat
        pos, trade = step(pos, inp, cfg)
        if trade is not None:
            ledger.append(trade)
            logger.debug(
                "t=%d close %s pnl=%.6f reason=%s",
                t,
                trade.side.value,
                trade.realized_pnl,
                trade.exit_reason.value,
            )
        elif was_flat and not pos.is_flat:
            logger.debug("t=%d open %s z=%.4f", t, pos.side.value, inp.z)

        rows[t] = {
            "a": fit.a,
            "b": fit.b,
            "spread": inp.spread,
            "mean": zs.mean,
            "std": zs.std,
            "z": zs.value,
            "side": pos.side.value,
        }

    if not pos.is_flat:
        trade = close_position(
            pos,
            exit_time=n - 1,
            exit_spread=float(spread[n - 2]),
            exit_z=last_z,
            reason=ExitReason.EOD,
        )
        ledger.append(trade)
        logger.info(
            "end of stream: force-closed %s opened at t=%d", trade.side.value, trade.entry_time
        )

    steps = pd.DataFrame.from_dict(rows, orient="index", columns=_STEP_COLS)
    steps.index.name = "t"

    s = ledger.summary()
    logger.info(
        "pairs run: %d steps, %d trades (%d wins / %d losses), total pnl %.4f",
        len(steps),
        s["trade_count"],
        s["win_count"],
        s["loss_count"],
        s["total_pnl"],
    )

    return PairsResult(
        trades=ledger.trades, ledger=ledger, steps=steps, spread=spread
    )
