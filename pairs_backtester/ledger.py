"""
Trade Ledger
------------
Append-only record of closed trades for one run, with the run-level
aggregates the reporter needs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterator

import pandas as pd


class Side(str, Enum):
    FLAT = "FLAT"
    LONG_SPREAD = "LONG_SPREAD"
    SHORT_SPREAD = "SHORT_SPREAD"

    @property
    def sign(self) -> int:
        if self is Side.LONG_SPREAD:
            return 1
        if self is Side.SHORT_SPREAD:
            return -1
        return 0


class ExitReason(str, Enum):
    Z_EXIT = "Z_EXIT"
    TIME_STOP = "TIME_STOP"
    EOD = "EOD"


TRADE_COLS = [
    "entry_time",
    "exit_time",
    "side",
    "entry_spread",
    "exit_spread",
    "entry_z",
    "exit_z",
    "holding",
    "realized_pnl",
    "exit_reason",
]


@dataclass(frozen=True)
class Trade:
    """A closed position. Created once at close, never mutated."""

    entry_time: int
    exit_time: int
    side: Side
    entry_spread: float
    exit_spread: float
    realized_pnl: float
    exit_reason: ExitReason
    entry_z: float = float("nan")
    exit_z: float = float("nan")

    @property
    def holding(self) -> int:
        return self.exit_time - self.entry_time

    @property
    def is_win(self) -> bool:
        return self.realized_pnl >= 0.0

    def as_record(self) -> dict[str, Any]:
        rec = asdict(self)
        rec["side"] = self.side.value
        rec["exit_reason"] = self.exit_reason.value
        rec["holding"] = self.holding
        return {c: rec[c] for c in TRADE_COLS}


def format_trade(tr: Trade) -> str:
    return (
        f"[{tr.entry_time} -> {tr.exit_time}] {tr.side.value} "
        f"pnl={tr.realized_pnl:.4f} reason={tr.exit_reason.value}"
    )


class TradeLedger:
    """Ordered, append-only sequence of Trade records."""

    def __init__(self) -> None:
        self._trades: list[Trade] = []

    def append(self, trade: Trade) -> None:
        if not isinstance(trade, Trade):
            raise TypeError(f"expected Trade, got {type(trade).__name__}")
        self._trades.append(trade)

    def __len__(self) -> int:
        return len(self._trades)

    def __iter__(self) -> Iterator[Trade]:
        return iter(self._trades)

    @property
    def trades(self) -> tuple[Trade, ...]:
        return tuple(self._trades)

    @property
    def total_pnl(self) -> float:
        return float(sum(t.realized_pnl for t in self._trades))

    @property
    def win_count(self) -> int:
        return sum(1 for t in self._trades if t.is_win)

    @property
    def loss_count(self) -> int:
        return len(self._trades) - self.win_count

    def last(self, n: int) -> tuple[Trade, ...]:
        if n <= 0:
            return ()
        return tuple(self._trades[-n:])

    def summary(self) -> dict[str, Any]:
        return {
            "trade_count": len(self._trades),
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "total_pnl": self.total_pnl,
        }

    def to_frame(self) -> pd.DataFrame:
        if not self._trades:
            return pd.DataFrame(columns=TRADE_COLS)
        return pd.DataFrame.from_records(
            [t.as_record() for t in self._trades], columns=TRADE_COLS
        )
