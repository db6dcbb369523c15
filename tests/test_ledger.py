"""
Tests for pairs_backtester.ledger
---------------------------------
Coverage:
- Append-only ordering and immutability of Trade.
- Win/loss counting (zero pnl is a win).
- Last-N view and frame export.
"""

import dataclasses
import pytest
from pairs_backtester.ledger import (
    TRADE_COLS,
    ExitReason,
    Side,
    Trade,
    TradeLedger,
    format_trade,
)


def _trade(entry, exit_, pnl, side=Side.LONG_SPREAD, reason=ExitReason.Z_EXIT):
    return Trade(
        entry_time=entry,
        exit_time=exit_,
        side=side,
        entry_spread=-1.0,
        exit_spread=-0.1,
        realized_pnl=pnl,
        exit_reason=reason,
        entry_z=-2.4,
        exit_z=-0.2,
    )


def test_counts_and_total():
    ledger = TradeLedger()
    for tr in [_trade(0, 5, 1.5), _trade(6, 9, 0.0), _trade(10, 20, -0.5)]:
        ledger.append(tr)

    assert len(ledger) == 3
    assert ledger.win_count == 2
    assert ledger.loss_count == 1
    assert ledger.total_pnl == pytest.approx(1.0)
    assert ledger.summary() == {
        "trade_count": 3,
        "win_count": 2,
        "loss_count": 1,
        "total_pnl": pytest.approx(1.0),
    }


def test_last_n_keeps_order():
    ledger = TradeLedger()
    trades = [_trade(i * 10, i * 10 + 5, float(i)) for i in range(6)]
    for tr in trades:
        ledger.append(tr)

    assert ledger.last(2) == tuple(trades[-2:])
    assert ledger.last(0) == ()
    assert ledger.last(50) == tuple(trades)
    assert list(ledger) == trades


def test_trade_is_frozen():
    tr = _trade(0, 5, 1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tr.realized_pnl = 2.0  # type: ignore[misc]


def test_trades_view_is_a_copy():
    ledger = TradeLedger()
    ledger.append(_trade(0, 5, 1.0))
    view = ledger.trades
    ledger.append(_trade(6, 8, 1.0))
    assert len(view) == 1


def test_append_rejects_non_trade():
    with pytest.raises(TypeError):
        TradeLedger().append({"realized_pnl": 1.0})  # type: ignore[arg-type]


def test_to_frame():
    ledger = TradeLedger()
    assert list(ledger.to_frame().columns) == TRADE_COLS

    ledger.append(_trade(3, 10, 0.25, side=Side.SHORT_SPREAD, reason=ExitReason.TIME_STOP))
    df = ledger.to_frame()
    row = df.iloc[0]
    assert list(df.columns) == TRADE_COLS
    assert row["side"] == "SHORT_SPREAD"
    assert row["exit_reason"] == "TIME_STOP"
    assert row["holding"] == 7


def test_format_trade():
    s = format_trade(_trade(3, 10, 0.25))
    assert s == "[3 -> 10] LONG_SPREAD pnl=0.2500 reason=Z_EXIT"


def test_side_sign():
    assert Side.LONG_SPREAD.sign == 1
    assert Side.SHORT_SPREAD.sign == -1
    assert Side.FLAT.sign == 0
