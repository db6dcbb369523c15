"""
Pairs Backtester CLI

Glue layer: config -> pair generator -> engine -> summary/report.
"""

from __future__ import annotations

import argparse
import json
import logging

from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from .config import load_config
from .engine import PairsResult, run_pairs
from .generator import generate_from_config
from .ledger import format_trade
from .metrics import grouped_summary, summary as metrics_summary
from .run_meta import build_run_meta, write_run_meta

logger = logging.getLogger(__name__)


# -----------------------------
# Helpers
# -----------------------------
def _now_run_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def _json_default(x: Any) -> Any:
    if is_dataclass(x) and not isinstance(x, type):
        return asdict(x)
    if hasattr(x, "__dict__"):
        return dict(x.__dict__)
    return str(x)


def _write_json(path: Path, obj: Any) -> None:
    path.write_text(json.dumps(obj, indent=2, default=_json_default))


def _print_compact_json(obj: Any) -> None:
    print(json.dumps(obj, default=_json_default, separators=(",", ":")))


def _print_last_trades(result: PairsResult, n: int) -> None:
    last = result.ledger.last(n)
    if not last:
        return
    print(f"Last {len(last)} trades:")
    for tr in last:
        print(f" - {format_trade(tr)}")


def _write_artifacts(
    root: Path, result: PairsResult, run_summary: dict[str, Any]
) -> None:
    root.mkdir(parents=True, exist_ok=True)
    trades = result.trades_frame()

    _write_json(root / "summary.json", run_summary)
    trades.to_csv(root / "trades.csv", index=False)
    trades.to_parquet(root / "trades.parquet", index=False)

    by_reason = grouped_summary(trades, "exit_reason")
    by_reason.to_csv(root / "by_exit_reason.csv", index=True)


# -----------------------------
# Commands
# -----------------------------
def cmd_backtest(
    config_path: str,
    *,
    seed: int | None = None,
    out_dir: str | None = None,
    run_id: str | None = None,
    last_n: int | None = None,
    argv: list[str] | None = None,
) -> dict[str, Any]:
    cfg = load_config(config_path)
    if seed is not None:
        cfg.generator.seed = int(seed)

    observations = generate_from_config(cfg.generator)
    result = run_pairs(observations, cfg.strategy)

    run_summary = metrics_summary(result.trades_frame())

    run_id = run_id or _now_run_id()
    out: dict[str, Any] = {"run_id": run_id, **run_summary}

    if out_dir is not None:
        root = Path(out_dir) / run_id
        _write_artifacts(root, result, run_summary)

        meta = build_run_meta(
            cmd="backtest",
            argv=argv or [],
            run_id=run_id,
            outputs_dir=root,
            config_path=config_path,
            config_obj=cfg,
            observations=observations,
            seed=cfg.generator.seed,
        )
        write_run_meta(root, meta)
        out["artifacts_dir"] = str(root)
        logger.info("artifacts written to %s", root)

    _print_compact_json(out)
    _print_last_trades(result, cfg.report.last_n if last_n is None else last_n)
    return out


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Pairs trading backtester")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # ---------------- backtest ----------------
    p_bt = sub.add_parser(
        "backtest", help="Generate a synthetic pair and run the pairs strategy"
    )
    p_bt.add_argument("--config", required=True)
    p_bt.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Overrides generator.seed from the config.",
    )
    p_bt.add_argument(
        "--out-dir",
        default=None,
        help="Write summary/trades/run_meta under <out-dir>/<run-id>.",
    )
    p_bt.add_argument("--run-id", default=None)
    p_bt.add_argument(
        "--last-n",
        type=int,
        default=None,
        help="Number of trailing trades to print (default: report.last_n).",
    )

    args = p.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    argv_list = list(argv) if argv is not None else []

    if args.cmd == "backtest":
        cmd_backtest(
            args.config,
            seed=args.seed,
            out_dir=args.out_dir,
            run_id=args.run_id,
            last_n=args.last_n,
            argv=argv_list,
        )
        return


if __name__ == "__main__":
    main()
