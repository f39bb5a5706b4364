#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import numpy as np

from tictactoe_ai.game_basics import EMPTY, O, X, apply_move
from tictactoe_ai.opponent import Difficulty, select_move
from tictactoe_ai.tracking import log_metrics, log_params, maybe_mlflow_run


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    arr = np.asarray(values)
    half = 1.96 * arr.std() / np.sqrt(arr.size) if arr.size > 1 else 0.0
    return float(arr.mean()), float(half)


@dataclass
class Config:
    repeats: int = 5
    tracking: str = "none"  # or "mlflow"
    log_dir: Path = Path("runs")


def time_hard(board: List[int], self_mark: int, repeats: int) -> List[float]:
    times: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        select_move(board, Difficulty.HARD, self_mark, O if self_mark == X else X)
        times.append(time.perf_counter() - t0)
    return times


def main() -> int:
    ap = argparse.ArgumentParser(description="Time the exhaustive hard-tier search")
    ap.add_argument("--repeats", type=int, default=Config.repeats)
    ap.add_argument("--tracking", choices=["none", "mlflow"], default=Config.tracking)
    ap.add_argument("--log-dir", type=Path, default=Config.log_dir)
    ns = ap.parse_args()
    cfg = Config(repeats=ns.repeats, tracking=ns.tracking, log_dir=ns.log_dir)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    cases = {
        "empty_board": ([EMPTY] * 9, X),
        "corner_reply": (apply_move([EMPTY] * 9, 0, X), O),
        "center_reply": (apply_move([EMPTY] * 9, 4, X), O),
    }
    with maybe_mlflow_run(cfg.tracking == "mlflow", run_name="benchmarks", log_dir=cfg.log_dir):
        log_params({"repeats": cfg.repeats})
        metrics = {}
        for name, (board, mark) in cases.items():
            mean, half = ci95(time_hard(board, mark, cfg.repeats))
            metrics[f"{name}_mean_s"] = mean
            metrics[f"{name}_ci95_half_s"] = half
            logging.info("%s: mean=%.4fs ± %.4fs (95%% CI, N=%d)", name, mean, half, cfg.repeats)
        log_metrics(metrics)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
