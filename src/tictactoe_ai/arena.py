"""
Arena: self-play between opponent tiers and export of the results.

Every game starts from the empty board with X to move. Each side asks the
opponent module for its move at its own tier; the evaluator decides when
the game ends. Results are written as CSV (and optionally Parquet) with a
manifest recording arguments, provenance and summary statistics.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import random
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .game_basics import EMPTY, O, X, apply_move, mark_symbol, opposite, serialize_board
from .opponent import NO_MOVE, Difficulty, select_move
from .outcome import evaluate
from .paths import get_git_commit, get_git_is_dirty, results_dir
from .tracking import log_artifact, log_metrics, log_params

ARENA_VERSION = "1.0.0"
FORMATS = ("csv", "parquet", "both")
GAMES_CSV = "arena_games.csv"
GAMES_PARQUET = "arena_games.parquet"


@dataclass
class ArenaArgs:
    out: Optional[Path] = None
    games: int = 100
    x_tier: Difficulty = Difficulty.MEDIUM
    o_tier: Difficulty = Difficulty.EASY
    seed: int = 0
    format: str = "csv"  # one of: "csv", "parquet", "both"
    verbose: bool = False
    cli_argv: Optional[List[str]] = None

    def __post_init__(self) -> None:
        if self.out is None:
            self.out = results_dir() / "arena"
        self.x_tier = Difficulty(self.x_tier)
        self.o_tier = Difficulty(self.o_tier)


def move_frequencies(
    board: Sequence[Any],
    difficulty: Difficulty,
    self_mark: Any,
    opponent_mark: Any,
    samples: int,
    rng: Optional[random.Random] = None,
) -> np.ndarray:
    """Empirical distribution of the selected cell over ``samples`` calls."""
    if samples < 1:
        raise ValueError(f"samples must be positive, got {samples}")
    rng = rng if rng is not None else random.Random()
    counts = np.zeros(9, dtype=np.int64)
    for _ in range(samples):
        move = select_move(board, difficulty, self_mark, opponent_mark, rng)
        if move == NO_MOVE:
            break
        counts[move] += 1
    total = counts.sum()
    return counts / total if total > 0 else counts.astype(float)


def play_game(x_tier: Difficulty, o_tier: Difficulty, rng: random.Random) -> Dict[str, Any]:
    tiers = {X: Difficulty(x_tier), O: Difficulty(o_tier)}
    board: List[int] = [EMPTY] * 9
    to_move = X
    moves: List[int] = []
    outcome = evaluate(board)
    while not outcome.is_terminal:
        move = select_move(board, tiers[to_move], to_move, opposite(to_move), rng)
        board = apply_move(board, move, to_move)
        moves.append(move)
        outcome = evaluate(board)
        to_move = opposite(to_move)
    return {
        "x_tier": tiers[X].value,
        "o_tier": tiers[O].value,
        "moves": " ".join(map(str, moves)),
        "plies": len(moves),
        "winner": "draw" if outcome.is_draw else mark_symbol(outcome.winner),
        "winning_line": " ".join(map(str, outcome.line)) if outcome.line else "",
        "final_board": serialize_board(board),
    }


def ci95(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    return float(1.96 * values.std() / np.sqrt(values.size))


def summarize(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    n = len(rows)
    winners = np.array([r["winner"] for r in rows])
    plies = np.array([r["plies"] for r in rows], dtype=float)
    openings = np.array([int(r["moves"].split()[0]) for r in rows], dtype=np.int64)
    x_wins = int(np.sum(winners == "X"))
    o_wins = int(np.sum(winners == "O"))
    draws = int(np.sum(winners == "draw"))
    return {
        "games": n,
        "x_wins": x_wins,
        "o_wins": o_wins,
        "draws": draws,
        "x_win_rate": x_wins / n,
        "o_win_rate": o_wins / n,
        "draw_rate": draws / n,
        "mean_plies": float(plies.mean()),
        "mean_plies_ci95_half": ci95(plies),
        "opening_frequencies": (np.bincount(openings, minlength=9) / n).round(6).tolist(),
    }


def _have_parquet_deps() -> bool:
    return (
        importlib.util.find_spec("pandas") is not None
        and importlib.util.find_spec("pyarrow") is not None
    )


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is None:
            continue
        ver = getattr(__import__(pkg), "__version__", None)
        if ver:
            versions[pkg] = ver
    return versions


def run_arena(args: ArenaArgs) -> Path:
    if args.games < 1:
        raise ValueError(f"games must be positive, got {args.games}")
    fmt = (args.format or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    parquet_ok = _have_parquet_deps()
    parquet_msg = (
        "Parquet dependencies not available (install pandas and pyarrow). "
        "Use pip install .[parquet] to enable parquet support."
    )
    if fmt == "parquet" and not parquet_ok:
        raise RuntimeError(parquet_msg)

    logging.info(
        "Playing %d games: X=%s vs O=%s (seed=%d)",
        args.games, args.x_tier.value, args.o_tier.value, args.seed,
    )
    rng = random.Random(args.seed)
    rows: List[Dict[str, Any]] = []
    for g in range(args.games):
        row = {"game": g}
        row.update(play_game(args.x_tier, args.o_tier, rng))
        rows.append(row)
    summary = summarize(rows)
    logging.info(
        "x_wins=%d o_wins=%d draws=%d mean_plies=%.2f",
        summary["x_wins"], summary["o_wins"], summary["draws"], summary["mean_plies"],
    )

    args.out.mkdir(parents=True, exist_ok=True)
    csv_path = args.out / GAMES_CSV
    parquet_path = args.out / GAMES_PARQUET
    wrote_csv = False
    wrote_parquet = False

    if fmt in {"csv", "both"}:
        with csv_path.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            w.writeheader()
            w.writerows(rows)
        wrote_csv = True
        logging.info("Wrote CSV: %s (%d rows)", csv_path, len(rows))

    if fmt in {"parquet", "both"}:
        if parquet_ok:
            import pandas as pd  # type: ignore

            pd.DataFrame(rows).to_parquet(parquet_path)
            wrote_parquet = True
            logging.info("Wrote Parquet: %s", parquet_path)
        else:
            logging.warning(
                "%s Proceeding with CSV only; manifest will record parquet_written=false.",
                parquet_msg,
            )

    files: Dict[str, Optional[str]] = {
        "games_csv": str(csv_path) if wrote_csv else None,
        "games_parquet": str(parquet_path) if wrote_parquet else None,
    }
    checksums = {label: _sha256_file(Path(p)) for label, p in files.items() if p is not None}
    manifest = {
        "arena_version": ARENA_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {
            "games": args.games,
            "x_tier": args.x_tier.value,
            "o_tier": args.o_tier.value,
            "seed": args.seed,
            "format": fmt,
        },
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "cli_argv": args.cli_argv,
        "row_counts": {"games": len(rows)},
        "summary": summary,
        "files": files,
        "checksums": checksums,
        "parquet_written": wrote_parquet,
    }
    manifest_path = args.out / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json")

    log_params(manifest["args"])
    log_metrics({k: float(v) for k, v in summary.items() if isinstance(v, (int, float))})
    log_artifact(manifest_path)
    if wrote_csv:
        log_artifact(csv_path)
    if wrote_parquet:
        log_artifact(parquet_path)
    return args.out
