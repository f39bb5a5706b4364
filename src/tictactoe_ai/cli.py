from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .arena import FORMATS, ArenaArgs, move_frequencies, run_arena
from .game_basics import (
    current_player,
    is_valid_state,
    mark_symbol,
    opening_mark,
    opposite,
    parse_board,
    parse_mark,
    render_board,
)
from .match import GameMode, Match
from .opponent import Difficulty, select_move
from .outcome import evaluate
from .tactics import fork_moves, immediate_winning_moves
from .tracking import maybe_mlflow_run

TIERS = [d.value for d in Difficulty]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-ai", description="Tic-tac-toe rules engine and AI opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed for the opponent's random choices")

    board_help = "Board string, e.g. 100020000 or XX.OO.... (0/. empty, 1/X, 2/O)"
    first_help = "Mark that opened the game (X or O; default: O if O has more marks, else X)"

    p_eval = sub.add_parser("evaluate", help="Report whether a board is won, drawn or in progress")
    p_eval.add_argument("--board", required=True, help=board_help)
    p_eval.add_argument("--first", default=None, help=first_help)

    p_move = sub.add_parser("move", help="Pick the AI move for the side to move")
    p_move.add_argument("--board", required=True, help=board_help)
    p_move.add_argument("--first", default=None, help=first_help)
    p_move.add_argument("--difficulty", choices=TIERS, default=Difficulty.HARD.value)
    p_move.add_argument(
        "--self", dest="self_mark", default=None, help="Mark the AI plays (X or O; default: side to move)"
    )
    p_move.add_argument(
        "--samples",
        type=int,
        default=0,
        help="Sample the move this many times and print selection frequencies",
    )

    p_tac = sub.add_parser("tactics", help="List immediate wins and forks for side-to-move")
    p_tac.add_argument("--board", required=True, help=board_help)
    p_tac.add_argument("--first", default=None, help=first_help)

    p_play = sub.add_parser("play", help="Play on stdin: one cell index (0-8) per line, 'r' new round, 'q' quit")
    p_play.add_argument("--difficulty", choices=TIERS, default=Difficulty.MEDIUM.value)
    p_play.add_argument("--mode", choices=[m.value for m in GameMode], default=GameMode.PVAI.value)
    p_play.add_argument(
        "--human", default="O", help="Human mark in pvai mode; the human always moves first (default: O)"
    )

    p_arena = sub.add_parser("arena", help="Self-play between tiers and export results")
    p_arena.add_argument("--games", type=int, default=100)
    p_arena.add_argument("--x-tier", choices=TIERS, default=Difficulty.MEDIUM.value)
    p_arena.add_argument("--o-tier", choices=TIERS, default=Difficulty.EASY.value)
    p_arena.add_argument("--out", type=Path, default=None, help="Output directory (default: results/arena)")
    p_arena.add_argument(
        "--format",
        choices=list(FORMATS),
        default="csv",
        help="Export format: csv (default), parquet, both",
    )
    p_arena.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_arena.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _read_board(ns: argparse.Namespace, allow_terminal: bool = True) -> Optional[Tuple[List[int], int]]:
    """Parse ``--board``/``--first``; returns ``(board, first)`` or None after logging why."""
    try:
        board = parse_board(ns.board)
        first = parse_mark(ns.first) if ns.first else opening_mark(board)
    except ValueError as e:
        logging.error("%s", e)
        return None
    if not is_valid_state(board, first):
        logging.error("Board is not a valid reachable state with %s moving first.", mark_symbol(first))
        return None
    if not allow_terminal and evaluate(board).is_terminal:
        logging.error("Game is already over; no move to select.")
        return None
    return board, first


def _cmd_evaluate(ns: argparse.Namespace) -> int:
    read = _read_board(ns)
    if read is None:
        return 2
    board, _first = read
    outcome = evaluate(board)
    winner = mark_symbol(outcome.winner) if outcome.winner is not None else "-"
    line = list(outcome.line) if outcome.line else []
    logging.info("status=%s winner=%s line=%s", outcome.status.value, winner, line)
    return 0


def _cmd_move(ns: argparse.Namespace, rng: random.Random) -> int:
    read = _read_board(ns, allow_terminal=False)
    if read is None:
        return 2
    board, first = read
    try:
        self_mark = parse_mark(ns.self_mark) if ns.self_mark else current_player(board, first)
    except ValueError as e:
        logging.error("%s", e)
        return 2
    difficulty = Difficulty(ns.difficulty)
    if ns.samples > 0:
        freqs = move_frequencies(board, difficulty, self_mark, opposite(self_mark), ns.samples, rng)
        logging.info(
            "self=%s difficulty=%s samples=%d freqs=%s",
            mark_symbol(self_mark),
            difficulty.value,
            ns.samples,
            [round(float(f), 4) for f in freqs],
        )
        return 0
    move = select_move(board, difficulty, self_mark, opposite(self_mark), rng)
    logging.info("self=%s difficulty=%s move=%d", mark_symbol(self_mark), difficulty.value, move)
    return 0


def _cmd_tactics(ns: argparse.Namespace) -> int:
    read = _read_board(ns)
    if read is None:
        return 2
    board, first = read
    p = current_player(board, first)
    logging.info(
        "to_move=%s wins=%s blocks=%s forks=%s",
        mark_symbol(p),
        immediate_winning_moves(board, p),
        immediate_winning_moves(board, opposite(p)),
        fork_moves(board, p),
    )
    return 0


def _show(match: Match) -> None:
    print(render_board(match.board))
    if match.is_over:
        o = match.outcome
        result = "draw" if o.is_draw else f"{mark_symbol(o.winner)} wins {list(o.line)}"
        s = match.score
        print(f"result: {result} | score X={s.x} O={s.o} draws={s.draws}")
    else:
        print(f"{mark_symbol(match.to_move)} to move")
    sys.stdout.flush()


def _cmd_play(ns: argparse.Namespace, rng: random.Random) -> int:
    try:
        human = parse_mark(ns.human)
    except ValueError as e:
        logging.error("%s", e)
        return 2
    match = Match(GameMode(ns.mode), Difficulty(ns.difficulty), human_mark=human, rng=rng)
    _show(match)
    for line in sys.stdin:
        cmd = line.strip().lower()
        if not cmd:
            continue
        if cmd in ("q", "quit"):
            break
        if cmd in ("r", "reset"):
            match.reset_round()
        else:
            try:
                match.play(int(cmd))
            except ValueError as e:
                logging.error("%s", e)
                continue
            while match.is_ai_turn:
                match.play_ai()
        _show(match)
    s = match.score
    logging.info("rounds=%d x=%d o=%d draws=%d", match.rounds_played, s.x, s.o, s.draws)
    return 0


def _cmd_arena(ns: argparse.Namespace, argv: Optional[List[str]]) -> int:
    if ns.games < 1:
        logging.error("--games must be positive: %s", ns.games)
        return 2
    args = ArenaArgs(
        out=ns.out,
        games=ns.games,
        x_tier=Difficulty(ns.x_tier),
        o_tier=Difficulty(ns.o_tier),
        seed=ns.seed if ns.seed is not None else 0,
        format=ns.format,
        verbose=ns.verbose,
        cli_argv=list(argv) if argv is not None else None,
    )
    try:
        with maybe_mlflow_run(ns.tracking == "mlflow", run_name="arena", log_dir=ns.log_dir):
            out = run_arena(args)
    except RuntimeError as e:
        logging.error("%s", e)
        return 2
    logging.info("Exported arena results to: %s", out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        from importlib.metadata import PackageNotFoundError, version as _ver

        try:
            print(_ver("tictactoe-ai"))
        except PackageNotFoundError:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    rng = random.Random(ns.seed)

    if ns.cmd == "evaluate":
        return _cmd_evaluate(ns)
    if ns.cmd == "move":
        return _cmd_move(ns, rng)
    if ns.cmd == "tactics":
        return _cmd_tactics(ns)
    if ns.cmd == "play":
        return _cmd_play(ns, rng)
    if ns.cmd == "arena":
        return _cmd_arena(ns, argv)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
