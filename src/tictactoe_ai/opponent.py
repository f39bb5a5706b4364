"""
Automated opponent: picks the cell the computer player occupies next.

Three tiers:
- Easy: uniform random empty cell.
- Medium: one-ply heuristic (win, block, center, corner, anything), with a
  20% chance of playing an Easy move instead.
- Hard: exhaustive minimax from the side-to-move perspective.

Minimax scoring (depth counts plies from the search root):
- Self wins: 10 - depth (win sooner).
- Opponent wins: depth - 10 (lose later).
- Draw: 0.
Ties keep the first child examined in ascending cell order.

Randomness comes from an injected ``random.Random``-like object so callers
can seed it.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .game_basics import CENTER, CORNERS, apply_move, legal_moves
from .outcome import GameStatus, evaluate
from .tactics import first_winning_move

logger = logging.getLogger(__name__)

NO_MOVE = -1
MEDIUM_RANDOM_RATE = 0.2
WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str) -> "Difficulty":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {value!r}; expected one of "
                + ", ".join(d.value for d in cls)
            ) from None


@dataclass(frozen=True)
class SearchResult:
    score: int
    move: Optional[int]


def pick_easy_move(board: Sequence[Any], rng: random.Random) -> int:
    return rng.choice(legal_moves(board))


def pick_medium_move(
    board: Sequence[Any], self_mark: Any, opponent_mark: Any, rng: random.Random
) -> int:
    moves = legal_moves(board)
    if not moves:
        return NO_MOVE
    winning = first_winning_move(board, self_mark)
    if winning is not None:
        return winning
    blocking = first_winning_move(board, opponent_mark)
    if blocking is not None:
        return blocking
    if CENTER in moves:
        return CENTER
    open_corners = [i for i in CORNERS if i in moves]
    if open_corners:
        return rng.choice(open_corners)
    return rng.choice(moves)


def minimax(
    board: Sequence[Any],
    to_move: Any,
    self_mark: Any,
    opponent_mark: Any,
    depth: int = 0,
) -> SearchResult:
    outcome = evaluate(board)
    if outcome.status is GameStatus.WON:
        if outcome.winner == self_mark:
            return SearchResult(WIN_SCORE - depth, None)
        if outcome.winner == opponent_mark:
            return SearchResult(depth - WIN_SCORE, None)
    if outcome.is_terminal:
        return SearchResult(0, None)

    maximizing = to_move == self_mark
    next_mark = opponent_mark if maximizing else self_mark
    best_score = float('-inf') if maximizing else float('inf')
    best_move: Optional[int] = None
    for move in legal_moves(board):
        child = apply_move(board, move, to_move)
        result = minimax(child, next_mark, self_mark, opponent_mark, depth + 1)
        if maximizing:
            if result.score > best_score:
                best_score = result.score
                best_move = move
        elif result.score < best_score:
            best_score = result.score
            best_move = move
    return SearchResult(int(best_score), best_move)


def pick_hard_move(
    board: Sequence[Any], self_mark: Any, opponent_mark: Any, rng: random.Random
) -> int:
    result = minimax(board, self_mark, self_mark, opponent_mark, 0)
    if result.move is None:
        # Board already decided but not full: nothing to search for.
        return pick_easy_move(board, rng)
    return result.move


def _easy(board, self_mark, opponent_mark, rng):
    return pick_easy_move(board, rng)


def _medium(board, self_mark, opponent_mark, rng):
    if rng.random() < MEDIUM_RANDOM_RATE:
        return pick_easy_move(board, rng)
    return pick_medium_move(board, self_mark, opponent_mark, rng)


_TIERS: Dict[Difficulty, Callable[..., int]] = {
    Difficulty.EASY: _easy,
    Difficulty.MEDIUM: _medium,
    Difficulty.HARD: pick_hard_move,
}


def select_move(
    board: Sequence[Any],
    difficulty: Difficulty,
    self_mark: Any,
    opponent_mark: Any,
    rng: Optional[random.Random] = None,
) -> int:
    """Return the cell index ``self_mark`` should occupy, or ``NO_MOVE``.

    ``board`` is never mutated. ``NO_MOVE`` is returned for a full board at
    every tier; callers must check for it before applying the move.
    """
    moves: List[int] = legal_moves(board)
    if not moves:
        return NO_MOVE
    if rng is None:
        rng = random.Random()
    move = _TIERS[Difficulty(difficulty)](board, self_mark, opponent_mark, rng)
    logger.debug("tier=%s self=%s move=%d", Difficulty(difficulty).value, self_mark, move)
    return move
