"""
Tactics and simple motifs: immediate wins/blocks and forks.

All scans walk empty cells in ascending index order, so the first match is
always the lowest cell index.
"""
from typing import Any, List, Optional, Sequence

from .game_basics import EMPTY, apply_move
from .outcome import evaluate


def immediate_winning_moves(board: Sequence[Any], mark: Any) -> List[int]:
    wins: List[int] = []
    for i, v in enumerate(board):
        if v != EMPTY:
            continue
        if evaluate(apply_move(board, i, mark)).winner == mark:
            wins.append(i)
    return wins


def first_winning_move(board: Sequence[Any], mark: Any) -> Optional[int]:
    for i, v in enumerate(board):
        if v != EMPTY:
            continue
        if evaluate(apply_move(board, i, mark)).winner == mark:
            return i
    return None


def fork_moves(board: Sequence[Any], mark: Any) -> List[int]:
    forks: List[int] = []
    for i, v in enumerate(board):
        if v != EMPTY:
            continue
        if len(immediate_winning_moves(apply_move(board, i, mark), mark)) >= 2:
            forks.append(i)
    return forks
