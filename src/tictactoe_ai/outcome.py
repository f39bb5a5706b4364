"""
Outcome evaluation: has someone won, is it a draw, or is the game still on?

The evaluator is the single authority on terminal states. It scans the
eight winning triples in a fixed order (rows, columns, diagonals) and
reports the first completed one, so a board with two completed lines, which
legal play never produces, still gets a deterministic answer.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from .game_basics import EMPTY, winning_line


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: GameStatus
    winner: Optional[Any] = None
    line: Optional[Tuple[int, int, int]] = None

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls(GameStatus.IN_PROGRESS)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(GameStatus.DRAW)

    @classmethod
    def won(cls, mark: Any, line: Tuple[int, int, int]) -> "Outcome":
        return cls(GameStatus.WON, winner=mark, line=tuple(line))

    @property
    def is_terminal(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS

    @property
    def is_draw(self) -> bool:
        return self.status is GameStatus.DRAW


def evaluate(board: Sequence[Any]) -> Outcome:
    """Classify a 9-cell board.

    The board must have exactly 9 cells; that is the caller's contract and is
    not checked here.
    """
    found = winning_line(board)
    if found is not None:
        mark, line = found
        return Outcome.won(mark, line)
    if EMPTY not in board:
        return Outcome.draw()
    return Outcome.in_progress()
