"""
Match: the authoritative board, turn order and running score for a session.

This is the caller side of the opponent contract. It only accepts moves
into empty cells, alternates turns, asks the evaluator after every move,
and stops accepting moves once the evaluator reports a terminal outcome.
Scores live for the lifetime of the object only.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .game_basics import EMPTY, O, X, apply_move, mark_symbol, opposite
from .opponent import NO_MOVE, Difficulty, select_move
from .outcome import GameStatus, Outcome, evaluate

logger = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    pass


class GameMode(str, Enum):
    PVP = "pvp"
    PVAI = "pvai"


@dataclass
class Score:
    x: int = 0
    o: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome.status is GameStatus.DRAW:
            self.draws += 1
        elif outcome.winner == X:
            self.x += 1
        elif outcome.winner == O:
            self.o += 1


class Match:
    """One session of rounds.

    In PVAI the human opens every round with ``human_mark`` (O unless given)
    and the AI plays the other mark. In PVP X opens.
    """

    def __init__(
        self,
        mode: GameMode = GameMode.PVAI,
        difficulty: Difficulty = Difficulty.MEDIUM,
        human_mark: int = O,
        rng: Optional[random.Random] = None,
    ):
        if human_mark not in (X, O):
            raise ValueError(f"human_mark must be X or O, got {human_mark!r}")
        self.mode = GameMode(mode)
        self.difficulty = Difficulty(difficulty)
        self.human_mark = human_mark
        self.ai_mark = opposite(human_mark)
        self.rng = rng if rng is not None else random.Random()
        self.score = Score()
        self.rounds_played = 0
        self.reset_round()

    @property
    def starting_mark(self) -> int:
        return self.human_mark if self.mode is GameMode.PVAI else X

    @property
    def board(self) -> List[int]:
        return list(self._board)

    @property
    def is_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def is_ai_turn(self) -> bool:
        return (
            self.mode is GameMode.PVAI
            and not self.is_over
            and self.to_move == self.ai_mark
        )

    def reset_round(self) -> None:
        self._board: List[int] = [EMPTY] * 9
        self.to_move = self.starting_mark
        self.outcome = Outcome.in_progress()

    def reset_all(self) -> None:
        self.score = Score()
        self.rounds_played = 0
        self.reset_round()

    def play(self, index: int) -> Outcome:
        """Place the side-to-move's mark at ``index`` for a human player."""
        if self.is_ai_turn:
            raise IllegalMoveError("It is the AI's turn")
        return self._apply(index)

    def play_ai(self) -> Outcome:
        if not self.is_ai_turn:
            raise IllegalMoveError("It is not the AI's turn")
        move = select_move(self._board, self.difficulty, self.ai_mark, self.human_mark, self.rng)
        if move == NO_MOVE:
            raise IllegalMoveError("No empty cell left for the AI")
        return self._apply(move)

    def _apply(self, index: int) -> Outcome:
        if self.is_over:
            raise IllegalMoveError("Game is already over")
        if not 0 <= index < 9:
            raise IllegalMoveError(f"Cell index out of range: {index}")
        if self._board[index] != EMPTY:
            raise IllegalMoveError(f"Cell {index} is already occupied")
        mark = self.to_move
        self._board = apply_move(self._board, index, mark)
        self.outcome = evaluate(self._board)
        logger.debug("%s -> %d (%s)", mark_symbol(mark), index, self.outcome.status.value)
        if self.outcome.is_terminal:
            self.score.record(self.outcome)
            self.rounds_played += 1
            logger.info(
                "round=%d result=%s score x=%d o=%d draws=%d",
                self.rounds_played,
                "draw" if self.outcome.is_draw else mark_symbol(self.outcome.winner),
                self.score.x,
                self.score.o,
                self.score.draws,
            )
        else:
            self.to_move = opposite(mark)
        return self.outcome
