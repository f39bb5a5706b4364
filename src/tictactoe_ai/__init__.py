"""tictactoe_ai package.

Rules engine (win/draw detection) and automated opponent for 3x3
tic-tac-toe, plus a session layer, tier-vs-tier arena, and a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .game_basics import EMPTY, O, X
from .match import GameMode, IllegalMoveError, Match, Score
from .opponent import NO_MOVE, Difficulty, minimax, select_move
from .outcome import GameStatus, Outcome, evaluate

__all__ = [
    "EMPTY",
    "X",
    "O",
    "evaluate",
    "Outcome",
    "GameStatus",
    "select_move",
    "minimax",
    "Difficulty",
    "NO_MOVE",
    "Match",
    "GameMode",
    "Score",
    "IllegalMoveError",
]
