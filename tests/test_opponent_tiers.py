import random

import pytest

from tictactoe_ai.arena import move_frequencies
from tictactoe_ai.game_basics import EMPTY, O, X
from tictactoe_ai.opponent import NO_MOVE, Difficulty, select_move

_ = EMPTY


class ScriptedRandom:
    """Deterministic stand-in for random.Random: fixed coin, first/last choice."""

    def __init__(self, coin: float = 0.99, pick_last: bool = False):
        self.coin = coin
        self.pick_last = pick_last
        self.choices = []

    def random(self) -> float:
        return self.coin

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[-1] if self.pick_last else seq[0]


FULL_DRAW = [X, X, O, O, O, X, X, O, X]
FULL_WON = [X, X, X, O, O, X, O, X, O]


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("board", [FULL_DRAW, FULL_WON])
def test_full_board_returns_sentinel(difficulty, board):
    assert select_move(board, difficulty, X, O) == NO_MOVE
    assert select_move(board, difficulty, O, X, ScriptedRandom()) == NO_MOVE


def test_difficulty_parse():
    assert Difficulty.parse("HARD") is Difficulty.HARD
    assert Difficulty.parse(" easy ") is Difficulty.EASY
    with pytest.raises(ValueError):
        Difficulty.parse("impossible")


def test_string_difficulty_is_accepted():
    b = [X, X, _, O, O, _, _, _, _]
    assert select_move(b, "hard", X, O) == 2


def test_easy_uses_injected_rng_over_empty_cells():
    b = [X, _, O, _, X, _, _, _, _]
    rng = ScriptedRandom(pick_last=True)
    assert select_move(b, Difficulty.EASY, O, X, rng) == 8
    assert rng.choices == [[1, 3, 5, 6, 7, 8]]


def test_easy_distribution_is_uniform():
    b = [X, _, O, _, X, _, O, _, _]
    empties = [1, 3, 5, 7, 8]
    freqs = move_frequencies(b, Difficulty.EASY, X, O, samples=10000, rng=random.Random(42))
    assert freqs.sum() == pytest.approx(1.0)
    for i in range(9):
        if i in empties:
            assert freqs[i] == pytest.approx(1 / len(empties), abs=0.03)
        else:
            assert freqs[i] == 0.0


def test_medium_wins_first():
    b = [X, X, _, O, O, _, _, _, _]
    assert select_move(b, Difficulty.MEDIUM, X, O, ScriptedRandom()) == 2
    # O also wins before it would block X at 2
    assert select_move(b, Difficulty.MEDIUM, O, X, ScriptedRandom()) == 5


def test_medium_blocks():
    b = [O, O, _, X, _, _, _, _, _]
    assert select_move(b, Difficulty.MEDIUM, X, O, ScriptedRandom()) == 2


def test_medium_takes_center():
    b = [X, _, _, _, _, _, _, _, _]
    assert select_move(b, Difficulty.MEDIUM, O, X, ScriptedRandom()) == 4


def test_medium_random_corner():
    b = [_, _, _, _, X, _, _, _, _]
    rng = ScriptedRandom(pick_last=True)
    assert select_move(b, Difficulty.MEDIUM, O, X, rng) == 8
    assert rng.choices == [[0, 2, 6, 8]]
    b2 = [O, _, _, _, X, _, _, _, X]
    rng = ScriptedRandom()
    assert select_move(b2, Difficulty.MEDIUM, O, X, rng) == 2
    assert rng.choices == [[2, 6]]


def test_medium_falls_back_to_any_cell():
    # Center and corners taken, no line can be completed by either side
    b = [X, _, O, O, X, X, X, _, O]
    rng = ScriptedRandom(pick_last=True)
    assert select_move(b, Difficulty.MEDIUM, O, X, rng) == 7
    assert rng.choices == [[1, 7]]


def test_medium_coin_flip_defers_to_easy():
    b = [X, _, _, _, _, _, _, _, _]
    rng = ScriptedRandom(coin=0.1)
    assert select_move(b, Difficulty.MEDIUM, O, X, rng) == 1
    assert rng.choices == [[1, 2, 3, 4, 5, 6, 7, 8]]


def test_medium_center_rate():
    b = [X, _, _, _, _, _, _, _, _]
    freqs = move_frequencies(b, Difficulty.MEDIUM, O, X, samples=4000, rng=random.Random(1234))
    # 0.8 from the heuristic plus 0.2 * 1/8 from the random branch
    assert freqs[4] == pytest.approx(0.825, abs=0.04)
    assert freqs[0] == 0.0
    assert 0.0 < freqs[1] < 0.1


def test_selection_never_mutates_board():
    b = [X, _, _, _, O, _, _, _, _]
    snap = list(b)
    for d in Difficulty:
        mv = select_move(b, d, X, O, random.Random(0))
        assert b[mv] == EMPTY
    assert b == snap


def test_hard_on_decided_board_falls_back_to_empty_cell():
    b = [X, X, X, O, O, _, _, _, _]
    assert select_move(b, Difficulty.HARD, O, X, ScriptedRandom()) == 5


def test_seeded_rng_reproducible():
    b = [_] * 9
    a = [select_move(b, Difficulty.EASY, X, O, random.Random(7)) for _i in range(3)]
    assert len(set(a)) == 1
