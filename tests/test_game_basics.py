import pytest

from tictactoe_ai.game_basics import (
    EMPTY,
    O,
    X,
    apply_move,
    current_player,
    get_winner,
    is_draw,
    is_valid_state,
    legal_moves,
    opening_mark,
    parse_board,
    parse_mark,
    render_board,
    serialize_board,
)


def test_parse_board_accepts_digits_and_symbols():
    assert parse_board("100020000") == [1, 0, 0, 0, 2, 0, 0, 0, 0]
    assert parse_board("XX.OO....") == [X, X, EMPTY, O, O, EMPTY, EMPTY, EMPTY, EMPTY]
    assert parse_board(" x_-o00000 ") == [X, EMPTY, EMPTY, O, EMPTY, EMPTY, EMPTY, EMPTY, EMPTY]


@pytest.mark.parametrize("bad", ["", "abc", "0123456789", "12345678x", "XXOO"])
def test_parse_board_rejects_malformed(bad: str):
    with pytest.raises(ValueError):
        parse_board(bad)


def test_serialize_and_render():
    b = [1, 0, 2, 0, 1, 0, 0, 0, 2]
    assert serialize_board(b) == "102010002"
    assert render_board(b) == "X . O\n. X .\n. . O"


def test_parse_mark():
    assert parse_mark("x") == X
    assert parse_mark("O") == O
    assert parse_mark("2") == O
    with pytest.raises(ValueError):
        parse_mark(".")
    with pytest.raises(ValueError):
        parse_mark("Z")


def test_apply_move_returns_copy():
    b = [0] * 9
    nb = apply_move(b, 4, X)
    assert b == [0] * 9
    assert nb[4] == X
    assert legal_moves(nb) == [0, 1, 2, 3, 5, 6, 7, 8]


def test_winner_draw_and_side_to_move():
    assert get_winner([1, 1, 1, 2, 2, 0, 0, 0, 0]) == X
    assert get_winner([0] * 9) == EMPTY
    assert is_draw([1, 1, 2, 2, 2, 1, 1, 2, 1])
    assert not is_draw([1, 1, 1, 2, 2, 1, 2, 1, 2])
    assert current_player([0] * 9) == X
    assert current_player([1, 0, 0, 0, 0, 0, 0, 0, 0]) == O


def test_is_valid_state():
    assert is_valid_state([0] * 9)
    assert is_valid_state([1, 1, 1, 2, 2, 0, 0, 0, 0])
    # O to have moved first
    assert not is_valid_state([2, 0, 0, 0, 0, 0, 0, 0, 0])
    # X won but O moved after
    assert not is_valid_state([1, 1, 1, 2, 2, 0, 2, 0, 0])
    # double winner
    assert not is_valid_state([1, 1, 1, 2, 2, 2, 1, 1, 2])
    assert not is_valid_state([1, 0, 0])
    assert not is_valid_state([3, 0, 0, 0, 0, 0, 0, 0, 0])


def test_o_opening_boards():
    center_o = [0, 0, 0, 0, 2, 0, 0, 0, 0]
    assert opening_mark(center_o) == O
    assert opening_mark([1, 0, 0, 0, 2, 0, 0, 0, 0]) == X
    assert is_valid_state(center_o, first=O)
    assert not is_valid_state(center_o)
    assert current_player(center_o, first=O) == X
    assert current_player([1, 0, 0, 0, 2, 0, 0, 0, 0], first=O) == O
    # O won on its third mark, X has only two
    assert is_valid_state([2, 2, 2, 1, 1, 0, 0, 0, 0], first=O)
    # X won yet O, the opener, moved after it
    assert not is_valid_state([1, 1, 1, 2, 2, 0, 2, 0, 2], first=O)
    assert not is_valid_state([1, 1, 0, 0, 2, 0, 0, 0, 0], first=O)
