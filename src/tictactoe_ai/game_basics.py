"""
Game basics: board representation, parsing, rules, winner/draw checks, validity.

- A board is a sequence of 9 cells in row-major order: 0=empty, 1=X, 2=O.
- Rule helpers only compare marks for equality, so any two distinct
  non-empty values can stand in for X and O.
- Valid states have counts either equal (opener to move) or the opener has one
  more. X opens unless told otherwise; a PVAI session lets O open.
"""
from typing import List, Optional, Sequence, Tuple

EMPTY = 0
X = 1
O = 2

CENTER = 4
CORNERS = (0, 2, 6, 8)

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

_CELL_CHARS = {
    '0': EMPTY, '.': EMPTY, '_': EMPTY, '-': EMPTY,
    '1': X, 'X': X, 'x': X,
    '2': O, 'O': O, 'o': O,
}
_MARK_SYMBOLS = {EMPTY: '.', X: 'X', O: 'O'}


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def parse_board(text: str) -> List[int]:
    """Parse a 9-character board such as ``100020000`` or ``XX.OO....``."""
    raw = text.strip()
    if len(raw) != 9 or any(c not in _CELL_CHARS for c in raw):
        raise ValueError(f"Invalid board string {text!r}: expected 9 chars of 0/1/2 or ./X/O")
    return [_CELL_CHARS[c] for c in raw]


def mark_symbol(mark: int) -> str:
    return _MARK_SYMBOLS.get(mark, str(mark))


def parse_mark(text: str) -> int:
    mark = _CELL_CHARS.get(text.strip())
    if mark is None or mark == EMPTY:
        raise ValueError(f"Unknown mark: {text!r}")
    return mark


def render_board(board: Sequence[int]) -> str:
    rows = []
    for r in range(3):
        rows.append(' '.join(mark_symbol(board[3 * r + c]) for c in range(3)))
    return '\n'.join(rows)


def winning_line(board: Sequence[int]) -> Optional[Tuple[int, Tuple[int, int, int]]]:
    """Return ``(mark, triple)`` for the first completed triple, or None."""
    for pattern in WIN_PATTERNS:
        a, b, c = pattern
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return v, pattern
    return None


def get_winner(board: Sequence[int]) -> int:
    found = winning_line(board)
    return found[0] if found is not None else EMPTY


def is_draw(board: Sequence[int]) -> bool:
    return EMPTY not in board and winning_line(board) is None


def legal_moves(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def apply_move(board: Sequence[int], idx: int, mark: int) -> List[int]:
    """Return a new board with ``mark`` placed at ``idx``; the input is untouched."""
    nxt = list(board)
    nxt[idx] = mark
    return nxt


def get_piece_counts(board: Sequence[int]) -> Tuple[int, int]:
    return board.count(X), board.count(O)


def opening_mark(board: Sequence[int]) -> int:
    """Best guess at who opened: O only when O has more marks on the board."""
    x, o = get_piece_counts(board)
    return O if o > x else X


def current_player(board: Sequence[int], first: int = X) -> int:
    second = opposite(first)
    return first if board.count(first) == board.count(second) else second


def opposite(mark: int) -> int:
    return O if mark == X else X


def is_valid_state(board: Sequence[int], first: int = X) -> bool:
    if len(board) != 9 or any(v not in (EMPTY, X, O) for v in board):
        return False
    second = opposite(first)
    first_count, second_count = board.count(first), board.count(second)
    if not (first_count == second_count or first_count == second_count + 1):
        return False

    def count_wins(p: int) -> int:
        return sum(1 for pat in WIN_PATTERNS if all(board[i] == p for i in pat))

    if count_wins(X) > 0 and count_wins(O) > 0:
        return False
    w = get_winner(board)
    if w == first and first_count != second_count + 1:
        return False
    if w == second and first_count != second_count:
        return False
    return True
