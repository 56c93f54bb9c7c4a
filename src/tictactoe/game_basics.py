"""
Game basics: board representation, rules, winner/draw checks.
Notes:
- The board is 9 cells in row-major order. A cell is EMPTY or a player's mark.
- A mark is any single non-blank character; the two players hold distinct marks.
- Win/draw status is always derived from the cells, never stored.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

EMPTY = " "
SIZE = 9

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

# characters accepted as an empty cell when parsing board strings
EMPTY_CHARS = " .-_"


class InvalidMove(ValueError):
    """A move index out of range or pointing at an occupied cell."""

    def __init__(self, move: object, reason: str):
        super().__init__(f"Invalid move {move!r}: {reason}")
        self.move = move
        self.reason = reason


def check_mark(mark: str) -> str:
    if not isinstance(mark, str) or len(mark) != 1 or mark == EMPTY:
        raise ValueError(f"Mark must be a single non-blank character, got {mark!r}")
    return mark


class Board:
    def __init__(self) -> None:
        self._cells = [EMPTY] * SIZE

    @classmethod
    def from_cells(cls, cells: Iterable[str]) -> "Board":
        values = list(cells)
        if len(values) != SIZE:
            raise ValueError(f"Board needs {SIZE} cells, got {len(values)}")
        board = cls()
        for i, v in enumerate(values):
            if v != EMPTY:
                board._cells[i] = check_mark(v)
        return board

    def copy(self) -> "Board":
        return Board.from_cells(self._cells)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._cells)

    def __getitem__(self, idx: int) -> str:
        return self._cells[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Board({serialize_board(self)!r})"

    def check_move(self, move: int) -> None:
        if isinstance(move, bool) or not isinstance(move, int):
            raise InvalidMove(move, "not an integer cell index")
        if not 0 <= move < SIZE:
            raise InvalidMove(move, f"index out of range 0..{SIZE - 1}")
        if self._cells[move] != EMPTY:
            raise InvalidMove(move, f"cell occupied by {self._cells[move]!r}")

    def is_legal(self, move: int) -> bool:
        try:
            self.check_move(move)
        except InvalidMove:
            return False
        return True

    def apply(self, move: int, mark: str) -> None:
        """Place `mark` on an empty cell. Raises InvalidMove and leaves the board as-is otherwise."""
        check_mark(mark)
        self.check_move(move)
        self._cells[move] = mark

    def clear(self, move: int) -> None:
        """Retract a placement (used by search to undo hypothetical moves)."""
        if self._cells[move] == EMPTY:
            raise InvalidMove(move, "cell is already empty")
        self._cells[move] = EMPTY

    def empty_cells(self) -> Iterator[int]:
        return (i for i, v in enumerate(self._cells) if v == EMPTY)

    def marks(self) -> Tuple[str, ...]:
        """Distinct marks on the board, in order of first appearance."""
        seen = []
        for v in self._cells:
            if v != EMPTY and v not in seen:
                seen.append(v)
        return tuple(seen)

    def has_win(self, mark: str) -> bool:
        check_mark(mark)
        c = self._cells
        return any(c[a] == mark and c[b] == mark and c[d] == mark for a, b, d in WIN_PATTERNS)

    def winner(self) -> Optional[str]:
        c = self._cells
        for a, b, d in WIN_PATTERNS:
            v = c[a]
            if v != EMPTY and v == c[b] and v == c[d]:
                return v
        return None

    def is_full(self) -> bool:
        return EMPTY not in self._cells

    def is_draw(self) -> bool:
        return self.is_full() and not any(self.has_win(m) for m in self.marks())

    def is_terminal(self) -> bool:
        return self.is_full() or self.winner() is not None


def serialize_board(board: Board, empty: str = ".") -> str:
    return ''.join(empty if v == EMPTY else v for v in board.snapshot())


def parse_board(text: str) -> Board:
    """Parse a 9-character board string, e.g. "XX.OO....". Empty cells may be . - _ or space."""
    if len(text) != SIZE:
        raise ValueError(f"Board string must be {SIZE} characters, got {len(text)}")
    return Board.from_cells(EMPTY if ch in EMPTY_CHARS else ch for ch in text)
