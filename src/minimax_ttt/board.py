"""
Board state: cell occupancy, the winning-line table, win/terminal checks.
Notes:
- A board is R*R cells in row-major order; each cell is None (empty) or a Player.
- The line table for a side R is R rows, R columns and the two diagonals.
- The human ("O") moves first in a standard game; either side may be searched for.
"""
from __future__ import annotations

import math
from contextlib import contextmanager
from enum import Enum
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

EMPTY_TOKENS = ("_", ".")

Line = Tuple[int, ...]


class BoardError(ValueError):
    """Raised when a board is malformed or a placement is not legal."""


class Player(str, Enum):
    HUMAN = "O"
    MACHINE = "X"

    @property
    def opponent(self) -> "Player":
        return Player.MACHINE if self is Player.HUMAN else Player.HUMAN


class Outcome(str, Enum):
    HUMAN_WINS = "human_wins"
    MACHINE_WINS = "machine_wins"
    TIE = "tie"


@lru_cache(maxsize=None)
def winning_lines(side: int = 3) -> Tuple[Line, ...]:
    """Every cell combination that wins on a side x side board."""
    grid = np.arange(side * side).reshape(side, side)
    lines: List[Line] = [tuple(int(i) for i in row) for row in grid]
    lines += [tuple(int(i) for i in col) for col in grid.T]
    lines.append(tuple(int(i) for i in np.diagonal(grid)))
    lines.append(tuple(int(i) for i in np.diagonal(np.fliplr(grid))))
    return tuple(lines)


WINNING_LINES = winning_lines(3)


class Board:
    """Fixed-size grid of cells owned by whoever drives the game loop."""

    def __init__(self, cells: Optional[Iterable[Optional[Player]]] = None, side: int = 3) -> None:
        if side < 2:
            raise BoardError(f"Board side must be at least 2, got {side}")
        cells_list = [None] * (side * side) if cells is None else list(cells)
        if len(cells_list) != side * side:
            raise BoardError(f"Expected {side * side} cells for side {side}, got {len(cells_list)}")
        for i, v in enumerate(cells_list):
            if v is not None and not isinstance(v, Player):
                raise BoardError(f"Invalid value at cell {i}: {v!r}")
        self.side = side
        self.lines = winning_lines(side)
        self._cells: List[Optional[Player]] = cells_list

    @classmethod
    def parse(cls, text: str) -> "Board":
        raw = text.strip()
        side = math.isqrt(len(raw))
        if side < 2 or side * side != len(raw):
            raise BoardError(f"Board string length must be a square >= 4, got {len(raw)}")
        cells: List[Optional[Player]] = []
        for ch in raw.upper():
            if ch in EMPTY_TOKENS:
                cells.append(None)
            elif ch in ("X", "O"):
                cells.append(Player(ch))
            else:
                raise BoardError(f"Invalid board character: {ch!r}")
        return cls(cells, side=side)

    @property
    def cells(self) -> Tuple[Optional[Player], ...]:
        return tuple(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index: int) -> Optional[Player]:
        return self._cells[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.side == other.side and self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "".join("_" if v is None else v.value for v in self._cells)

    def __repr__(self) -> str:
        return f"Board({str(self)!r})"

    def copy(self) -> "Board":
        return Board(self._cells, side=self.side)

    def is_empty(self, index: int) -> bool:
        return self._cells[index] is None

    def place(self, index: int, player: Player) -> None:
        if not 0 <= index < len(self._cells):
            raise BoardError(f"Cell index out of range: {index}")
        if self._cells[index] is not None:
            raise BoardError(f"Cell {index} is already occupied by {self._cells[index].value}")
        self._cells[index] = player

    def clear(self, index: int) -> None:
        self._cells[index] = None

    @contextmanager
    def speculate(self, index: int, player: Player) -> Iterator["Board"]:
        """Place `player` at `index` for the duration of the block, then revert."""
        self.place(index, player)
        try:
            yield self
        finally:
            self.clear(index)

    def rows(self) -> List[Sequence[Optional[Player]]]:
        return [self._cells[r * self.side:(r + 1) * self.side] for r in range(self.side)]


def empty_cells(board: Board) -> List[int]:
    return [i for i, v in enumerate(board._cells) if v is None]


def winning_line(board: Board, player: Player) -> Optional[Line]:
    cells = board._cells
    for line in board.lines:
        for i in line:
            if cells[i] is not player:
                break
        else:
            return line
    return None


def has_win(board: Board, player: Player) -> bool:
    return winning_line(board, player) is not None


def is_full(board: Board) -> bool:
    return not empty_cells(board)


def is_tie(board: Board) -> bool:
    return is_full(board) and not has_win(board, Player.HUMAN) and not has_win(board, Player.MACHINE)


def outcome(board: Board) -> Optional[Outcome]:
    """Decided result of the position, or None while the game is still open.

    A board where both players hold a line is not a legal position; the human
    line is reported first in that case.
    """
    if has_win(board, Player.HUMAN):
        return Outcome.HUMAN_WINS
    if has_win(board, Player.MACHINE):
        return Outcome.MACHINE_WINS
    if is_full(board):
        return Outcome.TIE
    return None


def piece_counts(board: Board) -> Tuple[int, int]:
    cells = board._cells
    return cells.count(Player.HUMAN), cells.count(Player.MACHINE)


def side_to_move(board: Board, first: Player = Player.HUMAN) -> Player:
    """Infer who moves next, assuming `first` opened the game."""
    mine = board.cells.count(first)
    theirs = board.cells.count(first.opponent)
    return first if mine == theirs else first.opponent


def is_valid_state(board: Board) -> bool:
    """Piece counts differ by at most one and at most one player holds a line."""
    humans, machines = piece_counts(board)
    if abs(humans - machines) > 1:
        return False
    if has_win(board, Player.HUMAN) and has_win(board, Player.MACHINE):
        return False
    return True
