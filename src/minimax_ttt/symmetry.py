"""
Symmetry and canonicalization for square boards.
Notes:
- There are 8 symmetries (the dihedral group of the square) for any side length.
- A board is canonicalized by taking the lexicographically smallest image among all symmetries.
- Actions (cell indices) transform with the board; index maps are precomputed per side.
"""
from functools import lru_cache
from typing import Dict, List, Tuple

import numpy as np

from .board import Board

ALL_SYMS = ['id', 'rot90', 'rot180', 'rot270', 'hflip', 'vflip', 'd1', 'd2']

_GRID_OPS = {
    'id': lambda g: g,
    'rot90': lambda g: np.rot90(g, -1),
    'rot180': lambda g: np.rot90(g, 2),
    'rot270': lambda g: np.rot90(g, 1),
    'hflip': np.fliplr,
    'vflip': np.flipud,
    'd1': lambda g: g.T,
    'd2': lambda g: np.rot90(g, 2).T,
}


@lru_cache(maxsize=None)
def _source_map(kind: str, side: int) -> Tuple[int, ...]:
    """source[i] is the cell whose content lands on cell i."""
    if kind not in _GRID_OPS:
        raise ValueError(f"Unknown transformation: {kind}")
    grid = np.arange(side * side).reshape(side, side)
    return tuple(int(i) for i in _GRID_OPS[kind](grid).ravel())


@lru_cache(maxsize=None)
def sym_index_map(kind: str, side: int = 3) -> Tuple[int, ...]:
    """mapping[i] is where cell i ends up."""
    return tuple(int(i) for i in np.argsort(_source_map(kind, side)))


def transform_board(board: Board, kind: str) -> Board:
    src = _source_map(kind, board.side)
    return Board([board[j] for j in src], side=board.side)


def apply_action_transform(action: int, kind: str, side: int = 3) -> int:
    return sym_index_map(kind, side)[action]


def canonical_form(board: Board) -> Tuple[str, str]:
    """(canonical board string, op that produces it); ties resolved by ALL_SYMS order."""
    images: List[Tuple[str, str]] = [(str(transform_board(board, k)), k) for k in ALL_SYMS]
    return min(images, key=lambda x: x[0])


def orbit(board: Board) -> Dict[str, Board]:
    return {k: transform_board(board, k) for k in ALL_SYMS}
