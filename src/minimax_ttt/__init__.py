"""minimax_ttt package.

Board state, a perfect-play minimax search engine, a reference solver and a
small game orchestrator with a CLI.

Convenience imports are exposed for common workflows.
"""

from .board import (
    WINNING_LINES,
    Board,
    BoardError,
    Outcome,
    Player,
    empty_cells,
    has_win,
    is_full,
    is_tie,
    outcome,
    winning_lines,
)
from .config import SearchConfig
from .game import Game, IllegalMoveError, play_out
from .search import SearchResult, best_move, search

__all__ = [
    "WINNING_LINES",
    "Board",
    "BoardError",
    "Outcome",
    "Player",
    "empty_cells",
    "has_win",
    "is_full",
    "is_tie",
    "outcome",
    "winning_lines",
    "SearchConfig",
    "SearchResult",
    "search",
    "best_move",
    "Game",
    "IllegalMoveError",
    "play_out",
]
