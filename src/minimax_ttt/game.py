from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .board import (
    Board,
    Line,
    Outcome,
    Player,
    empty_cells,
    outcome,
    winning_line,
)
from .config import SearchConfig
from .search import search

MESSAGES = {
    Outcome.HUMAN_WINS: "You win!",
    Outcome.MACHINE_WINS: "You lose.",
    Outcome.TIE: "Tie Game!",
}


class IllegalMoveError(ValueError):
    pass


@dataclass
class MoveRecord:
    player: Player
    index: int


GameOverHook = Callable[["Game"], None]


class Game:
    """Owns the shared board and turn sequencing between a human and the engine.

    After each placement the game checks for a completed line, then for a full
    board. Callbacks in `on_game_over` run once when the game is decided; that
    is the place for transcripts or notifications, the engine itself does no I/O.
    """

    def __init__(
        self,
        side: int = 3,
        first: Player = Player.HUMAN,
        config: Optional[SearchConfig] = None,
    ) -> None:
        self.side = side
        self.first = first
        self.config = config or SearchConfig.for_side(side)
        self.on_game_over: List[GameOverHook] = []
        self.reset()

    def reset(self) -> None:
        self.board = Board(side=self.side)
        self.to_move: Player = self.first
        self.history: List[MoveRecord] = []
        self.outcome: Optional[Outcome] = None
        self.winning_line: Optional[Line] = None

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    @property
    def message(self) -> Optional[str]:
        return MESSAGES[self.outcome] if self.outcome is not None else None

    def play(self, index: int, player: Player) -> None:
        if self.is_over:
            raise IllegalMoveError("Game is already over")
        if player is not self.to_move:
            raise IllegalMoveError(f"It is {self.to_move.value}'s turn, not {player.value}'s")
        if not isinstance(index, int) or not 0 <= index < len(self.board):
            raise IllegalMoveError(f"Cell index out of range: {index!r}")
        if not self.board.is_empty(index):
            raise IllegalMoveError(f"Cell {index} is already taken")
        self.board.place(index, player)
        self.history.append(MoveRecord(player, index))
        logging.debug("%s -> %d board=%s", player.value, index, self.board)

        self.winning_line = winning_line(self.board, player)
        self.outcome = outcome(self.board)
        if self.outcome is None:
            self.to_move = player.opponent
            return
        logging.info("Game over: %s", self.outcome.value)
        for hook in self.on_game_over:
            hook(self)

    def machine_move(self) -> int:
        if self.is_over:
            raise IllegalMoveError("Game is already over")
        result = search(self.board, Player.MACHINE, self.config)
        if result.move is None:
            raise IllegalMoveError("No move available for the machine")
        self.play(result.move, Player.MACHINE)
        return result.move

    def human_move(self, index: int) -> Optional[int]:
        """Apply the human move; the machine replies unless the game ended.

        Returns the machine's reply, or None when there was none.
        """
        self.play(index, Player.HUMAN)
        if self.is_over:
            return None
        return self.machine_move()

    def legal_moves(self) -> List[int]:
        return [] if self.is_over else empty_cells(self.board)

    def snapshot(self) -> Dict[str, object]:
        return {
            "board": str(self.board),
            "to_move": None if self.is_over else self.to_move.value,
            "legal_moves": self.legal_moves(),
            "game_over": self.is_over,
            "outcome": self.outcome.value if self.outcome else None,
            "winning_line": list(self.winning_line) if self.winning_line else None,
            "message": self.message,
            "last_move": self.history[-1].index if self.history else None,
        }


def play_out(game: Game, human_config: Optional[SearchConfig] = None) -> Outcome:
    """Play both sides with the engine until the game is decided."""
    cfg = human_config or game.config
    while not game.is_over:
        if game.to_move is Player.MACHINE:
            game.machine_move()
        else:
            game.play(search(game.board, Player.HUMAN, cfg).move, Player.HUMAN)
    assert game.outcome is not None
    return game.outcome
