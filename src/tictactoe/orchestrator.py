"""
Turn orchestration: alternates two players over one board.

State machine per game:
  AwaitingMove(0) -> MoveApplied -> AwaitingMove(other) | Won(mark) | Draw
A win for the mark just played is checked before the draw check, so a full
board completed by a winning move is a win.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .game_basics import Board
from .players import Player


class GameOver(RuntimeError):
    pass


class Outcome(enum.Enum):
    CONTINUE = "continue"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class StepResult:
    outcome: Outcome
    move: int
    player: Player
    mark: Optional[str] = None  # winning mark when outcome is WON

    @property
    def finished(self) -> bool:
        return self.outcome is not Outcome.CONTINUE


class Game:
    def __init__(self, players: Sequence[Player], board: Optional[Board] = None):
        if len(players) != 2:
            raise ValueError(f"A game needs exactly two players, got {len(players)}")
        if players[0].mark == players[1].mark:
            raise ValueError(f"Players must hold distinct marks, both are {players[0].mark!r}")
        self.players = tuple(players)
        self.board = board if board is not None else Board()
        self.active = 0
        self.history: List[int] = []
        self.result: Optional[StepResult] = None

    @property
    def current(self) -> Player:
        return self.players[self.active]

    @property
    def finished(self) -> bool:
        return self.result is not None and self.result.finished

    def step(self, move: Optional[int] = None) -> StepResult:
        """Play one turn. `move` is required for players that need input and refused otherwise."""
        if self.finished:
            raise GameOver("The game is already over")
        player = self.current
        if player.needs_input and move is None:
            raise ValueError(f"{player.name} needs a move to be supplied")
        if not player.needs_input and move is not None:
            raise ValueError(f"{player.name} chooses its own moves")
        chosen = player.source.next_move(self.board, move)
        self.board.apply(chosen, player.mark)
        self.history.append(chosen)
        logging.debug("%s (%s) played %d", player.name, player.mark, chosen)

        if self.board.has_win(player.mark):
            result = StepResult(Outcome.WON, chosen, player, mark=player.mark)
        elif self.board.is_draw():
            result = StepResult(Outcome.DRAW, chosen, player)
        else:
            result = StepResult(Outcome.CONTINUE, chosen, player)
            self.active = 1 - self.active
        self.result = result
        return result

    def run(self, read_move: Optional[Callable[["Game", Player], int]] = None) -> StepResult:
        """Step until the game ends, asking `read_move` for every move that needs input."""
        while True:
            player = self.current
            move = None
            if player.needs_input:
                if read_move is None:
                    raise ValueError(f"{player.name} needs input but no move reader was given")
                move = read_move(self, player)
            result = self.step(move)
            if result.finished:
                return result

    def winner(self) -> Optional[Player]:
        if self.result is None or self.result.outcome is not Outcome.WON:
            return None
        return self.result.player
