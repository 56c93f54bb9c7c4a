"""
Players and their move sources.
Notes:
- A MoveSource yields the next move for a side; it does not care whether a
  person or the search made the decision.
- Human moves arrive already validated from the console layer; the check here
  only guards against that contract being broken.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from .config import GameConfig
from .game_basics import Board, check_mark
from .solver import Search


class DuplicateSymbol(ValueError):
    def __init__(self, mark: str, taken_by: str):
        super().__init__(f"Symbol must be different from {taken_by}")
        self.mark = mark
        self.taken_by = taken_by


class MoveSource(Protocol):
    needs_input: bool

    def next_move(self, board: Board, supplied: Optional[int] = None) -> int:
        ...


class HumanMoves:
    needs_input = True

    def next_move(self, board: Board, supplied: Optional[int] = None) -> int:
        if supplied is None:
            raise ValueError("A human move must be supplied")
        board.check_move(supplied)
        return supplied


class ComputedMoves:
    needs_input = False

    def __init__(self, mark: str, opponent: str, use_cache: bool = True):
        self.search = Search(mark, opponent, use_cache=use_cache)

    @property
    def mark(self) -> str:
        return self.search.maximizer

    def next_move(self, board: Board, supplied: Optional[int] = None) -> int:
        if supplied is not None:
            raise ValueError("Computed moves do not take a supplied move")
        return self.search.best_move(board, self.mark).move


@dataclass(frozen=True)
class Player:
    name: str
    mark: str
    source: MoveSource

    def __post_init__(self) -> None:
        check_mark(self.mark)
        source_mark = getattr(self.source, "mark", None)
        if source_mark is not None and source_mark != self.mark:
            raise ValueError(f"{self.name} plays {self.mark!r} but its move source searches for {source_mark!r}")

    @property
    def needs_input(self) -> bool:
        return self.source.needs_input


def make_players(config: GameConfig) -> Tuple[Player, Player]:
    """Build both players from a complete config (names filled, opponent decided)."""
    if config.opponent is None:
        raise ValueError("Opponent kind is not decided")
    name1 = config.name1 or "Player 1"
    mark1 = config.first_mark
    p1 = Player(name1, mark1, HumanMoves())
    if config.opponent == "human":
        if config.second_mark == mark1:
            raise DuplicateSymbol(config.second_mark, name1)
        p2 = Player(config.name2 or "Player 2", config.second_mark, HumanMoves())
    else:
        mark = GameConfig.computer_mark(mark1)
        p2 = Player("Computer", mark, ComputedMoves(mark, mark1, use_cache=config.search_cache))
    return p1, p2


def computer_pair(mark1: str = "X", mark2: str = "O", use_cache: bool = True) -> Tuple[Player, Player]:
    """Two search-driven players, for self-play."""
    return (
        Player(f"Computer {mark1}", mark1, ComputedMoves(mark1, mark2, use_cache=use_cache)),
        Player(f"Computer {mark2}", mark2, ComputedMoves(mark2, mark1, use_cache=use_cache)),
    )
