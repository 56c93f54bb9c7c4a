"""tictactoe package.

Board rules, a perfect-play minimax opponent, turn orchestration, and a
console CLI.

Convenience imports are exposed for common workflows.
"""

from .game_basics import Board, InvalidMove
from .orchestrator import Game, GameOver, Outcome, StepResult
from .players import ComputedMoves, DuplicateSymbol, HumanMoves, Player, make_players
from .solver import Search, SearchResult, best_move

__all__ = [
    "Board",
    "InvalidMove",
    "Search",
    "SearchResult",
    "best_move",
    "HumanMoves",
    "ComputedMoves",
    "Player",
    "DuplicateSymbol",
    "make_players",
    "Game",
    "GameOver",
    "Outcome",
    "StepResult",
]
