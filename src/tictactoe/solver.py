"""
Exact game-theoretic search (minimax) for the computer opponent.
Scoring policy:
- +10 when the maximizer has a line, -10 when the minimizer has one, 0 for a draw.
- No depth adjustment: every winning line scores the same regardless of length.
- The maximizer/minimizer roles are fixed per Search, not per ply.
- Ties go to the first best move in ascending cell order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .game_basics import SIZE, Board, check_mark

WIN_SCORE = 10
LOSS_SCORE = -10
DRAW_SCORE = 0


@dataclass(frozen=True)
class SearchResult:
    move: int
    score: int
    scores: Tuple[Optional[int], ...]  # per cell, None where occupied
    nodes: int


class Search:
    """Minimax over the remaining game tree of a board.

    The board is searched in place: each candidate is placed, evaluated and
    retracted, so the board is left exactly as it was given. With
    ``use_cache`` values are memoized by (cells, mark to move); this only
    saves work and never changes a score or the chosen move.
    """

    def __init__(self, maximizer: str, minimizer: str, use_cache: bool = True):
        check_mark(maximizer)
        check_mark(minimizer)
        if maximizer == minimizer:
            raise ValueError(f"Maximizer and minimizer must differ, both are {maximizer!r}")
        self.maximizer = maximizer
        self.minimizer = minimizer
        self.use_cache = use_cache
        self.nodes = 0
        self._table: Dict[Tuple[Tuple[str, ...], str], int] = {}

    def other(self, mark: str) -> str:
        return self.minimizer if mark == self.maximizer else self.maximizer

    def terminal_score(self, board: Board) -> Optional[int]:
        if board.has_win(self.maximizer):
            return WIN_SCORE
        if board.has_win(self.minimizer):
            return LOSS_SCORE
        if board.is_full():
            return DRAW_SCORE
        return None

    def evaluate(self, board: Board, to_move: str) -> int:
        """Minimax value of `board` with `to_move` about to play."""
        self.nodes += 1
        score = self.terminal_score(board)
        if score is not None:
            return score
        key = (board.snapshot(), to_move)
        if self.use_cache and key in self._table:
            return self._table[key]
        _, score = self._pick(to_move, self._scan(board, to_move))
        if self.use_cache:
            self._table[key] = score
        return score

    def _scan(self, board: Board, to_move: str) -> List[Tuple[int, int]]:
        nxt = self.other(to_move)
        scored: List[Tuple[int, int]] = []
        for mv in list(board.empty_cells()):
            board.apply(mv, to_move)
            try:
                scored.append((mv, self.evaluate(board, nxt)))
            finally:
                board.clear(mv)
        return scored

    def _pick(self, to_move: str, scored: List[Tuple[int, int]]) -> Tuple[int, int]:
        choose = max if to_move == self.maximizer else min
        best = choose(s for _, s in scored)
        move = next(mv for mv, s in scored if s == best)
        return move, best

    def best_move(self, board: Board, to_move: str) -> SearchResult:
        if to_move not in (self.maximizer, self.minimizer):
            raise ValueError(f"Mark {to_move!r} is not part of this search")
        if self.terminal_score(board) is not None:
            raise ValueError(f"No move to search on a finished board: {board!r}")
        start = self.nodes
        scored = self._scan(board, to_move)
        move, score = self._pick(to_move, scored)
        scores: List[Optional[int]] = [None] * SIZE
        for mv, s in scored:
            scores[mv] = s
        nodes = self.nodes - start
        logging.debug("search to_move=%s move=%d score=%d nodes=%d", to_move, move, score, nodes)
        return SearchResult(move=move, score=score, scores=tuple(scores), nodes=nodes)


def best_move(board: Board, mark: str, opponent: str, use_cache: bool = True) -> SearchResult:
    """Best move for `mark` to play, searched from `mark`'s side as maximizer."""
    return Search(mark, opponent, use_cache=use_cache).best_move(board, mark)
