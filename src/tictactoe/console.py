"""
Console layer: prompts, input parsing, and board rendering.

The streams are held by a ConsoleIO opened with `open_console`, which releases
them when the game ends. Everything here turns raw text into validated moves
and setup values before the core sees them.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO, Tuple

from .config import GameConfig
from .game_basics import EMPTY, SIZE, Board
from .orchestrator import Game, Outcome, StepResult
from .players import Player

BAD_NUMBER = "Invalid input! Please enter a number between 1-9."
OCCUPIED = "Position already occupied! Choose another spot."
BAD_SYMBOL = "Symbol must be a single character."
AI_THINKING = "AI is making a move..."


class SetupError(ValueError):
    """A configured setup value (flag or environment) that cannot be used."""


class ConsoleIO:
    def __init__(self, stdin: TextIO, stdout: TextIO):
        self.stdin = stdin
        self.stdout = stdout
        self.closed = False

    def say(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def ask(self, prompt: str, default: str = "") -> str:
        if self.closed:
            raise ValueError("Console is closed")
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("Input closed while waiting for an answer")
        return line.strip() or default

    def close(self) -> None:
        if not self.closed:
            self.stdout.flush()
            self.closed = True


@contextmanager
def open_console(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> Iterator[ConsoleIO]:
    io = ConsoleIO(stdin or sys.stdin, stdout or sys.stdout)
    try:
        yield io
    finally:
        io.close()


def render_board(board: Board) -> str:
    cells = board.snapshot()
    rows = []
    for i in range(0, SIZE, 3):
        rows.append(f" {cells[i]} | {cells[i + 1]} | {cells[i + 2]} ")
        if i < 6:
            rows.append("-----------")
    return "\n" + "\n".join(rows) + "\n"


def parse_move(raw: str) -> Optional[int]:
    """1-based position text -> 0-based cell index, or None if not a number in 1..9."""
    try:
        pos = int(raw.strip()) - 1
    except ValueError:
        return None
    return pos if 0 <= pos < SIZE else None


def read_move(io: ConsoleIO, board: Board, player: Player) -> int:
    while True:
        move = parse_move(io.ask(f"{player.name}'s move (1-9): "))
        if move is None:
            io.say(BAD_NUMBER)
            continue
        if board[move] != EMPTY:
            io.say(OCCUPIED)
            continue
        return move


def _valid_symbol(symbol: str) -> bool:
    return len(symbol) == 1 and symbol != EMPTY


def _ask_symbol(io: ConsoleIO, name: str, default: str) -> str:
    while True:
        symbol = io.ask(f"{name}'s symbol (default: {default}): ", default).upper()
        if _valid_symbol(symbol):
            return symbol
        io.say(BAD_SYMBOL)


def _configured_symbol(mark: Optional[str], player: str) -> Optional[str]:
    if mark is not None and not _valid_symbol(mark):
        raise SetupError(f"Invalid symbol {mark!r} for {player}: {BAD_SYMBOL}")
    return mark


def ask_setup(io: ConsoleIO, config: GameConfig) -> GameConfig:
    """Fill in whatever the config leaves open by asking on the console."""
    configured1 = _configured_symbol(config.mark1, "player 1")
    configured2 = _configured_symbol(config.mark2, "player 2")
    name1 = config.name1 or io.ask("Enter Player 1 name: ", "Player 1")
    mark1 = configured1 or _ask_symbol(io, name1, config.first_mark)
    opponent = config.opponent
    if opponent is None:
        answer = io.ask("Human or Computer opponent? (h/c): ")
        opponent = "human" if answer.lower() == "h" else "computer"
    name2, mark2 = config.name2, configured2
    if opponent == "human":
        name2 = name2 or io.ask("Enter Player 2 name: ", "Player 2")
        mark2 = mark2 or _ask_symbol(io, name2, config.second_mark)
    return config.override(name1=name1, mark1=mark1, opponent=opponent, name2=name2, mark2=mark2)


def announce(result: StepResult) -> str:
    if result.outcome is Outcome.WON:
        return f"{result.player.name} wins!"
    return "It's a tie!"


def play(io: ConsoleIO, players: Tuple[Player, Player]) -> StepResult:
    """Run one game on the console and report the outcome."""
    game = Game(players)
    while True:
        io.say(render_board(game.board))
        player = game.current
        if player.needs_input:
            result = game.step(read_move(io, game.board, player))
        else:
            io.say(AI_THINKING)
            result = game.step()
        if result.finished:
            break
    io.say(render_board(game.board))
    io.say(announce(result))
    return result
