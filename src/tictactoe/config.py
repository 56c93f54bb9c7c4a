"""Game setup configuration.

Environment-first: TTT_* variables provide defaults, CLI flags override them.
Fields left as None are asked for interactively by the console layer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

OPPONENTS = ("human", "computer")
DEFAULT_MARK1 = "O"
DEFAULT_MARK2 = "X"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def search_cache_from_env() -> bool:
    return _env_flag("TTT_SEARCH_CACHE", True)


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else None


@dataclass(frozen=True)
class GameConfig:
    name1: Optional[str] = None
    mark1: Optional[str] = None
    name2: Optional[str] = None
    mark2: Optional[str] = None
    opponent: Optional[str] = None  # "human" | "computer"
    search_cache: bool = True

    def __post_init__(self) -> None:
        if self.opponent is not None and self.opponent not in OPPONENTS:
            raise ValueError(f"Unknown opponent {self.opponent!r}; expected one of {OPPONENTS}")

    @classmethod
    def from_env(cls) -> "GameConfig":
        mark1 = _env_str("TTT_PLAYER1_MARK")
        mark2 = _env_str("TTT_PLAYER2_MARK")
        opponent = _env_str("TTT_OPPONENT")
        return cls(
            name1=_env_str("TTT_PLAYER1_NAME"),
            mark1=mark1.upper() if mark1 else None,
            name2=_env_str("TTT_PLAYER2_NAME"),
            mark2=mark2.upper() if mark2 else None,
            opponent=opponent.lower() if opponent else None,
            search_cache=search_cache_from_env(),
        )

    def override(self, **changes: object) -> "GameConfig":
        """Copy with the given fields replaced, ignoring None values."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def first_mark(self) -> str:
        return self.mark1 or DEFAULT_MARK1

    @property
    def second_mark(self) -> str:
        return self.mark2 or DEFAULT_MARK2

    @staticmethod
    def computer_mark(human_mark: str) -> str:
        return "O" if human_mark == "X" else "X"
