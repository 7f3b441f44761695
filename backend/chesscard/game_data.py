"""
Data models for chess.com games.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _text(value: Any) -> Optional[str]:
    """Strings pass through; anything else from the API becomes None."""
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class PlayerSide:
    """One side of a chess.com game."""
    username: str
    result: Optional[str] = None  # "win", "checkmated", "resigned", "agreed", ...

    @classmethod
    def from_api(cls, data: Any) -> "PlayerSide":
        """Build from the `white`/`black` object of an archive game."""
        if not isinstance(data, dict):
            return cls(username="")
        return cls(
            username=_text(data.get('username')) or "",
            result=_text(data.get('result'))
        )


@dataclass(frozen=True)
class GameRecord:
    """A game as returned by a chess.com monthly archive."""
    pgn: str  # Tag lines plus move list
    white: PlayerSide = field(default_factory=lambda: PlayerSide(username=""))
    black: PlayerSide = field(default_factory=lambda: PlayerSide(username=""))

    @classmethod
    def from_api(cls, data: Any) -> "GameRecord":
        """Build from one entry of an archive's `games` list. Missing or mistyped keys are tolerated."""
        if not isinstance(data, dict):
            return cls(pgn="")
        return cls(
            pgn=_text(data.get('pgn')) or "",
            white=PlayerSide.from_api(data.get('white')),
            black=PlayerSide.from_api(data.get('black'))
        )
