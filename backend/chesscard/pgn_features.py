"""
Per-game signal extraction from PGN text - lightweight, regex only.

Nothing here replays moves. Counts are taken over the whole PGN string
(tag lines included) the same way the card has always counted them.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple
from .game_data import GameRecord


LOSS_RESULTS = frozenset({"checkmated", "resigned", "timeout", "abandoned"})

CAPTURE_RE = re.compile(r'x')
CHECK_RE = re.compile(r'\+')
CASTLE_RE = re.compile(r'O-O')  # O-O-O matches once
PROMOTION_RE = re.compile(r'=[QRBN]')
MOVE_NUMBER_RE = re.compile(r'\d+\.')
OPENING_TAG_RE = re.compile(r'\[Opening "([^"]+)"\]')
TAG_LINE_RE = re.compile(r'\[.*?\]\s*', re.DOTALL)
FIRST_MOVE_RE = re.compile(r'1\.\s*(\S+)')


class ResultClass(Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True)
class GameFeatures:
    """Raw signals for one game, from the acting player's point of view."""
    is_white: bool
    my_result: str
    opponent_result: str
    result_class: ResultClass
    opponent_resigned: bool
    captures: int
    checks: int
    castles: int
    promotions: int
    move_number_count: int
    opening_labels: Tuple[str, ...]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def classify_result(result: str) -> ResultClass:
    """Map a chess.com result label to win/loss/draw. Unknown labels count as draws."""
    if result == "win":
        return ResultClass.WIN
    if result in LOSS_RESULTS:
        return ResultClass.LOSS
    return ResultClass.DRAW


def extract_opening_labels(pgn: str) -> List[str]:
    """
    Opening labels for a game.

    Both the `Opening` tag family (text before the first ":") and the first
    move token are returned when present, so a tagged game contributes two
    labels to the opening set.
    """
    labels = []

    opening_tag = OPENING_TAG_RE.search(pgn)
    if opening_tag:
        labels.append(opening_tag.group(1).split(":")[0].strip())

    # First move as opening proxy (e4, d4, Nf3, c4 ...)
    moves_section = TAG_LINE_RE.sub('', pgn).strip()
    first_move = FIRST_MOVE_RE.search(moves_section)
    if first_move:
        labels.append(first_move.group(1))

    return labels


def extract_features(game: GameRecord, username: str) -> GameFeatures:
    """Scan one game for the signals the stat card is built from."""
    pgn = _text(getattr(game, "pgn", None))
    white = getattr(game, "white", None)
    black = getattr(game, "black", None)
    is_white = _text(getattr(white, "username", None)).lower() == _text(username).lower()

    white_result = _text(getattr(white, "result", None))
    black_result = _text(getattr(black, "result", None))
    my_result = white_result if is_white else black_result
    opponent_result = black_result if is_white else white_result

    return GameFeatures(
        is_white=is_white,
        my_result=my_result,
        opponent_result=opponent_result,
        result_class=classify_result(my_result),
        opponent_resigned=opponent_result == "resigned",
        captures=len(CAPTURE_RE.findall(pgn)),
        checks=len(CHECK_RE.findall(pgn)),
        castles=len(CASTLE_RE.findall(pgn)),
        promotions=len(PROMOTION_RE.findall(pgn)),
        move_number_count=len(MOVE_NUMBER_RE.findall(pgn)),
        opening_labels=tuple(extract_opening_labels(pgn))
    )
