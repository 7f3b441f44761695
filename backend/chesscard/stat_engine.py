"""
Stat card synthesis: folds per-game features into the six card stats plus OVR.

Each stat is a raw game signal scaled onto 1-85, plus a rating bonus of 0-14,
clamped to 1-99.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set
from .game_data import GameRecord
from .pgn_features import GameFeatures, ResultClass, extract_features

logger = logging.getLogger(__name__)

SCORE_MIN = 1
SCORE_MAX = 99
SCALE_SPAN = 84  # scale_raw output is 1..85, leaving room for the bonus

RATING_FLOOR = 400
RATING_CEILING = 3300
RATING_BONUS_MAX = 14
RATING_BONUS_EXPONENT = 0.6
UNRATED_BONUS = 5

# (low, high) raw ranges per stat
ATK_RANGE = (2, 40)
DEF_RANGE = (0, 100)
CAL_RANGE = (8, 70)
STR_RANGE = (10, 70)
INT_RANGE = (10, 90)
TIM_RANGE = (5, 75)

OVR_WEIGHTS = {
    'ATK': 0.15,
    'DEF': 0.15,
    'CAL': 0.2,
    'STR': 0.15,
    'INT': 0.25,
    'TIM': 0.1,
}


def round_half_up(value: float) -> int:
    """Round .5 upwards (2.5 -> 3, -2.5 -> -2) rather than to even."""
    return int(math.floor(value + 0.5))


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def clamp_score(value: float) -> int:
    """Round and clamp to the card's 1-99 range."""
    return min(SCORE_MAX, max(SCORE_MIN, round_half_up(value)))


def scale_raw(raw: float, low: float, high: float) -> int:
    """Clamp raw into [low, high] and map it linearly onto 1-85."""
    pct = _clamp01((raw - low) / (high - low))
    return round_half_up(pct * SCALE_SPAN + 1)


def rating_bonus(rating: Optional[int]) -> int:
    """
    Bonus points for the player's rating.

    400 -> 0, 1000 -> 5, 1500 -> 8, 2000 -> 10, 2500 -> 12, 3000 -> 13, 3300 -> 14.
    A missing or zero rating gets a flat 5.
    """
    if not rating:
        return UNRATED_BONUS
    pct = _clamp01((rating - RATING_FLOOR) / (RATING_CEILING - RATING_FLOOR))
    return round_half_up(math.pow(pct, RATING_BONUS_EXPONENT) * RATING_BONUS_MAX)


@dataclass
class AggregateCounters:
    """Running totals across a batch of games."""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    opponent_resignations: int = 0
    total_captures: int = 0
    total_checks: int = 0
    total_castles: int = 0
    total_promotions: int = 0
    move_counts: List[int] = field(default_factory=list)
    opening_labels: Set[str] = field(default_factory=set)

    def add(self, features: GameFeatures):
        """Fold one game's features into the totals."""
        if features.result_class is ResultClass.WIN:
            self.wins += 1
        elif features.result_class is ResultClass.LOSS:
            self.losses += 1
        else:
            self.draws += 1

        if features.opponent_resigned:
            self.opponent_resignations += 1

        self.total_captures += features.captures
        self.total_checks += features.checks
        self.total_castles += features.castles
        self.total_promotions += features.promotions
        self.move_counts.append(features.move_number_count)
        self.opening_labels.update(features.opening_labels)


@dataclass(frozen=True)
class StatResult:
    """Card stats. Every score is an int in 1-99."""
    OVR: int
    ATK: int
    DEF: int
    CAL: int
    STR: int
    INT: int
    TIM: int
    wins: int
    losses: int
    draws: int
    total: int


def synthesize(counters: AggregateCounters, game_count: int, rating: Optional[int]) -> StatResult:
    """Turn aggregate counters into card stats."""
    n = game_count or 1
    avg_moves = sum(counters.move_counts) / n
    avg_captures = counters.total_captures / n
    avg_checks = counters.total_checks / n
    castle_pct = (counters.total_castles / n) * 100
    win_rate = (counters.wins / n) * 100
    draw_rate = (counters.draws / n) * 100
    bonus = rating_bonus(rating)

    # ATK: checks need intent, captures count for less
    atk_raw = (avg_checks * 3) + (avg_captures * 0.8)
    atk = clamp_score(scale_raw(atk_raw, *ATK_RANGE) + bonus)

    # DEF: castling consistency
    def_ = clamp_score(scale_raw(castle_pct, *DEF_RANGE) + bonus)

    # CAL: game length, 8 moves (quick blunder) to 70 (long endgame)
    cal = clamp_score(scale_raw(avg_moves, *CAL_RANGE) + bonus)

    # STR: opening variety plus draw rate
    str_raw = (len(counters.opening_labels) * 10) + (draw_rate * 0.3)
    str_ = clamp_score(scale_raw(str_raw, *STR_RANGE) + bonus)

    # INT: win rate
    int_ = clamp_score(scale_raw(win_rate, *INT_RANGE) + bonus)

    # TIM: resignations won half, win rate half
    clean_wins = (counters.opponent_resignations / counters.wins) * 100 if counters.wins > 0 else 0
    tim_raw = (clean_wins * 0.5) + (win_rate * 0.5)
    tim = clamp_score(scale_raw(tim_raw, *TIM_RANGE) + bonus)

    ovr = clamp_score(
        atk * OVR_WEIGHTS['ATK']
        + def_ * OVR_WEIGHTS['DEF']
        + cal * OVR_WEIGHTS['CAL']
        + str_ * OVR_WEIGHTS['STR']
        + int_ * OVR_WEIGHTS['INT']
        + tim * OVR_WEIGHTS['TIM']
    )

    logger.debug(
        f"Rating bonus: {bonus} | avgCap: {avg_captures:.1f} avgChecks: {avg_checks:.1f} "
        f"castlePct: {castle_pct:.0f}% avgMoves: {avg_moves:.1f} "
        f"openings: {len(counters.opening_labels)} winRate: {win_rate:.0f}%"
    )

    return StatResult(
        OVR=ovr,
        ATK=atk,
        DEF=def_,
        CAL=cal,
        STR=str_,
        INT=int_,
        TIM=tim,
        wins=counters.wins,
        losses=counters.losses,
        draws=counters.draws,
        total=n
    )


def compute_stats(games: Sequence[GameRecord], username: str, rating: Optional[int]) -> StatResult:
    """
    Compute card stats for `username` from a batch of games.

    Args:
        games: Recent games (chess.com archive records)
        username: The player the card is for, matched case-insensitively
        rating: Rating of the player's main time control, or None

    Returns:
        StatResult; an empty batch yields total=1 and bonus-only scores
    """
    counters = AggregateCounters()
    for game in games:
        counters.add(extract_features(game, username))
    return synthesize(counters, len(games), rating)
