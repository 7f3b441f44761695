"""
Card assembly: fetch a player's data, compute stats, shape the renderer payload.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple
from .chess_com_client import ChessComClient, PlayerProfile, select_rating
from .stat_engine import StatResult, compute_stats

logger = logging.getLogger(__name__)

RECENT_GAMES_LIMIT = int(os.getenv("CHESSCARD_RECENT_GAMES", "30"))
RATING_PLACEHOLDER = "—"

# Display order on the card
STAT_LABELS = (
    ('ATK', 'ATTACK'),
    ('DEF', 'DEFENSE'),
    ('CAL', 'CALCULATION'),
    ('STR', 'STRATEGY'),
    ('INT', 'INTELLIGENCE'),
    ('TIM', 'TIMING'),
)


@dataclass(frozen=True)
class StatLine:
    key: str
    label: str
    value: int


@dataclass(frozen=True)
class CardView:
    """Everything a renderer needs to draw the card."""
    username: str
    avatar: Optional[str]
    title: Optional[str]
    meta: str
    overall: int
    wins: int
    draws: int
    losses: int
    rating: Optional[int]
    rating_display: str
    footer: str
    total_games: int
    stats: Tuple[StatLine, ...]


def build_card_view(profile: PlayerProfile, rating: Optional[int], stats: StatResult) -> CardView:
    """Map profile fields and stats onto the card layout."""
    meta = f"{profile.title} · {stats.total} GAMES" if profile.title else f"{stats.total} GAMES"
    return CardView(
        username=profile.username.upper(),
        avatar=profile.avatar,
        title=profile.title,
        meta=meta,
        overall=stats.OVR,
        wins=stats.wins,
        draws=stats.draws,
        losses=stats.losses,
        rating=rating,
        rating_display=str(rating) if rating else RATING_PLACEHOLDER,
        footer=f"CHESSCARD · {stats.total} GAMES ANALYZED",
        total_games=stats.total,
        stats=tuple(StatLine(key=key, label=label, value=getattr(stats, key)) for key, label in STAT_LABELS)
    )


class CardService:
    """Builds stat cards from live chess.com data."""

    def __init__(self, client: Optional[ChessComClient] = None, games_limit: int = RECENT_GAMES_LIMIT):
        self.client = client or ChessComClient()
        self.games_limit = games_limit

    def build_card(self, username: str) -> CardView:
        """
        Build the card for a chess.com player.

        Raises:
            ValueError: username is empty
            ChessComError: profile, archives or recent games are unavailable
        """
        username = (username or "").strip()
        if not username:
            raise ValueError("Username is required")

        profile = self.client.get_profile(username)

        snapshots = self.client.get_ratings(username)
        for snapshot in snapshots:
            logger.info(f"{snapshot.time_control}: {snapshot.rating} ({snapshot.games} games)")
        rating = select_rating(snapshots)
        logger.info(f"Using rating {rating} for {username}")

        games = self.client.get_recent_games(username, limit=self.games_limit)
        stats = compute_stats(games, username, rating)
        return build_card_view(profile, rating, stats)
