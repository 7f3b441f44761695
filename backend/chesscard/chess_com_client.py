"""
Chess.com API client for fetching profile, rating and recent game data.
"""
import requests
import os
import time
import logging
from dataclasses import dataclass
from typing import List, Optional
from .game_data import GameRecord

logger = logging.getLogger(__name__)

USER_AGENT = os.getenv("CHESSCARD_USER_AGENT", "ChessCard/1.0")
REQUEST_TIMEOUT = float(os.getenv("CHESSCARD_REQUEST_TIMEOUT", "10"))

# Rating pools considered for the card, in tie-break order
TIME_CONTROLS = ("blitz", "bullet", "rapid")


class ChessComError(Exception):
    """Base error for data chess.com could not provide. Message is user-facing."""


class PlayerNotFoundError(ChessComError):
    def __init__(self, message: str = "Player not found on chess.com"):
        super().__init__(message)


class NoArchivesError(ChessComError):
    def __init__(self, message: str = "No games found"):
        super().__init__(message)


class NoRecentGamesError(ChessComError):
    def __init__(self, message: str = "No recent games found"):
        super().__init__(message)


@dataclass(frozen=True)
class PlayerProfile:
    """Public profile fields shown on the card."""
    username: str
    avatar: Optional[str] = None
    title: Optional[str] = None  # "GM", "IM", ...


@dataclass(frozen=True)
class RatingSnapshot:
    """Latest rating and games played for one time control."""
    time_control: str
    rating: int
    games: int


def select_rating(snapshots: List[RatingSnapshot]) -> Optional[int]:
    """Rating of the most-played time control (earliest wins ties), or None if unrated."""
    if not snapshots:
        return None
    best = snapshots[0]
    for snapshot in snapshots[1:]:
        if snapshot.games > best.games:
            best = snapshot
    return best.rating or None


class ChessComClient:
    """Client for interacting with Chess.com Published Data API."""

    BASE_URL = "https://api.chess.com/pub"
    RATE_LIMIT_DELAY = 0.1  # Delay between requests in seconds

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize the Chess.com API client.

        Args:
            session: Session to reuse; a new one is created if omitted
        """
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': USER_AGENT
        })

    def _make_request(self, url: str, allow_404: bool = False) -> Optional[dict]:
        """
        Make an API request with error handling and rate limiting.
        """
        time.sleep(self.RATE_LIMIT_DELAY)
        try:
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
            if response.status_code == 404 and allow_404:
                return None
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404 and allow_404:
                return None
            logger.warning(f"HTTP error fetching {url}: {e}")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error fetching {url}: {str(e)}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {str(e)}")
            return None

    def get_profile(self, username: str) -> PlayerProfile:
        """Get the public profile of a player."""
        data = self._make_request(f"{self.BASE_URL}/player/{username}", allow_404=True)
        if not data:
            raise PlayerNotFoundError()
        return PlayerProfile(
            username=data.get('username') or username,
            avatar=data.get('avatar') or None,
            title=data.get('title') or None
        )

    def get_ratings(self, username: str) -> List[RatingSnapshot]:
        """
        Get last rating and games played for each time control.

        A failed stats request is not fatal; every time control then reads as unrated.
        """
        data = self._make_request(f"{self.BASE_URL}/player/{username}/stats", allow_404=True) or {}

        snapshots = []
        for time_control in TIME_CONTROLS:
            section = data.get(f"chess_{time_control}") or {}
            last = section.get('last') or {}
            record = section.get('record') or {}
            games = (record.get('win') or 0) + (record.get('loss') or 0) + (record.get('draw') or 0)
            snapshots.append(RatingSnapshot(
                time_control=time_control,
                rating=last.get('rating') or 0,
                games=games
            ))
        return snapshots

    def get_archives(self, username: str) -> List[str]:
        """Get the list of monthly archive URLs, oldest first."""
        data = self._make_request(f"{self.BASE_URL}/player/{username}/games/archives")
        if not data:
            return []
        return data.get('archives') or []

    def get_monthly_games(self, archive_url: str) -> Optional[dict]:
        """Get games from a monthly archive."""
        return self._make_request(archive_url, allow_404=True)

    def get_recent_games(self, username: str, limit: int = 30) -> List[GameRecord]:
        """
        Fetch the most recent games from the latest monthly archive.

        Args:
            username: Chess.com username
            limit: Keep at most this many of the archive's last games

        Returns:
            List of GameRecord, oldest first
        """
        archives = self.get_archives(username)
        if not archives:
            raise NoArchivesError()

        monthly_data = self.get_monthly_games(archives[-1]) or {}
        games = monthly_data.get('games') or []
        if not games:
            raise NoRecentGamesError()

        recent = games[-limit:] if limit > 0 else games
        logger.info(f"Using {len(recent)} of {len(games)} games from {archives[-1]}")
        return [GameRecord.from_api(game) for game in recent]
