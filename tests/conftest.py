"""Shared pytest fixtures and builders used across the test suite."""

from typing import Any, Dict, List, Optional

import pytest
import requests

from chesscard.chess_com_client import (
    ChessComClient,
    NoRecentGamesError,
    PlayerNotFoundError,
    PlayerProfile,
    RatingSnapshot,
)
from chesscard.game_data import GameRecord, PlayerSide

ITALIAN_PGN = """[Event "Live Chess"]
[Site "Chess.com"]
[White "Hero"]
[Black "Villain"]
[Opening "Italian Game: Two Knights"]

1. e4 e5 2. Nf3 Nc6 3. Bc4 Nf6 4. O-O Be7 5. d3 d6 6. Bxf7+ Kxf7 7. Ng5 Kg8 8. c3 h6 9. Nf3 a6 10. a4 b6 1-0
"""


def make_game(
    pgn: str = "1. e4 e5 2. Nf3 Nc6",
    white: str = "Hero",
    black: str = "Villain",
    white_result: Optional[str] = "win",
    black_result: Optional[str] = "checkmated",
) -> GameRecord:
    return GameRecord(
        pgn=pgn,
        white=PlayerSide(username=white, result=white_result),
        black=PlayerSide(username=black, result=black_result),
    )


class StubResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class StubSession:
    """Answers GETs from a url -> (status, payload) table; unknown urls are 404s."""

    def __init__(self, routes: Dict[str, Any]) -> None:
        self.routes = routes
        self.headers: Dict[str, str] = {}
        self.requested: List[str] = []

    def get(self, url: str, timeout: float = None) -> StubResponse:
        self.requested.append(url)
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return StubResponse(404)
        status, payload = route
        return StubResponse(status, payload)


@pytest.fixture
def make_client():
    """Build a ChessComClient over a StubSession, without rate-limit sleeps."""

    def _make(routes: Dict[str, Any]) -> ChessComClient:
        client = ChessComClient(session=StubSession(routes))
        client.RATE_LIMIT_DELAY = 0
        return client

    return _make


class FakeClient:
    """Stands in for ChessComClient in card and API tests."""

    def __init__(self, games=None, snapshots=None, profile=None, error=None):
        self.games = games if games is not None else [make_game(pgn=ITALIAN_PGN)]
        self.snapshots = snapshots if snapshots is not None else [
            RatingSnapshot("blitz", 1510, 20),
            RatingSnapshot("bullet", 0, 0),
            RatingSnapshot("rapid", 1900, 70),
        ]
        self.profile = profile or PlayerProfile(username="Hero", title="GM")
        self.error = error
        self.limits = []

    def get_profile(self, username):
        if isinstance(self.error, PlayerNotFoundError):
            raise self.error
        return self.profile

    def get_ratings(self, username):
        return self.snapshots

    def get_recent_games(self, username, limit=30):
        self.limits.append(limit)
        if isinstance(self.error, NoRecentGamesError):
            raise self.error
        return self.games
