"""Chess.com stat card engine."""

from .card import CardService, CardView, build_card_view
from .chess_com_client import (
    ChessComClient,
    ChessComError,
    NoArchivesError,
    NoRecentGamesError,
    PlayerNotFoundError,
)
from .game_data import GameRecord, PlayerSide
from .pgn_features import GameFeatures, ResultClass, extract_features
from .stat_engine import StatResult, compute_stats, rating_bonus, scale_raw

__all__ = [
    'CardService',
    'CardView',
    'build_card_view',
    'ChessComClient',
    'ChessComError',
    'NoArchivesError',
    'NoRecentGamesError',
    'PlayerNotFoundError',
    'GameRecord',
    'PlayerSide',
    'GameFeatures',
    'ResultClass',
    'extract_features',
    'StatResult',
    'compute_stats',
    'rating_bonus',
    'scale_raw',
]
