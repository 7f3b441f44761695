"""
ChessCard Backend API
"""
import logging
import os
from fastapi import FastAPI, Query, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from chesscard.card import CardService, CardView
from chesscard.chess_com_client import ChessComClient, ChessComError
from chesscard.game_data import GameRecord
from chesscard.stat_engine import StatResult, compute_stats

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = os.getenv(
    "CHESSCARD_CORS_ORIGINS",
    "http://localhost:5173,http://localhost:5174,http://localhost:3000"
).split(",")

app = FastAPI(title="ChessCard API")


# ============================================
# Pydantic models for request/response
# ============================================

class StatsRequest(BaseModel):
    username: str
    rating: Optional[int] = None
    games: List[Dict[str, Any]] = []  # chess.com archive game objects


class StatsResponse(BaseModel):
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


class StatLineResponse(BaseModel):
    key: str
    label: str
    value: int


class CardResponse(BaseModel):
    username: str
    avatar: Optional[str] = None
    title: Optional[str] = None
    meta: str
    overall: int
    wins: int
    draws: int
    losses: int
    rating: Optional[int] = None
    ratingDisplay: str
    footer: str
    totalGames: int
    stats: List[StatLineResponse]

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in CORS_ORIGINS if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Helper functions
# ============================================

def get_card_service() -> CardService:
    """Dependency providing a card service with a fresh chess.com client."""
    return CardService(ChessComClient())


def stats_to_response(stats: StatResult) -> StatsResponse:
    """Convert StatResult to StatsResponse."""
    return StatsResponse(
        OVR=stats.OVR,
        ATK=stats.ATK,
        DEF=stats.DEF,
        CAL=stats.CAL,
        STR=stats.STR,
        INT=stats.INT,
        TIM=stats.TIM,
        wins=stats.wins,
        losses=stats.losses,
        draws=stats.draws,
        total=stats.total,
    )


def card_to_response(card: CardView) -> CardResponse:
    """Convert CardView to CardResponse."""
    return CardResponse(
        username=card.username,
        avatar=card.avatar,
        title=card.title,
        meta=card.meta,
        overall=card.overall,
        wins=card.wins,
        draws=card.draws,
        losses=card.losses,
        rating=card.rating,
        ratingDisplay=card.rating_display,
        footer=card.footer,
        totalGames=card.total_games,
        stats=[StatLineResponse(key=s.key, label=s.label, value=s.value) for s in card.stats],
    )


# ============================================
# Card endpoints
# ============================================

@app.get("/api/card", response_model=CardResponse)
def get_card(
    username: str = Query("", description="Chess.com username"),
    service: CardService = Depends(get_card_service)
):
    """
    Build the stat card for a chess.com player from their latest games.
    """
    if not username.strip():
        raise HTTPException(status_code=400, detail="Username is required")

    try:
        card = service.build_card(username)
    except ChessComError as e:
        logger.info(f"Card for {username} unavailable: {e}")
        raise HTTPException(status_code=404, detail=str(e))

    return card_to_response(card)


@app.post("/api/stats", response_model=StatsResponse)
async def post_stats(request: StatsRequest):
    """
    Compute card stats for caller-supplied games (no chess.com fetch).
    """
    if not request.username.strip():
        raise HTTPException(status_code=400, detail="Username is required")

    games = [GameRecord.from_api(game) for game in request.games]
    stats = compute_stats(games, request.username.strip(), request.rating)
    return stats_to_response(stats)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
