"""Games API routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.database import get_db
from betdesk.enums import Sport
from betdesk.exceptions import NotFoundError
from betdesk.schemas import GameResponse
from betdesk.services import game_service

router = APIRouter(tags=["Games"])


@router.get("/games", response_model=list[GameResponse])
async def list_games(
    sport: Optional[Sport] = None,
    db: AsyncSession = Depends(get_db),
):
    """Games that have not been settled yet."""
    return await game_service.get_open_games(db, sport=sport)


@router.get("/games/{game_id}", response_model=GameResponse)
async def get_game(game_id: int, db: AsyncSession = Depends(get_db)):
    game = await game_service.get_game(db, game_id)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found", reason="game_not_found")
    return game
