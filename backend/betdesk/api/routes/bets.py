"""Bets API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.api.dependencies import get_current_user_id
from betdesk.database import get_db
from betdesk.enums import BetStatus
from betdesk.schemas import PlaceBetRequest, PlacedBetResponse
from betdesk.services import bet_service

router = APIRouter(tags=["Bets"])


@router.get("/placed-bets", response_model=list[PlacedBetResponse])
async def list_placed_bets(
    bet_status: Optional[BetStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The caller's bets, newest first."""
    return await bet_service.get_user_bets(db, user_id, status=bet_status, limit=limit)


@router.post(
    "/place-bet",
    response_model=PlacedBetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def place_bet(
    request: PlaceBetRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    bet = await bet_service.place_bet(
        db,
        user_id=user_id,
        game_id=request.game_id,
        side=request.side,
        amount=request.amount,
    )
    return await bet_service.get_bet(db, bet.id)
