"""Balance API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.api.dependencies import get_current_user_id
from betdesk.database import get_db
from betdesk.schemas import BalanceChangeRequest, BalanceResponse
from betdesk.services import balance_service

router = APIRouter(prefix="/balance", tags=["Balance"])


@router.get("", response_model=BalanceResponse)
async def get_balance(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Current balance, created with the starting amount on first read."""
    return await balance_service.get_or_create_balance(db, user_id)


@router.post("/add", response_model=BalanceResponse)
async def add_funds(
    request: BalanceChangeRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await balance_service.add_funds(db, user_id, request.amount)


@router.post("/deduct", response_model=BalanceResponse)
async def deduct_funds(
    request: BalanceChangeRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await balance_service.deduct_funds(db, user_id, request.amount)
