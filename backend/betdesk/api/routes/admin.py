"""Admin API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.api.dependencies import get_sportsdata_client, require_admin
from betdesk.database import get_db
from betdesk.schemas import IngestionSummary, ResolutionSummary, RetirementSummary
from betdesk.services import odds_service, result_service, retirement_service
from betdesk.services.sportsdata import SportsDataClient

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("/cleanup-old-games", response_model=RetirementSummary)
async def cleanup_old_games(db: AsyncSession = Depends(get_db)):
    """Delete or cancel-and-refund games stuck without a result."""
    return await retirement_service.cancel_stale_games(db)


@router.post("/ingest", response_model=IngestionSummary)
async def trigger_ingestion(
    db: AsyncSession = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
):
    """Run one odds ingestion pass now."""
    return await odds_service.ingest_today(db, client)


@router.post("/resolve", response_model=ResolutionSummary)
async def trigger_resolution(
    db: AsyncSession = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
):
    """Run one result resolution pass now."""
    return await result_service.resolve_pending_games(db, client)
