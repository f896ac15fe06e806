"""Result summaries returned by the bookkeeping passes."""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SportIngestion(BaseModel):
    fetched: int = 0
    inserted: int = 0
    updated: int = 0
    skipped_decided: int = 0
    failed: int = 0


class IngestionSummary(BaseModel):
    date: str
    sports: Dict[str, SportIngestion] = Field(default_factory=dict)
    failed_sports: List[str] = Field(default_factory=list)


class SettlementSummary(BaseModel):
    game_id: int
    outcome: str
    won: int = 0
    lost: int = 0
    pushed: int = 0
    skipped: int = 0
    failed: int = 0
    total_credited: Decimal = Decimal("0.00")

    @property
    def processed(self) -> int:
        return self.won + self.lost + self.pushed


class RetirementSummary(BaseModel):
    deleted: int = 0
    canceled: int = 0
    refunded_bets: int = 0
    kept: int = 0
    failed: int = 0


class ResolutionSummary(BaseModel):
    checked: int = 0
    resolved: int = 0
    already_resolved: int = 0
    not_final: int = 0
    not_found: int = 0
    failed: int = 0
    settlements: List[SettlementSummary] = Field(default_factory=list)
    retirement: Optional[RetirementSummary] = None


class ScheduledRunSummary(BaseModel):
    """Hourly job: ingestion followed by resolution."""

    ingestion: IngestionSummary
    resolution: ResolutionSummary
