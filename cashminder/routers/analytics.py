"""
Analytics Router
Period analytics (totals, trends, category breakdown, insights) for the current user
"""
from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query

from cashminder.dependencies import get_current_user_id, get_ledger_service
from cashminder.utils.analytics import resolve_time_ranges
from cashminder.utils.ledger import LedgerService

router = APIRouter()


@router.get("/ranges")
def list_time_ranges() -> Dict:
    """The selectable named windows, resolved against today."""
    return {key: time_range.to_dict() for key, time_range in resolve_time_ranges().items()}


@router.get("")
def get_analytics(
    range_key: Optional[str] = Query(None, alias="range"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    user_id: str = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service),
) -> Dict:
    """
    Either a named range (?range=last3months) or a custom one (?start=...&end=...).
    Without parameters the configured default range is used.
    """
    summary = ledger.analytics(user_id, range_key=range_key, start=start, end=end)
    return summary.to_dict()
