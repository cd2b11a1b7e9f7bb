from typing import Dict

from fastapi import APIRouter, Depends

from cashminder.dependencies import get_current_user_id, get_ledger_service
from cashminder.utils.ledger import LedgerService

router = APIRouter()


@router.get("")
def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    ledger: LedgerService = Depends(get_ledger_service),
) -> Dict:
    """All-time totals, top spending categories, recent transactions, budgets and goals."""
    return ledger.dashboard(user_id)
