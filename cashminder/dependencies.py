from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, status

from cashminder.core.config import settings
from cashminder.db.repository import InMemoryRepository
from cashminder.models.budget import Budget
from cashminder.models.category import Category
from cashminder.models.goal import SavingsGoal
from cashminder.models.transaction import Transaction
from cashminder.utils.event_bus import EventBus
from cashminder.utils.ledger import LedgerService


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User id forwarded by the authenticating gateway."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User id required")
    return x_user_id


def _build_repositories():
    if settings.STORAGE_BACKEND == "dynamo":
        from cashminder.db.dynamo import DynamoRepository, get_table

        return (
            DynamoRepository(get_table(settings.DYNAMO_TRANSACTIONS_TABLE), Transaction),
            DynamoRepository(get_table(settings.DYNAMO_CATEGORIES_TABLE), Category),
            DynamoRepository(get_table(settings.DYNAMO_BUDGETS_TABLE), Budget),
            DynamoRepository(get_table(settings.DYNAMO_GOALS_TABLE), SavingsGoal),
        )
    return (
        InMemoryRepository(Transaction),
        InMemoryRepository(Category),
        InMemoryRepository(Budget),
        InMemoryRepository(SavingsGoal),
    )


@lru_cache
def get_ledger_service() -> LedgerService:
    transactions, categories, budgets, goals = _build_repositories()
    return LedgerService(
        transactions,
        categories,
        budgets,
        goals,
        bus=EventBus(),
        trend_months=settings.MONTHLY_TREND_MONTHS,
        default_color=settings.DEFAULT_CATEGORY_COLOR,
        default_range=settings.DEFAULT_TIME_RANGE,
        recent_limit=settings.RECENT_TRANSACTIONS_LIMIT,
    )
