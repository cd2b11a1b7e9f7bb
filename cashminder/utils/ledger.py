"""
Ledger service: the one place where transactions are written and where the
stored data is handed to the analytics and planning helpers.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from cashminder.core.exceptions import (
    CategoryDirectionError,
    InvalidTimeRangeError,
    NotFoundError,
)
from cashminder.db.repository import Repository
from cashminder.models.budget import Budget
from cashminder.models.category import Category
from cashminder.models.dates import to_local_naive
from cashminder.models.goal import SavingsGoal
from cashminder.models.query import OwnerQuery, TransactionQuery
from cashminder.models.transaction import Transaction, TransactionCreate, TransactionUpdate
from cashminder.utils.analytics import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_TREND_MONTHS,
    AnalyticsSummary,
    TimeRange,
    compute_analytics,
    get_time_range,
)
from cashminder.utils.event_bus import EventBus, EventType
from cashminder.utils.planning import contribute_to_goal, dashboard_summary, goal_progress

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(
        self,
        transactions: Repository[Transaction],
        categories: Repository[Category],
        budgets: Repository[Budget],
        goals: Repository[SavingsGoal],
        bus: Optional[EventBus] = None,
        trend_months: int = DEFAULT_TREND_MONTHS,
        default_color: str = DEFAULT_CATEGORY_COLOR,
        default_range: str = "last30days",
        recent_limit: int = 5,
    ) -> None:
        self.transactions = transactions
        self.categories = categories
        self.budgets = budgets
        self.goals = goals
        self.bus = bus or EventBus()
        self.trend_months = trend_months
        self.default_color = default_color
        self.default_range = default_range
        self.recent_limit = recent_limit

    # -- transactions -----------------------------------------------------

    def add_transaction(self, user_id: str, payload: TransactionCreate) -> Transaction:
        self._check_category(user_id, payload.category_id, payload.is_income)

        transaction = Transaction(user_id=user_id, **payload.model_dump())
        self.transactions.save(transaction)
        logger.info(f"New transaction created: {transaction.id} for user {user_id}")

        self.bus.emit(EventType.TRANSACTION_CREATED, user_id=user_id, transaction_id=transaction.id)
        self.bus.emit(EventType.TRANSACTIONS_CHANGED, user_id=user_id)
        return transaction

    def update_transaction(
        self, user_id: str, transaction_id: str, changes: TransactionUpdate
    ) -> Transaction:
        existing = self._owned_transaction(user_id, transaction_id)
        updated = existing.model_copy(update=changes.model_dump(exclude_unset=True, exclude_none=True))
        # re-validate so the amount invariant holds on the merged record
        updated = Transaction.model_validate(updated.model_dump())

        self._check_category(user_id, updated.category_id, updated.is_income)
        self.transactions.save(updated)
        logger.info(f"Transaction updated: {transaction_id}")

        self.bus.emit(EventType.TRANSACTION_UPDATED, user_id=user_id, transaction_id=transaction_id)
        self.bus.emit(EventType.TRANSACTIONS_CHANGED, user_id=user_id)
        return updated

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        self._owned_transaction(user_id, transaction_id)
        self.transactions.delete(transaction_id)
        logger.info(f"Transaction deleted: {transaction_id}")

        self.bus.emit(EventType.TRANSACTION_DELETED, user_id=user_id, transaction_id=transaction_id)
        self.bus.emit(EventType.TRANSACTIONS_CHANGED, user_id=user_id)

    def list_transactions(self, query: TransactionQuery) -> List[Transaction]:
        transactions = self.transactions.list(query)
        logger.debug(f"Retrieved {len(transactions)} transactions for user {query.user_id}")
        return transactions

    # -- goals ------------------------------------------------------------

    def add_to_goal(self, user_id: str, goal_id: str, amount: float) -> Dict[str, Any]:
        goal = self.goals.get(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError("Goal", goal_id)
        goal = self.goals.save(contribute_to_goal(goal, amount))
        return goal_progress(goal).to_dict()

    # -- read models ------------------------------------------------------

    def analytics(
        self,
        user_id: str,
        range_key: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsSummary:
        now = to_local_naive(now) or datetime.now()
        if start is not None or end is not None:
            if start is None or end is None:
                raise InvalidTimeRangeError("A custom range needs both start and end")
            start, end = to_local_naive(start), to_local_naive(end)
            if start > end:
                raise InvalidTimeRangeError("start must not be after end")
            time_range = TimeRange(start, end, "Custom range")
        else:
            time_range = get_time_range(range_key or self.default_range, now)

        return compute_analytics(
            self._all_transactions(user_id),
            self._categories(user_id),
            time_range,
            now=now,
            months=self.trend_months,
            default_color=self.default_color,
        )

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        owner = OwnerQuery(user_id=user_id)
        summary = dashboard_summary(
            self._all_transactions(user_id),
            self._categories(user_id),
            self.budgets.list(owner),
            recent_limit=self.recent_limit,
            default_color=self.default_color,
        )
        summary["goals"] = [goal_progress(goal).to_dict() for goal in self.goals.list(owner)]
        return summary

    # -- helpers ----------------------------------------------------------

    def _all_transactions(self, user_id: str) -> List[Transaction]:
        return self.transactions.list(OwnerQuery(user_id=user_id))

    def _categories(self, user_id: str) -> List[Category]:
        return self.categories.list(OwnerQuery(user_id=user_id, include_shared=True))

    def _owned_transaction(self, user_id: str, transaction_id: str) -> Transaction:
        transaction = self.transactions.get(transaction_id)
        if transaction is None or transaction.user_id != user_id:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def _check_category(self, user_id: str, category_id: str, is_income: bool) -> None:
        category = self.categories.get(category_id)
        if category is None or category.user_id not in (None, user_id):
            raise NotFoundError("Category", category_id)
        if category.is_income != is_income:
            kind = "income" if is_income else "expense"
            raise CategoryDirectionError(
                f"Category '{category.name}' cannot be used for an {kind} transaction"
            )
