"""
Budget and savings goal progress, plus the dashboard roll-up that combines
them with the all-time totals and the most recent transactions.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Sequence

from cashminder.core.exceptions import ValidationError
from cashminder.models.budget import Budget
from cashminder.models.category import Category
from cashminder.models.goal import SavingsGoal
from cashminder.models.transaction import Transaction
from cashminder.utils.analytics import DEFAULT_CATEGORY_COLOR, category_data

BUDGET_DANGER_PERCENT = 90
BUDGET_WARNING_PERCENT = 75


@dataclass
class BudgetProgress:
    budget_id: str
    category_id: str
    budgeted: float
    spent: float
    remaining: float
    percentage: int
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GoalProgress:
    goal_id: str
    name: str
    target: float
    current: float
    remaining: float
    percentage: int
    is_completed: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_percentage(value: float, total: float) -> int:
    if total == 0:
        return 0
    return round(value / total * 100)


def budget_progress(budget: Budget, transactions: Sequence[Transaction]) -> BudgetProgress:
    spent = sum(
        t.amount
        for t in transactions
        if t.category_id == budget.category_id
        and not t.is_income
        and t.date >= budget.start_date
        and (budget.end_date is None or t.date <= budget.end_date)
    )
    percentage = calculate_percentage(spent, budget.amount)

    if percentage >= BUDGET_DANGER_PERCENT:
        status = "danger"
    elif percentage >= BUDGET_WARNING_PERCENT:
        status = "warning"
    else:
        status = "ok"

    return BudgetProgress(
        budget_id=budget.id,
        category_id=budget.category_id,
        budgeted=budget.amount,
        spent=spent,
        remaining=max(0.0, budget.amount - spent),
        percentage=percentage,
        status=status,
    )


def goal_progress(goal: SavingsGoal) -> GoalProgress:
    return GoalProgress(
        goal_id=goal.id,
        name=goal.name,
        target=goal.target_amount,
        current=goal.current_amount,
        remaining=max(0.0, goal.target_amount - goal.current_amount),
        percentage=calculate_percentage(goal.current_amount, goal.target_amount),
        is_completed=goal.current_amount >= goal.target_amount,
    )


def contribute_to_goal(goal: SavingsGoal, amount: float) -> SavingsGoal:
    """Add funds to a goal; the balance never goes past the target."""
    if amount <= 0:
        raise ValidationError("Contribution must be a positive amount")
    new_amount = min(goal.current_amount + amount, goal.target_amount)
    return goal.model_copy(update={"current_amount": new_amount})


def dashboard_summary(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    budgets: Sequence[Budget],
    recent_limit: int = 5,
    top_limit: int = 5,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> Dict[str, Any]:
    total_income = sum(t.amount for t in transactions if t.is_income)
    total_expenses = sum(t.amount for t in transactions if not t.is_income)

    recent = sorted(transactions, key=lambda t: t.date, reverse=True)[:recent_limit]
    progress = sorted(
        (budget_progress(budget, transactions) for budget in budgets),
        key=lambda item: item.percentage,
        reverse=True,
    )

    return {
        "totalIncome": total_income,
        "totalExpenses": total_expenses,
        "netSavings": total_income - total_expenses,
        "topExpenseCategories": [
            item.to_dict() for item in category_data(transactions, categories, default_color)[:top_limit]
        ],
        "recentTransactions": [t.model_dump(mode="json") for t in recent],
        "budgetProgress": [item.to_dict() for item in progress],
    }
