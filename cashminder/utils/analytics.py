from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from cashminder.core.exceptions import InvalidTimeRangeError
from cashminder.models.category import Category
from cashminder.models.transaction import Transaction

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_COLOR = "#6366f1"
UNKNOWN_CATEGORY = "Unknown"
DEFAULT_TREND_MONTHS = 6

POSITIVE = "positive"
NEGATIVE = "negative"
NEUTRAL = "neutral"


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "label": self.label,
        }


@dataclass
class MonthlyTotal:
    month: str
    income: float = 0.0
    expenses: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "income": self.income, "expenses": self.expenses}


@dataclass
class CategoryTotal:
    category_id: str
    category: str
    amount: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoryId": self.category_id,
            "category": self.category,
            "amount": self.amount,
            "color": self.color,
        }


@dataclass
class Insight:
    title: str
    description: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "description": self.description, "type": self.type}


@dataclass
class Aggregate:
    """Totals, trailing monthly series and expense breakdown for one period."""

    total_income: float = 0.0
    total_expenses: float = 0.0
    net_savings: float = 0.0
    monthly_data: List[MonthlyTotal] = field(default_factory=list)
    category_data: List[CategoryTotal] = field(default_factory=list)


@dataclass
class AnalyticsSummary:
    total_income: float
    total_expenses: float
    net_savings: float
    income_change: float
    expense_change: float
    savings_change: float
    monthly_data: List[MonthlyTotal]
    category_data: List[CategoryTotal]
    insights: List[Insight]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "netSavings": self.net_savings,
            "incomeChange": self.income_change,
            "expenseChange": self.expense_change,
            "savingsChange": self.savings_change,
            "monthlyData": [item.to_dict() for item in self.monthly_data],
            "categoryData": [item.to_dict() for item in self.category_data],
            "insights": [item.to_dict() for item in self.insights],
        }


# ---------------------------------------------------------------------------
# Time ranges
# ---------------------------------------------------------------------------

def _first_of_month(day: datetime, months_back: int) -> datetime:
    index = day.year * 12 + (day.month - 1) - months_back
    return day.replace(year=index // 12, month=index % 12 + 1, day=1)


def resolve_time_ranges(now: Optional[datetime] = None) -> Dict[str, TimeRange]:
    """
    Named windows relative to ``now`` (local time by default). ``now`` is
    truncated to midnight first so the time of day never moves a boundary.
    """
    now = now or datetime.now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    return {
        "last7days": TimeRange(today - timedelta(days=6), today, "Last 7 days"),
        "last30days": TimeRange(today - timedelta(days=29), today, "Last 30 days"),
        "last3months": TimeRange(_first_of_month(today, 3), today, "Last 3 months"),
        "last6months": TimeRange(_first_of_month(today, 6), today, "Last 6 months"),
        "yearToDate": TimeRange(today.replace(month=1, day=1), today, "Year to date"),
    }


def get_time_range(key: str, now: Optional[datetime] = None) -> TimeRange:
    ranges = resolve_time_ranges(now)
    if key not in ranges:
        raise InvalidTimeRangeError(
            f"Unknown time range '{key}'. Expected one of: {', '.join(ranges)}"
        )
    return ranges[key]


# ---------------------------------------------------------------------------
# Period filtering
# ---------------------------------------------------------------------------

def filter_by_range(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> List[Transaction]:
    return [t for t in transactions if start <= t.date <= end]


def previous_period(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> List[Transaction]:
    """
    Transactions in the window of equal length that ends where ``start`` is.
    A zero-length current window has no previous window.
    """
    if start > end:
        raise InvalidTimeRangeError("start must not be after end")

    length = end - start
    if not length:
        return []
    return filter_by_range(transactions, start - length, end - length)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def calculate_percentage_change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def _totals(transactions: Sequence[Transaction]) -> tuple:
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.is_income:
            income += t.amount
        else:
            expenses += t.amount
    return income, expenses


def monthly_data(
    transactions: Iterable[Transaction],
    months: int = DEFAULT_TREND_MONTHS,
    now: Optional[datetime] = None,
) -> List[MonthlyTotal]:
    """
    Income/expense totals for the trailing ``months`` calendar months ending
    with the current month, oldest first.
    """
    now = now or datetime.now()
    result = [
        MonthlyTotal(month=_first_of_month(now, offset).strftime("%b"))
        for offset in range(months - 1, -1, -1)
    ]

    for t in transactions:
        month_diff = (now.year - t.date.year) * 12 + now.month - t.date.month
        if 0 <= month_diff < months:
            entry = result[months - 1 - month_diff]
            if t.is_income:
                entry.income += t.amount
            else:
                entry.expenses += t.amount
    return result


def category_data(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> List[CategoryTotal]:
    """Expense totals per category, largest first. Income is left out."""
    amounts: Dict[str, float] = {}
    for t in transactions:
        if t.is_income:
            continue
        amounts[t.category_id] = amounts.get(t.category_id, 0.0) + t.amount

    by_id = {c.id: c for c in categories}
    result = []
    for category_id, amount in amounts.items():
        category = by_id.get(category_id)
        if category is None:
            logger.debug("Transaction category %s not found, bucketing as Unknown", category_id)
        result.append(
            CategoryTotal(
                category_id=category_id,
                category=category.name if category else UNKNOWN_CATEGORY,
                amount=amount,
                color=(category.color if category else None) or default_color,
            )
        )

    result.sort(key=lambda item: item.amount, reverse=True)
    return result


def aggregate(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    now: Optional[datetime] = None,
    months: int = DEFAULT_TREND_MONTHS,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> Aggregate:
    income, expenses = _totals(transactions)
    return Aggregate(
        total_income=income,
        total_expenses=expenses,
        net_savings=income - expenses,
        monthly_data=monthly_data(transactions, months, now),
        category_data=category_data(transactions, categories, default_color),
    )


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def _savings_insight(current: Aggregate) -> Optional[Insight]:
    if current.total_income <= 0:
        return None

    rate = current.net_savings / current.total_income * 100
    if rate > 20:
        return Insight(
            title=f"You saved {rate:.0f}% of your income this period",
            description="Great job! You're saving a significant portion of your income.",
            type=POSITIVE,
        )
    if rate > 0:
        return Insight(
            title=f"You saved {rate:.0f}% of your income this period",
            description="Consider setting a goal to save at least 20% of your income.",
            type=NEUTRAL,
        )
    return Insight(
        title="Your expenses exceeded your income this period",
        description="Try to reduce expenses or increase income to avoid depleting your savings.",
        type=NEGATIVE,
    )


def _category_increase_insight(current: Aggregate, previous: Aggregate) -> Optional[Insight]:
    if not current.category_data or not previous.category_data:
        return None

    previous_amounts = {item.category_id: item.amount for item in previous.category_data}

    # Selected by dollar increase, gated and reported by percentage.
    biggest: Optional[CategoryTotal] = None
    biggest_change = 0.0
    biggest_pct = 0.0
    for item in current.category_data:
        previous_amount = previous_amounts.get(item.category_id, 0.0)
        if previous_amount <= 0:
            continue
        change = item.amount - previous_amount
        pct = change / previous_amount * 100
        if pct > 15 and change > biggest_change:
            biggest, biggest_change, biggest_pct = item, change, pct

    if biggest is None:
        return None
    return Insight(
        title=f"Spending in {biggest.category} increased by {biggest_pct:.0f}%",
        description=(
            f"Your spending on {biggest.category} has increased compared to last period. "
            "Consider reviewing these expenses."
        ),
        type=NEGATIVE,
    )


def _top_category_insight(current: Aggregate) -> Optional[Insight]:
    if not current.category_data:
        return None

    top = current.category_data[0]
    share = top.amount / current.total_expenses * 100 if current.total_expenses else 0.0
    return Insight(
        title=f"{top.category} is your top spending category ({share:.0f}%)",
        description=f"You spent ${top.amount:.2f} on {top.category} this period.",
        type=NEUTRAL,
    )


def _income_trend_insight(current: Aggregate, previous: Aggregate) -> Optional[Insight]:
    change = calculate_percentage_change(current.total_income, previous.total_income)
    if abs(change) <= 10:
        return None

    if change > 0:
        return Insight(
            title=f"Your income increased by {abs(change):.0f}%",
            description=(
                "Great job increasing your income! "
                "Consider allocating some of this increase to savings."
            ),
            type=POSITIVE,
        )
    return Insight(
        title=f"Your income decreased by {abs(change):.0f}%",
        description="Your income has decreased. You might need to adjust your budget accordingly.",
        type=NEGATIVE,
    )


def generate_insights(current: Aggregate, previous: Aggregate) -> List[Insight]:
    candidates = [
        _savings_insight(current),
        _category_increase_insight(current, previous),
        _top_category_insight(current),
        _income_trend_insight(current, previous),
    ]
    return [insight for insight in candidates if insight is not None]


def _period_aggregate(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    default_color: str,
) -> Aggregate:
    # totals and breakdown only; the trend series is built once from the full list
    income, expenses = _totals(transactions)
    return Aggregate(
        total_income=income,
        total_expenses=expenses,
        net_savings=income - expenses,
        category_data=category_data(transactions, categories, default_color),
    )


def compute_analytics(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    time_range: TimeRange,
    now: Optional[datetime] = None,
    months: int = DEFAULT_TREND_MONTHS,
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> AnalyticsSummary:
    now = now or datetime.now()
    current_transactions = filter_by_range(transactions, time_range.start, time_range.end)
    previous_transactions = previous_period(transactions, time_range.start, time_range.end)

    current = _period_aggregate(current_transactions, categories, default_color)
    previous = _period_aggregate(previous_transactions, categories, default_color)

    logger.debug(
        "Analytics for %s: %d current, %d previous transactions",
        time_range.label,
        len(current_transactions),
        len(previous_transactions),
    )

    return AnalyticsSummary(
        total_income=current.total_income,
        total_expenses=current.total_expenses,
        net_savings=current.net_savings,
        income_change=calculate_percentage_change(current.total_income, previous.total_income),
        expense_change=calculate_percentage_change(current.total_expenses, previous.total_expenses),
        savings_change=calculate_percentage_change(current.net_savings, previous.net_savings),
        # the trend chart always covers the trailing months, not the selected range
        monthly_data=monthly_data(transactions, months, now),
        category_data=current.category_data,
        insights=generate_insights(current, previous),
    )
