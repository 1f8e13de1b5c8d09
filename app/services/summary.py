"""Totals, category breakdowns, budget spend, and chart series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from app.services.periods import last_n_days, month_start, year_start
from app.services.records import BudgetRecord, TransactionRecord, to_amount, to_date

# Pie chart shows at most this many categories; the rest are dropped
TOP_CATEGORIES = 8

BUDGET_WARNING_PERCENT = 80.0
BUDGET_LIMIT_PERCENT = 100.0


@dataclass(frozen=True)
class Summary:
    income: float
    expenses: float

    @property
    def balance(self) -> float:
        return self.income - self.expenses

    def as_dict(self) -> dict:
        return {"income": self.income, "expenses": self.expenses, "balance": self.balance}


@dataclass(frozen=True)
class CategorySlice:
    name: str
    amount: float
    color: str
    percentage: float


@dataclass(frozen=True)
class BudgetStatus:
    spent: float
    percentage: float
    status: str

    @property
    def bar_percentage(self) -> float:
        return min(self.percentage, 100.0)


@dataclass(frozen=True)
class DailyPoint:
    date: date
    label: str
    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses


def calculate_summary(
    transactions: Iterable[TransactionRecord],
    start_date: Optional[date] = None,
) -> Summary:
    """
    Sum income and expenses, optionally only for records dated on or after
    `start_date`.
    """
    income = 0.0
    expenses = 0.0
    for tx in transactions:
        if start_date is not None:
            day = tx.day
            if day is None or day < start_date:
                continue
        if tx.type == "income":
            income += tx.value
        elif tx.type == "expense":
            expenses += tx.value
    return Summary(income=income, expenses=expenses)


def period_summaries(
    transactions: Sequence[TransactionRecord],
    today: Optional[date] = None,
) -> Dict[str, Summary]:
    """All-time, month-to-date and year-to-date summaries."""
    today = today or date.today()
    return {
        "all": calculate_summary(transactions),
        "month": calculate_summary(transactions, month_start(today)),
        "year": calculate_summary(transactions, year_start(today)),
    }


def category_breakdown(
    transactions: Iterable[TransactionRecord],
    limit: int = TOP_CATEGORIES,
) -> List[CategorySlice]:
    """
    Expense totals per category name, largest first, top `limit` only.

    Percentages are relative to the total of the kept groups.
    """
    buckets: Dict[str, Dict[str, object]] = {}
    for tx in transactions:
        if tx.type != "expense" or tx.categories is None:
            continue
        name = tx.categories.name
        if name not in buckets:
            buckets[name] = {"amount": 0.0, "color": tx.categories.color}
        buckets[name]["amount"] += tx.value

    ranked = sorted(buckets.items(), key=lambda item: item[1]["amount"], reverse=True)[:limit]
    total = sum(values["amount"] for _, values in ranked)

    return [
        CategorySlice(
            name=name,
            amount=values["amount"],
            color=values["color"],
            percentage=round(values["amount"] / total * 100, 1) if total else 0.0,
        )
        for name, values in ranked
    ]


def budget_spent(budget: BudgetRecord, transactions: Iterable[TransactionRecord]) -> float:
    """
    Sum of expenses in the budget's category dated within
    [start_date, end_date], both ends inclusive.
    """
    start = to_date(budget.start_date)
    end = to_date(budget.end_date)
    if start is None or end is None:
        return 0.0

    spent = 0.0
    for tx in transactions:
        if tx.type != "expense" or tx.category_id != budget.category_id:
            continue
        day = tx.day
        if day is None or not (start <= day <= end):
            continue
        spent += tx.value
    return spent


def budget_status(budget: BudgetRecord, spent: float) -> BudgetStatus:
    ceiling = to_amount(budget.amount)
    percentage = spent / ceiling * 100 if ceiling > 0 else 0.0

    if percentage > BUDGET_LIMIT_PERCENT:
        status = "over"
    elif percentage > BUDGET_WARNING_PERCENT:
        status = "warning"
    else:
        status = "normal"

    return BudgetStatus(spent=spent, percentage=percentage, status=status)


def _day_label(day: date, days: int) -> str:
    if days <= 7:
        return f"{day:%a}"
    if days <= 30:
        return f"{day:%b} {day.day}"
    return f"{day:%b}"


def daily_series(
    transactions: Iterable[TransactionRecord],
    days: int = 7,
    today: Optional[date] = None,
) -> List[DailyPoint]:
    """Income and expenses per calendar day for the last `days` days."""
    window = last_n_days(days, today)
    totals: Dict[date, Dict[str, float]] = {day: {"income": 0.0, "expenses": 0.0} for day in window}

    for tx in transactions:
        bucket = totals.get(tx.day)
        if bucket is None:
            continue
        if tx.type == "income":
            bucket["income"] += tx.value
        elif tx.type == "expense":
            bucket["expenses"] += tx.value

    return [
        DailyPoint(
            date=day,
            label=_day_label(day, days),
            income=totals[day]["income"],
            expenses=totals[day]["expenses"],
        )
        for day in window
    ]
