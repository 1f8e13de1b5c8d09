from datetime import date

from app.services.records import BudgetRecord, CategoryRef, TransactionRecord
from app.services.summary import (
    budget_spent,
    budget_status,
    calculate_summary,
    category_breakdown,
    daily_series,
    period_summaries,
)


def make_transaction(**kwargs):
    base = dict(
        id="t",
        amount=0.0,
        type="expense",
        description="",
        date="2024-03-15",
        category_id=None,
        categories=None,
    )
    base.update(kwargs)
    return TransactionRecord(**base)


def categorised(name, amount, color="#3b82f6", **kwargs):
    return make_transaction(
        amount=amount,
        category_id=name.lower(),
        categories=CategoryRef(name=name, color=color),
        **kwargs,
    )


def test_empty_list_gives_zero_summary():
    summary = calculate_summary([])
    assert summary.as_dict() == {"income": 0, "expenses": 0, "balance": 0}


def test_summary_totals_and_balance():
    transactions = [
        make_transaction(type="income", amount=1000),
        make_transaction(type="expense", amount=250.5),
        make_transaction(type="expense", amount="49.5"),
    ]

    summary = calculate_summary(transactions)

    assert summary.income == 1000
    assert summary.expenses == 300
    assert summary.balance == summary.income - summary.expenses == 700


def test_summary_is_additive_over_a_partition():
    a = [
        make_transaction(type="income", amount=100, date="2024-03-01"),
        make_transaction(type="expense", amount=40, date="2024-02-20"),
    ]
    b = [
        make_transaction(type="income", amount=25, date="2024-02-01"),
        make_transaction(type="expense", amount=15, date="2024-03-10"),
    ]
    cutoff = date(2024, 2, 15)

    whole = calculate_summary(a + b, cutoff)
    left = calculate_summary(a, cutoff)
    right = calculate_summary(b, cutoff)

    assert whole.income == left.income + right.income == 100
    assert whole.expenses == left.expenses + right.expenses == 55


def test_start_date_is_inclusive():
    transactions = [
        make_transaction(type="income", amount=10, date="2024-03-01"),
        make_transaction(type="income", amount=99, date="2024-02-29"),
    ]
    assert calculate_summary(transactions, date(2024, 3, 1)).income == 10


def test_malformed_amounts_count_as_zero():
    transactions = [
        make_transaction(type="income", amount="abc"),
        make_transaction(type="income", amount=""),
        make_transaction(type="income", amount="nan"),
        make_transaction(type="income", amount=None),
        make_transaction(type="income", amount="12.5"),
    ]
    assert calculate_summary(transactions).income == 12.5


def test_period_summaries_use_month_and_year_starts():
    transactions = [
        make_transaction(type="income", amount=100, date="2024-03-02"),
        make_transaction(type="expense", amount=30, date="2024-01-15"),
        make_transaction(type="expense", amount=70, date="2023-12-31"),
    ]

    summaries = period_summaries(transactions, today=date(2024, 3, 15))

    assert summaries["all"].as_dict() == {"income": 100, "expenses": 100, "balance": 0}
    assert summaries["month"].as_dict() == {"income": 100, "expenses": 0, "balance": 100}
    assert summaries["year"].as_dict() == {"income": 100, "expenses": 30, "balance": 70}


def test_breakdown_of_nothing_is_empty():
    assert category_breakdown([]) == []
    assert category_breakdown([make_transaction(amount=10)]) == []


def test_breakdown_groups_expenses_by_category_name():
    transactions = [
        categorised("Food", 30, color="#10b981"),
        categorised("Rent", 60, color="#ef4444"),
        categorised("Food", 10, color="#000000"),
        categorised("Salary", 500, type="income"),
        make_transaction(amount=1000),
    ]

    breakdown = category_breakdown(transactions)

    assert [item.name for item in breakdown] == ["Rent", "Food"]
    rent, food = breakdown
    assert rent.amount == 60
    assert food.amount == 40
    assert food.color == "#10b981"
    assert rent.percentage == 60.0
    assert food.percentage == 40.0


def test_breakdown_keeps_only_the_top_eight():
    transactions = [categorised(f"Cat{i}", amount=i + 1) for i in range(10)]

    breakdown = category_breakdown(transactions)

    assert len(breakdown) == 8
    assert [item.name for item in breakdown] == [f"Cat{i}" for i in range(9, 1, -1)]
    assert abs(sum(item.percentage for item in breakdown) - 100.0) <= 0.5
    # Percentages are relative to the kept groups only
    assert breakdown[0].amount == 10
    assert breakdown[0].percentage == round(10 / sum(range(3, 11)) * 100, 1)


def test_breakdown_percentages_sum_to_about_100():
    transactions = [
        categorised("A", 1),
        categorised("B", 1),
        categorised("C", 1),
    ]

    breakdown = category_breakdown(transactions)

    assert [item.percentage for item in breakdown] == [33.3, 33.3, 33.3]
    assert abs(sum(item.percentage for item in breakdown) - 100.0) <= 0.5


def test_breakdown_with_zero_total_has_zero_percentages():
    breakdown = category_breakdown([categorised("Free", 0)])
    assert breakdown[0].percentage == 0.0


def test_budget_spend_counts_matching_expenses_inside_the_window():
    budget = BudgetRecord(
        id="b1",
        amount=200,
        period="monthly",
        start_date="2024-03-01",
        end_date="2024-04-01",
        category_id="c1",
    )
    transactions = [
        make_transaction(category_id="c1", type="expense", date="2024-03-10", amount=50),
        make_transaction(category_id="c1", type="expense", date="2024-04-02", amount=999),
        make_transaction(category_id="c2", type="expense", date="2024-03-15", amount=30),
    ]

    spent = budget_spent(budget, transactions)
    status = budget_status(budget, spent)

    assert spent == 50
    assert status.percentage == 25.0
    assert status.status == "normal"


def test_budget_window_is_inclusive_and_ignores_income():
    budget = BudgetRecord(id="b1", amount="100", period="monthly", start_date="2024-03-01",
                          end_date="2024-04-01", category_id="c1")
    transactions = [
        make_transaction(category_id="c1", date="2024-03-01", amount=10),
        make_transaction(category_id="c1", date="2024-04-01", amount=20),
        make_transaction(category_id="c1", date="2024-03-05", amount=500, type="income"),
    ]

    assert budget_spent(budget, transactions) == 30


def test_budget_status_tiers():
    budget = BudgetRecord(id="b", amount=100, period="weekly", start_date="2024-03-01",
                          end_date="2024-03-08", category_id="c")

    assert budget_status(budget, 80).status == "normal"
    assert budget_status(budget, 80.5).status == "warning"
    assert budget_status(budget, 100).status == "warning"
    assert budget_status(budget, 120).status == "over"
    assert budget_status(budget, 120).bar_percentage == 100.0


def test_budget_with_zero_ceiling_reports_zero_percent():
    budget = BudgetRecord(id="b", amount=0, period="weekly", start_date="2024-03-01",
                          end_date="2024-03-08", category_id="c")

    status = budget_status(budget, 50)

    assert status.percentage == 0.0
    assert status.status == "normal"


def test_daily_series_buckets_by_day():
    transactions = [
        make_transaction(type="income", amount=100, date="2024-03-15"),
        make_transaction(type="expense", amount=40, date="2024-03-15"),
        make_transaction(type="expense", amount=5, date="2024-03-09"),
        make_transaction(type="expense", amount=7, date="2024-03-08"),
    ]

    series = daily_series(transactions, days=7, today=date(2024, 3, 15))

    assert len(series) == 7
    assert series[0].date == date(2024, 3, 9)
    assert series[-1].date == date(2024, 3, 15)
    assert series[-1].label == "Fri"
    assert (series[-1].income, series[-1].expenses, series[-1].net) == (100, 40, 60)
    assert series[0].expenses == 5
    assert sum(point.expenses for point in series) == 45


def test_daily_series_labels_for_longer_ranges():
    month = daily_series([], days=30, today=date(2024, 3, 15))
    quarter = daily_series([], days=90, today=date(2024, 3, 15))

    assert month[-1].label == "Mar 15"
    assert quarter[-1].label == "Mar"
    assert len(quarter) == 90
