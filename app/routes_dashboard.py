# app/routes_dashboard.py
"""
Dashboard: summary cards, month/year-to-date summaries, category breakdown,
the daily income/expense chart, and the most recent transactions.
"""

from datetime import date

from fastapi import APIRouter, Request, Depends, Query
from sqlalchemy.orm import Session

from app.deps import templates, get_db, get_currency
from app.services import store
from app.services.currency import Currency, format_currency
from app.services.periods import TIME_RANGES
from app.services.summary import category_breakdown, daily_series, period_summaries

router = APIRouter()

RECENT_TRANSACTIONS = 10


def build_dashboard(db: Session, time_range: str, today: date | None = None) -> dict:
    """
    Everything the dashboard shows, computed from one fetch of the most
    recent transactions.
    """
    today = today or date.today()
    if time_range not in TIME_RANGES:
        time_range = "7days"

    transactions, notice = store.fetch_or_empty(store.list_transactions, db, "transactions")
    categories_count, categories_notice = store.count_or_zero(store.count_categories, db, "categories")
    budgets_count, budgets_notice = store.count_or_zero(store.count_budgets, db, "budgets")

    return {
        "today": today,
        "notice": notice or categories_notice or budgets_notice,
        "transactions": transactions,
        "recent_transactions": transactions[:RECENT_TRANSACTIONS],
        "summaries": period_summaries(transactions, today),
        "breakdown": category_breakdown(transactions),
        "time_range": time_range,
        "series": daily_series(transactions, TIME_RANGES[time_range], today),
        "categories_count": categories_count,
        "budgets_count": budgets_count,
    }


@router.get("/dashboard")
def dashboard_page(
    request: Request,
    time_range: str = Query("7days"),
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    data = build_dashboard(db, time_range)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "currency": currency,
            "time_ranges": list(TIME_RANGES),
            "month_label": data["today"].strftime("%B %Y"),
            **data,
        },
    )


@router.get("/api/dashboard")
def dashboard_data(
    time_range: str = Query("7days"),
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    """
    JSON feed for the dashboard charts. Amounts are raw numbers; `display`
    fields carry the same values formatted in the selected currency.
    """
    data = build_dashboard(db, time_range)

    return {
        "currency": {
            "code": currency.code,
            "symbol": currency.symbol,
            "name": currency.name,
            "locale": currency.locale,
        },
        "notice": data["notice"],
        "transaction_count": len(data["transactions"]),
        "categories_count": data["categories_count"],
        "budgets_count": data["budgets_count"],
        "summaries": {
            name: {
                **summary.as_dict(),
                "display": {
                    key: format_currency(value, currency)
                    for key, value in summary.as_dict().items()
                },
            }
            for name, summary in data["summaries"].items()
        },
        "breakdown": [
            {
                "name": item.name,
                "amount": item.amount,
                "color": item.color,
                "percentage": item.percentage,
            }
            for item in data["breakdown"]
        ],
        "time_range": data["time_range"],
        "series": [
            {
                "date": point.date.isoformat(),
                "label": point.label,
                "income": point.income,
                "expenses": point.expenses,
                "net": point.net,
            }
            for point in data["series"]
        ],
    }
