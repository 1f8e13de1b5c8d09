# app/services/periods.py
#
# Date Range Utilities
# Calendar arithmetic for filter bounds, period summaries, and budget windows.
# Month/year steps land on the same day-of-month, clamped to the month's last day.

from datetime import date, timedelta

import pandas as pd

DATE_RANGES = ("all", "today", "week", "month", "year")

# Chart ranges -> number of daily buckets
TIME_RANGES = {"7days": 7, "30days": 30, "90days": 90}


def shift_date(day: date, days: int = 0, months: int = 0, years: int = 0) -> date:
    """
    Move `day` by a calendar offset (negative values go back in time).
    """
    offset = pd.DateOffset(days=days, months=months, years=years)
    return (pd.Timestamp(day) + offset).date()


def date_range_start(date_range: str, today: date | None = None) -> date | None:
    """
    Inclusive lower bound for a transaction date filter.

    "all" (or anything unknown) -> None, i.e. no bound.
    """
    today = today or date.today()

    if date_range == "today":
        return today
    if date_range == "week":
        return today - timedelta(days=7)
    if date_range == "month":
        return shift_date(today, months=-1)
    if date_range == "year":
        return shift_date(today, years=-1)
    return None


def month_start(today: date | None = None) -> date:
    today = today or date.today()
    return today.replace(day=1)


def year_start(today: date | None = None) -> date:
    today = today or date.today()
    return date(today.year, 1, 1)


def budget_end_date(start: date, period: str) -> date:
    """
    End of a budget window: start + 1 week / 1 month / 1 year.
    """
    if period == "weekly":
        return shift_date(start, days=7)
    if period == "monthly":
        return shift_date(start, months=1)
    if period == "yearly":
        return shift_date(start, years=1)
    raise ValueError(f"Unknown budget period: {period!r}")


def last_n_days(days: int, today: date | None = None) -> list[date]:
    """`days` consecutive calendar days ending with (and including) today."""
    today = today or date.today()
    return [d.date() for d in pd.date_range(end=pd.Timestamp(today), periods=days, freq="D")]
