"""In-memory records the aggregation functions operate on."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("income", "expense")
BUDGET_PERIODS = ("weekly", "monthly", "yearly")
UNCATEGORIZED = "Uncategorized"


def to_amount(value: Any) -> float:
    """
    Coerce a stored amount (number or numeric string) into a float.

    Unparseable, NaN and infinite values count as 0.0 so that one bad row
    cannot poison a whole sum.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        logger.warning("[amount] Ignoring boolean amount %r", value)
        return 0.0
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        logger.warning("[amount] Treating unparseable amount %r as 0", value)
        return 0.0
    if not math.isfinite(number):
        logger.warning("[amount] Treating non-finite amount %r as 0", value)
        return 0.0
    return number


def to_date(value: Any) -> Optional[date]:
    """Accept a date, datetime, or 'YYYY-MM-DD' string; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class CategoryRef:
    """The {name, color} projection joined onto a transaction."""

    name: str
    color: str


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    amount: Any
    type: str
    description: Optional[str]
    date: Any
    category_id: Optional[str] = None
    categories: Optional[CategoryRef] = None

    @property
    def value(self) -> float:
        return to_amount(self.amount)

    @property
    def day(self) -> Optional[date]:
        return to_date(self.date)

    @property
    def category_name(self) -> str:
        return self.categories.name if self.categories else UNCATEGORIZED


@dataclass(frozen=True)
class BudgetRecord:
    id: str
    amount: Any
    period: str
    start_date: Any
    end_date: Any
    category_id: str
    categories: Optional[CategoryRef] = None

    @property
    def category_name(self) -> str:
        return self.categories.name if self.categories else UNCATEGORIZED
