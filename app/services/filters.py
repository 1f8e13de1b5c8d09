"""Filter and sort a transaction list for the table view and CSV export."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping

from app.services.periods import DATE_RANGES, date_range_start
from app.services.records import TRANSACTION_TYPES, TransactionRecord

SORT_KEYS = ("date", "amount", "description")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class TransactionFilters:
    search: str = ""
    type: str = "all"
    category: str = "all"
    date_range: str = "all"
    sort_by: str = "date"
    sort_order: str = "desc"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TransactionFilters":
        """
        Build filters from query parameters, falling back to defaults for
        anything missing or unrecognised.
        """
        defaults = cls()

        def pick(name: str, allowed: Iterable[str], default: str) -> str:
            value = str(params.get(name) or "").strip().lower()
            return value if value in allowed else default

        return cls(
            search=str(params.get("search") or "").strip(),
            type=pick("type", ("all",) + TRANSACTION_TYPES, defaults.type),
            category=str(params.get("category") or "").strip() or defaults.category,
            date_range=pick("date_range", DATE_RANGES, defaults.date_range),
            sort_by=pick("sort", SORT_KEYS, defaults.sort_by),
            sort_order=pick("dir", SORT_ORDERS, defaults.sort_order),
        )

    def as_params(self) -> dict:
        return {
            "search": self.search,
            "type": self.type,
            "category": self.category,
            "date_range": self.date_range,
            "sort": self.sort_by,
            "dir": self.sort_order,
        }


def _matches_search(tx: TransactionRecord, query: str) -> bool:
    if query in (tx.description or "").lower():
        return True
    return bool(tx.categories and query in tx.categories.name.lower())


def _sort_key(sort_by: str) -> Callable[[TransactionRecord], Any]:
    if sort_by == "amount":
        return lambda tx: tx.value
    if sort_by == "description":
        return lambda tx: (tx.description or "").casefold()
    return lambda tx: tx.day or date.min


def filter_transactions(
    transactions: Iterable[TransactionRecord],
    filters: TransactionFilters,
    today: date | None = None,
) -> List[TransactionRecord]:
    """
    Return a new filtered and sorted list; the input is left untouched.

    Sorting is stable in both directions, so records with equal keys keep
    their input order.
    """
    filtered = list(transactions)

    # Search
    if filters.search:
        query = filters.search.lower()
        filtered = [tx for tx in filtered if _matches_search(tx, query)]

    # Type
    if filters.type != "all":
        filtered = [tx for tx in filtered if tx.type == filters.type]

    # Category
    if filters.category != "all":
        filtered = [tx for tx in filtered if tx.category_id == filters.category]

    # Date range (inclusive lower bound, no upper bound)
    start = date_range_start(filters.date_range, today)
    if start is not None:
        filtered = [tx for tx in filtered if tx.day is not None and tx.day >= start]

    return sorted(
        filtered,
        key=_sort_key(filters.sort_by),
        reverse=filters.sort_order == "desc",
    )
