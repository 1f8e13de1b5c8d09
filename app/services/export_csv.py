# app/services/export_csv.py
#
# CSV export of the currently filtered transaction list.
#
# Output layout:
#     Date,Type,Description,Category,Amount
#     2024-01-05,expense,"Coffee, ""nice""",Food,$4.50
#
# The description is always quoted (inner quotes doubled). The amount column
# holds the display string in the selected currency, not a raw number.

from datetime import date
from typing import Iterable

from app.services.currency import Currency, DEFAULT_CURRENCY, format_currency
from app.services.records import TransactionRecord

CSV_HEADERS = ["Date", "Type", "Description", "Category", "Amount"]


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _date_cell(tx: TransactionRecord) -> str:
    day = tx.day
    return day.isoformat() if day else str(tx.date or "")


def transactions_to_csv(
    transactions: Iterable[TransactionRecord],
    currency: Currency = DEFAULT_CURRENCY,
) -> str:
    rows = [",".join(CSV_HEADERS)]
    for tx in transactions:
        rows.append(
            ",".join(
                [
                    _date_cell(tx),
                    tx.type,
                    _quote(tx.description or ""),
                    tx.categories.name if tx.categories else "",
                    format_currency(tx.amount, currency),
                ]
            )
        )
    return "\n".join(rows)


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"transactions-{today.isoformat()}.csv"
