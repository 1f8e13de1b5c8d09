# routes_transactions.py
"""
Routes for the transactions table: filtering, sorting, CSV export, and the
add / edit / duplicate / delete mutations.

Every successful mutation redirects (303) back to /transactions, which
re-fetches the list from the store.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.deps import get_db, get_currency, templates
from app.errors import RecordNotFound, ValidationError
from app.services import store
from app.services.currency import Currency
from app.services.export_csv import export_filename, transactions_to_csv
from app.services.filters import TransactionFilters, filter_transactions
from app.services.form_helpers import build_transaction_fields
from app.services.summary import calculate_summary

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(notice: str) -> RedirectResponse:
    return RedirectResponse(url="/transactions?" + urlencode({"notice": notice}), status_code=303)


def build_sort_url(filters: TransactionFilters, column: str) -> str:
    """Clicking the active column flips the direction; a new column starts descending."""
    next_dir = "asc" if (filters.sort_by == column and filters.sort_order == "desc") else "desc"
    params = filters.as_params()
    params["sort"] = column
    params["dir"] = next_dir
    return "/transactions?" + urlencode(params)


def render_transactions_page(
    request: Request,
    db: Session,
    currency: Currency,
    filters: TransactionFilters,
    notice: Optional[str] = None,
    form_error: Optional[str] = None,
    form_values: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    transactions, fetch_error = store.fetch_or_empty(store.list_transactions, db, "transactions")
    categories, category_error = store.fetch_or_empty(store.list_categories, db, "categories")

    visible = filter_transactions(transactions, filters)
    totals = calculate_summary(visible)

    return templates.TemplateResponse(
        request,
        "transactions.html",
        {
            "currency": currency,
            "transactions": visible,
            "total_count": len(transactions),
            "totals": totals,
            "filters": filters,
            "categories": categories,
            "income_categories": [c for c in categories if c.type == "income"],
            "expense_categories": [c for c in categories if c.type == "expense"],
            "notice": fetch_error or category_error or notice,
            "form_error": form_error,
            "form_values": form_values or {},
            "export_url": "/transactions/export?" + urlencode(filters.as_params()),
            "date_sort_url": build_sort_url(filters, "date"),
            "amount_sort_url": build_sort_url(filters, "amount"),
            "description_sort_url": build_sort_url(filters, "description"),
        },
        status_code=status_code,
    )


@router.get("/transactions", response_class=HTMLResponse)
def transactions_page(
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    """
    Show the most recent transactions, narrowed and ordered by the query
    parameters: search, type, category, date_range, sort, dir.
    """
    filters = TransactionFilters.from_params(request.query_params)
    return render_transactions_page(
        request,
        db,
        currency,
        filters,
        notice=request.query_params.get("notice"),
    )


@router.get("/transactions/export")
def export_transactions(
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    """
    Download the currently filtered and sorted list as CSV.
    """
    filters = TransactionFilters.from_params(request.query_params)
    transactions, _ = store.fetch_or_empty(store.list_transactions, db, "transactions")
    visible = filter_transactions(transactions, filters)

    logger.info("[export] Exporting %d of %d transactions as %s", len(visible), len(transactions), currency.code)

    return Response(
        content=transactions_to_csv(visible, currency),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/transactions/add", response_class=HTMLResponse)
async def add_transaction(
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    form = dict(await request.form())

    try:
        fields = build_transaction_fields(form, store.category_types(db))
        store.create_transaction(db, fields)
    except ValidationError as e:
        return render_transactions_page(
            request, db, currency, TransactionFilters(),
            form_error=str(e), form_values=form, status_code=400,
        )
    except SQLAlchemyError as e:
        logger.error("[transactions] Error adding transaction: %r", e)
        return render_transactions_page(
            request, db, currency, TransactionFilters(),
            form_error="Failed to add transaction", form_values=form, status_code=500,
        )

    return _redirect("Transaction added successfully.")


@router.get("/transactions/{transaction_id}/edit", response_class=HTMLResponse)
def edit_transaction_page(
    transaction_id: str,
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    tx = _get_transaction_or_404(db, transaction_id)
    values = {
        "amount": tx.amount,
        "type": tx.type,
        "description": tx.description or "",
        "date": tx.date,
        "category_id": tx.category_id or "",
    }
    return _render_edit_page(request, db, currency, transaction_id, values)


@router.post("/transactions/{transaction_id}/edit", response_class=HTMLResponse)
async def edit_transaction(
    transaction_id: str,
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    form = dict(await request.form())

    try:
        fields = build_transaction_fields(form, store.category_types(db))
        store.update_transaction(db, transaction_id, fields)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        return _render_edit_page(request, db, currency, transaction_id, form, str(e), 400)
    except SQLAlchemyError as e:
        logger.error("[transactions] Error updating id=%s: %r", transaction_id, e)
        return _render_edit_page(
            request, db, currency, transaction_id, form, "Failed to update transaction", 500,
        )

    return _redirect("Transaction updated successfully.")


@router.post("/transactions/{transaction_id}/duplicate")
def duplicate_transaction(transaction_id: str, db: Session = Depends(get_db)):
    try:
        store.duplicate_transaction(db, transaction_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("[transactions] Error duplicating id=%s: %r", transaction_id, e)
        return _redirect("Failed to duplicate transaction. Please try again.")

    return _redirect("Transaction duplicated successfully.")


@router.post("/transactions/{transaction_id}/delete")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    try:
        store.delete_transaction(db, transaction_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("[transactions] Error deleting id=%s: %r", transaction_id, e)
        return _redirect("Failed to delete transaction. Please try again.")

    return _redirect("Transaction deleted successfully.")


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def _get_transaction_or_404(db: Session, transaction_id: str):
    try:
        return store.get_transaction(db, transaction_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


def _render_edit_page(
    request: Request,
    db: Session,
    currency: Currency,
    transaction_id: str,
    values: Dict[str, Any],
    form_error: Optional[str] = None,
    status_code: int = 200,
):
    categories, notice = store.fetch_or_empty(store.list_categories, db, "categories")
    return templates.TemplateResponse(
        request,
        "transaction_edit.html",
        {
            "currency": currency,
            "transaction_id": transaction_id,
            "form_values": values,
            "form_error": form_error,
            "notice": notice,
            "income_categories": [c for c in categories if c.type == "income"],
            "expense_categories": [c for c in categories if c.type == "expense"],
        },
        status_code=status_code,
    )
