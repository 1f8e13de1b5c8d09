# routes_budgets.py
"""
Routes for per-category spending budgets.

Spend is recomputed from transactions on every page load; the status colour
(normal / warning / over) is informational and never blocks anything.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.deps import get_db, get_currency, templates
from app.errors import RecordNotFound, ValidationError
from app.services import store
from app.services.currency import Currency
from app.services.form_helpers import build_budget_fields
from app.services.records import BUDGET_PERIODS

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(notice: str) -> RedirectResponse:
    return RedirectResponse(url="/budgets?" + urlencode({"notice": notice}), status_code=303)


def render_budgets_page(
    request: Request,
    db: Session,
    currency: Currency,
    notice: Optional[str] = None,
    form_error: Optional[str] = None,
    form_values: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    budgets, budget_error = store.fetch_or_empty(store.list_budgets, db, "budgets")
    categories, category_error = store.fetch_or_empty(store.list_categories, db, "categories", type="expense")

    return templates.TemplateResponse(
        request,
        "budgets.html",
        {
            "currency": currency,
            "budgets": budgets,
            "expense_categories": categories,
            "periods": BUDGET_PERIODS,
            "notice": budget_error or category_error or notice,
            "form_error": form_error,
            "form_values": form_values or {},
        },
        status_code=status_code,
    )


@router.get("/budgets", response_class=HTMLResponse)
def budgets_page(
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    return render_budgets_page(request, db, currency, notice=request.query_params.get("notice"))


@router.post("/budgets/add", response_class=HTMLResponse)
async def add_budget(
    request: Request,
    db: Session = Depends(get_db),
    currency: Currency = Depends(get_currency),
):
    """
    Create a budget starting today; the end date follows from the period.
    """
    form = dict(await request.form())

    try:
        store.create_budget(db, build_budget_fields(form, store.category_types(db)))
    except ValidationError as e:
        return render_budgets_page(
            request, db, currency, form_error=str(e), form_values=form, status_code=400,
        )
    except SQLAlchemyError as e:
        logger.error("[budgets] Error adding budget: %r", e)
        return render_budgets_page(
            request, db, currency, form_error="Failed to add budget", form_values=form, status_code=500,
        )

    return _redirect("Budget created successfully.")


@router.post("/budgets/{budget_id}/delete")
def delete_budget(budget_id: str, db: Session = Depends(get_db)):
    try:
        name = store.delete_budget(db, budget_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("[budgets] Error deleting id=%s: %r", budget_id, e)
        return _redirect("Failed to delete budget. Please try again.")

    return _redirect(f'Budget for "{name}" deleted successfully.')
