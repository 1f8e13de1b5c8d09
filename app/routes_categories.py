# routes_categories.py
"""
Routes for managing user-defined income and expense categories.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.deps import get_db, templates
from app.errors import RecordNotFound, ValidationError
from app.services import store
from app.services.form_helpers import PRESET_COLORS, build_category_fields

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect(notice: str) -> RedirectResponse:
    return RedirectResponse(url="/categories?" + urlencode({"notice": notice}), status_code=303)


def render_categories_page(
    request: Request,
    db: Session,
    notice: Optional[str] = None,
    form_error: Optional[str] = None,
    form_values: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
):
    categories, fetch_error = store.fetch_or_empty(store.list_categories, db, "categories")

    return templates.TemplateResponse(
        request,
        "categories.html",
        {
            "income_categories": [c for c in categories if c.type == "income"],
            "expense_categories": [c for c in categories if c.type == "expense"],
            "preset_colors": PRESET_COLORS,
            "notice": fetch_error or notice,
            "form_error": form_error,
            "form_values": form_values or {},
        },
        status_code=status_code,
    )


@router.get("/categories", response_class=HTMLResponse)
def categories_page(request: Request, db: Session = Depends(get_db)):
    return render_categories_page(request, db, notice=request.query_params.get("notice"))


@router.post("/categories/add", response_class=HTMLResponse)
async def add_category(request: Request, db: Session = Depends(get_db)):
    form = dict(await request.form())

    try:
        store.create_category(db, build_category_fields(form))
    except ValidationError as e:
        return render_categories_page(request, db, form_error=str(e), form_values=form, status_code=400)
    except SQLAlchemyError as e:
        logger.error("[categories] Error adding category: %r", e)
        return render_categories_page(
            request, db, form_error="Failed to add category", form_values=form, status_code=500,
        )

    return _redirect("Category added successfully.")


@router.post("/categories/{category_id}/delete")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    """
    Delete a category. Transactions that used it are kept and show up as
    uncategorized afterwards.
    """
    try:
        name = store.delete_category(db, category_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("[categories] Error deleting id=%s: %r", category_id, e)
        return _redirect("Failed to delete category. Please try again.")

    return _redirect(f'Category "{name}" deleted successfully.')
