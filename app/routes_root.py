# routes_root.py
"""
Root / basic endpoints (landing redirect, display settings).
"""

import logging

from fastapi import APIRouter, Form
from fastapi.responses import RedirectResponse

from config import CURRENCY_COOKIE_NAME
from app.services.currency import CURRENCIES_BY_CODE, dump_currency

logger = logging.getLogger(__name__)

router = APIRouter()

# One year; the preference is rewritten on every change anyway
CURRENCY_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


@router.get("/")
def read_root():
    """
    Landing endpoint: the dashboard is the home page.
    """
    return RedirectResponse(url="/dashboard", status_code=302)


@router.post("/settings/currency")
def set_currency(code: str = Form(...), next: str = Form("/dashboard")):
    """
    Store the selected display currency in the preference cookie and go
    back to the page the selector was on.
    """
    # Only local paths are accepted as a redirect target
    target = next if next.startswith("/") and not next.startswith("//") else "/dashboard"
    response = RedirectResponse(url=target, status_code=303)

    currency = CURRENCIES_BY_CODE.get(code.strip().upper())
    if currency is None:
        logger.warning("[settings] Ignoring unknown currency code %r", code)
        return response

    response.set_cookie(
        CURRENCY_COOKIE_NAME,
        dump_currency(currency),
        max_age=CURRENCY_COOKIE_MAX_AGE,
        samesite="lax",
    )
    logger.info("[settings] Display currency set to %s", currency.code)
    return response
