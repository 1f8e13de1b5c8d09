# app/deps.py
# Role: Shared application-level dependencies and globals.
#       Provides the Jinja2 templates loader (with currency/date filters),
#       the standard SQLAlchemy database session dependency, and the
#       display-currency dependency read from the preference cookie.

"""
Shared dependencies and globals for the budget tracker app.
"""

import os
from typing import Generator

from fastapi import Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from config import CURRENCY_COOKIE_NAME, DEFAULT_CURRENCY_CODE
from db import SessionLocal
from app.services.currency import (
    CURRENCIES,
    Currency,
    format_currency,
    get_currency as lookup_currency,
    load_currency,
)

APP_DIR = os.path.dirname(os.path.abspath(__file__))

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

# Jinja2 templates loader (used by all HTML-rendering routes)
templates = Jinja2Templates(directory=os.path.join(APP_DIR, "templates"))

# {{ tx.amount | money(currency) }}
templates.env.filters["money"] = format_currency
templates.env.globals["CURRENCIES"] = CURRENCIES

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# -------------------------------------------------------------------
# Display currency dependency
# -------------------------------------------------------------------

DEFAULT_CURRENCY = lookup_currency(DEFAULT_CURRENCY_CODE)


def get_currency(request: Request) -> Currency:
    """
    The selected display currency, restored from the preference cookie.

    Typical usage in routes:
        currency: Currency = Depends(get_currency)
    """
    return load_currency(request.cookies.get(CURRENCY_COOKIE_NAME), default=DEFAULT_CURRENCY)
