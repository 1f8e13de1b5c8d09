# app/services/form_helpers.py
#
# Form Helper Functions
# Validate submitted form values and turn them into the field dicts the store
# writes. Anything rejected here raises ValidationError and never reaches the DB.

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from app.errors import ValidationError
from app.services.records import BUDGET_PERIODS, TRANSACTION_TYPES

HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

PRESET_COLORS = [
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#6366f1",
]


# ---- Field parsers ----

def parse_amount_input(value: Any) -> float:
    s = str(value or "").strip()
    if s == "":
        raise ValidationError("Amount is required")
    try:
        amount = float(s)
    except ValueError:
        raise ValidationError(f"Amount must be a number, got {s!r}")
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a finite number")
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    return amount


def parse_date_input(value: Any, default: Optional[date] = None) -> date:
    if isinstance(value, date):
        return value
    s = str(value or "").strip()
    if not s:
        if default is not None:
            return default
        raise ValidationError("Date is required")
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Date must look like YYYY-MM-DD, got {s!r}")


def parse_choice(value: Any, allowed, label: str) -> str:
    s = str(value or "").strip().lower()
    if s not in allowed:
        raise ValidationError(f"{label} must be one of: {', '.join(allowed)}")
    return s


# ---- Record builders ----

def build_transaction_fields(
    form: Mapping[str, Any],
    category_types: Mapping[str, str],
) -> Dict[str, Any]:
    """
    Convert a submitted transaction form into column values.

    `category_types` maps category id -> category type. A category of the
    other transaction type (or an unknown one) is cleared, not rejected.
    """
    tx_type = parse_choice(form.get("type"), TRANSACTION_TYPES, "Type")

    category_id = str(form.get("category_id") or "").strip() or None
    if category_id is not None and category_types.get(category_id) != tx_type:
        category_id = None

    description = str(form.get("description") or "").strip() or None

    return {
        "amount": parse_amount_input(form.get("amount")),
        "type": tx_type,
        "description": description,
        "date": parse_date_input(form.get("date"), default=date.today()),
        "category_id": category_id,
    }


def build_category_fields(form: Mapping[str, Any]) -> Dict[str, Any]:
    name = str(form.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required")

    color = str(form.get("color") or "").strip() or PRESET_COLORS[0]
    if not HEX_COLOR_RE.match(color):
        raise ValidationError(f"Color must be a hex value like #3b82f6, got {color!r}")

    return {
        "name": name,
        "type": parse_choice(form.get("type") or "expense", TRANSACTION_TYPES, "Type"),
        "color": color.lower(),
    }


def build_budget_fields(
    form: Mapping[str, Any],
    category_types: Mapping[str, str],
) -> Dict[str, Any]:
    category_id = str(form.get("category_id") or "").strip()
    if not category_id:
        raise ValidationError("Category is required")
    if category_types.get(category_id) != "expense":
        raise ValidationError("Budgets can only be set on expense categories")

    return {
        "amount": parse_amount_input(form.get("amount")),
        "period": parse_choice(form.get("period") or "monthly", BUDGET_PERIODS, "Period"),
        "category_id": category_id,
    }
