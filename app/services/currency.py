# app/services/currency.py
#
# Display currency table and locale-aware formatting.
# Amounts are never converted; the selected currency only changes how numbers are rendered.

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from babel.core import UnknownLocaleError
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import get_currency_precision

from app.services.records import to_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    locale: str


CURRENCIES: List[Currency] = [
    Currency("USD", "$", "US Dollar", "en-US"),
    Currency("EUR", "€", "Euro", "en-US"),
    Currency("GBP", "£", "British Pound", "en-GB"),
    Currency("JPY", "¥", "Japanese Yen", "ja-JP"),
    Currency("CAD", "C$", "Canadian Dollar", "en-CA"),
    Currency("AUD", "A$", "Australian Dollar", "en-AU"),
    Currency("CHF", "CHF", "Swiss Franc", "de-CH"),
    Currency("CNY", "¥", "Chinese Yuan", "zh-CN"),
    Currency("INR", "₹", "Indian Rupee", "en-IN"),
    Currency("BRL", "R$", "Brazilian Real", "pt-BR"),
    Currency("ZAR", "R", "South African Rand", "en-ZA"),
    Currency("MXN", "$", "Mexican Peso", "es-MX"),
    Currency("SGD", "S$", "Singapore Dollar", "en-SG"),
    Currency("HKD", "HK$", "Hong Kong Dollar", "en-HK"),
    Currency("NZD", "NZ$", "New Zealand Dollar", "en-NZ"),
    Currency("BTN", "Nu.", "Bhutanese Ngultrum", "dz-BT"),
]

CURRENCIES_BY_CODE: Dict[str, Currency] = {c.code: c for c in CURRENCIES}

DEFAULT_CURRENCY = CURRENCIES_BY_CODE["USD"]


def get_currency(code: str | None, default: Currency = DEFAULT_CURRENCY) -> Currency:
    if not code:
        return default
    return CURRENCIES_BY_CODE.get(code.strip().upper(), default)


def _babel_locale(locale: str) -> str:
    return locale.replace("-", "_")


def _round_half_up(value: float, code: str) -> Decimal:
    # Babel quantizes half-to-even; pre-round so its quantize is a no-op
    quantum = Decimal(1).scaleb(-get_currency_precision(code))
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def format_currency(amount: Any, currency: Currency = DEFAULT_CURRENCY) -> str:
    """
    Format `amount` in the currency's locale, e.g. 4.5 / USD -> "$4.50".

    Fraction digits follow the currency (JPY has none, all others in the
    table have two). Exact halves round away from zero: 0.125 -> "$0.13".
    """
    value = _round_half_up(to_amount(amount), currency.code)
    try:
        return babel_format_currency(value, currency.code, locale=_babel_locale(currency.locale))
    except UnknownLocaleError:
        logger.warning("[currency] Unknown locale %r, falling back to en_US", currency.locale)
        return babel_format_currency(value, currency.code, locale="en_US")


# ---- Persisted preference (cookie payload) ----

def dump_currency(currency: Currency) -> str:
    return json.dumps(asdict(currency), separators=(",", ":"))


def load_currency(raw: Optional[str], default: Currency = DEFAULT_CURRENCY) -> Currency:
    """
    Restore a stored preference. Only the code is trusted; the rest of the
    record always comes from the currency table.
    """
    if not raw:
        return default
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error("[currency] Error parsing stored currency %r: %r", raw, e)
        return default
    if not isinstance(parsed, dict):
        logger.error("[currency] Stored currency is not an object: %r", raw)
        return default
    found = CURRENCIES_BY_CODE.get(str(parsed.get("code") or "").upper())
    if found is None:
        logger.warning("[currency] Unknown stored currency code %r", parsed.get("code"))
        return default
    return found
