# config.py
# Role: Runtime configuration for the budget tracker.
#       Values come from environment variables (optionally loaded from a .env
#       file in the project root) with sensible defaults for local development.

import os

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite file: <project_root>/database/finance.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "finance.db")

# SQLAlchemy connection URL (any backend SQLAlchemy supports)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")

# The dashboard only ever looks at the N most recent transactions
TRANSACTIONS_FETCH_LIMIT = int(os.getenv("TRANSACTIONS_FETCH_LIMIT", "100"))

# Cookie holding the selected display currency as JSON
CURRENCY_COOKIE_NAME = os.getenv("CURRENCY_COOKIE_NAME", "budget-tracker-currency")

# Currency used when no (valid) preference is stored
DEFAULT_CURRENCY_CODE = os.getenv("DEFAULT_CURRENCY_CODE", "USD").strip().upper()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
