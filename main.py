# main.py
# Role: Application entry point for the budget tracker.
#       Configures logging, initializes the FastAPI app, creates database tables,
#       mounts static assets, and registers all route modules.

"""
Main FastAPI app for the personal budget tracker.

Here we only:
- configure logging
- create the FastAPI app
- set up static files
- create DB tables
- include route modules
"""

import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

import models  # noqa: F401  (registers tables on Base.metadata)
from config import LOG_LEVEL
from db import Base, engine
from app.routes_root import router as root_router
from app.routes_dashboard import router as dashboard_router
from app.routes_transactions import router as transactions_router
from app.routes_categories import router as categories_router
from app.routes_budgets import router as budgets_router


# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# -------------------------------------------------------------------
# App & DB setup
# -------------------------------------------------------------------

# Create database tables (only if they don't exist yet).
Base.metadata.create_all(bind=engine)

# FastAPI application instance
app = FastAPI(title="Budget Tracker")

# Serve static files (CSS) from /static
STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app", "static")
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Root / landing routes and display settings
app.include_router(root_router)

# Dashboard (summaries, category breakdown, charts)
app.include_router(dashboard_router)

# Transactions list, filters, export, and mutations
app.include_router(transactions_router)

# Category management
app.include_router(categories_router)

# Budgets with recomputed spend
app.include_router(budgets_router)
