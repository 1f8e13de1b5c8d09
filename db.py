# db.py
# Role: Database bootstrap for the budget tracker.
#       Defines the SQLAlchemy engine, session factory, and declarative Base.
#       Also ensures the on-disk database directory exists for SQLite URLs.

"""
Database setup for the budget tracker.

- Uses DATABASE_URL from config (SQLite at <project_root>/database/finance.db by default)
- Ensures the SQLite folder exists before the engine is created.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DATABASE_URL


def _sqlite_path(url: str) -> str | None:
    prefix = "sqlite:///"
    if not url.startswith(prefix):
        return None
    path = url[len(prefix):]
    return None if path in ("", ":memory:") else path


_db_file = _sqlite_path(DATABASE_URL)
if _db_file:
    os.makedirs(os.path.dirname(os.path.abspath(_db_file)), exist_ok=True)

# For SQLite, we need check_same_thread=False for FastAPI (threaded request handling)
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
