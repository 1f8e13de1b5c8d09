# app/services/store.py
"""
Queries and mutations against the database.

Reads return plain records (see records.py) with the category join already
resolved, so everything downstream works on in-memory lists only.
Mutations commit immediately; callers re-fetch afterwards instead of patching
lists in place.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import TRANSACTIONS_FETCH_LIMIT
from models import Budget, Category, Transaction
from app.errors import RecordNotFound
from app.services.periods import budget_end_date
from app.services.records import BudgetRecord, CategoryRef, TransactionRecord
from app.services.summary import BudgetStatus, budget_spent, budget_status

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# ORM -> record conversion
# -------------------------------------------------------------------

def _category_ref(category: Optional[Category]) -> Optional[CategoryRef]:
    if category is None:
        return None
    return CategoryRef(name=category.name, color=category.color)


def to_transaction_record(tx: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=tx.id,
        amount=tx.amount,
        type=tx.type,
        description=tx.description,
        date=tx.date,
        category_id=tx.category_id,
        categories=_category_ref(tx.category),
    )


def to_budget_record(budget: Budget) -> BudgetRecord:
    return BudgetRecord(
        id=budget.id,
        amount=budget.amount,
        period=budget.period,
        start_date=budget.start_date,
        end_date=budget.end_date,
        category_id=budget.category_id,
        categories=_category_ref(budget.category),
    )


# -------------------------------------------------------------------
# Reads
# -------------------------------------------------------------------

def list_transactions(
    db: Session,
    limit: Optional[int] = TRANSACTIONS_FETCH_LIMIT,
    type: Optional[str] = None,
    category_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[TransactionRecord]:
    """
    Most recent transactions first, optionally narrowed by predicates.
    `limit=None` returns every matching row.
    """
    query = db.query(Transaction)

    if type:
        query = query.filter(Transaction.type == type)
    if category_id:
        query = query.filter(Transaction.category_id == category_id)
    if start_date:
        query = query.filter(Transaction.date >= start_date)
    if end_date:
        query = query.filter(Transaction.date <= end_date)

    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    if limit is not None:
        query = query.limit(limit)

    return [to_transaction_record(tx) for tx in query.all()]


def fetch_or_empty(fetch: Callable[..., list], db: Session, what: str, **kwargs) -> Tuple[list, Optional[str]]:
    """
    Run a list query; on a store error log it and hand back an empty list
    plus a user-facing notice instead of failing the page.
    """
    try:
        return fetch(db, **kwargs), None
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[%s] Error fetching %s: %r", what, what, e)
        return [], f"Failed to load {what}. Please try again."


def count_or_zero(count: Callable[[Session], int], db: Session, what: str) -> Tuple[int, Optional[str]]:
    """Same as fetch_or_empty for count queries: a failed count reads as 0."""
    try:
        return count(db), None
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("[%s] Error counting %s: %r", what, what, e)
        return 0, f"Failed to load {what}. Please try again."


def list_categories(db: Session, type: Optional[str] = None) -> List[Category]:
    query = db.query(Category)
    if type:
        query = query.filter(Category.type == type)
    return query.order_by(Category.name).all()


def category_types(db: Session) -> Dict[str, str]:
    """Category id -> category type, used to validate submitted forms."""
    return {row.id: row.type for row in db.query(Category.id, Category.type).all()}


def count_categories(db: Session) -> int:
    return db.query(func.count(Category.id)).scalar() or 0


def count_budgets(db: Session) -> int:
    return db.query(func.count(Budget.id)).scalar() or 0


def list_budgets(db: Session) -> List[Tuple[BudgetRecord, BudgetStatus]]:
    """
    Newest budgets first, each paired with spend recomputed from the
    transactions inside its window.
    """
    budgets = db.query(Budget).order_by(Budget.created_at.desc()).all()

    result: List[Tuple[BudgetRecord, BudgetStatus]] = []
    for budget in budgets:
        record = to_budget_record(budget)
        candidates = list_transactions(
            db,
            limit=None,
            type="expense",
            category_id=budget.category_id,
            start_date=budget.start_date,
            end_date=budget.end_date,
        )
        spent = budget_spent(record, candidates)
        result.append((record, budget_status(record, spent)))
    return result


# -------------------------------------------------------------------
# Transaction mutations
# -------------------------------------------------------------------

def _get(db: Session, model, record_id: str, kind: str):
    obj = db.get(model, record_id)
    if obj is None:
        raise RecordNotFound(kind, record_id)
    return obj


def _commit(db: Session, obj=None) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    if obj is not None:
        db.refresh(obj)


def get_transaction(db: Session, transaction_id: str) -> Transaction:
    return _get(db, Transaction, transaction_id, "Transaction")


def create_transaction(db: Session, fields: Dict[str, Any]) -> Transaction:
    tx = Transaction(**fields)
    db.add(tx)
    _commit(db, tx)
    logger.info("[transactions] Added %s %s on %s (id=%s)", tx.type, tx.amount, tx.date, tx.id)
    return tx


def update_transaction(db: Session, transaction_id: str, fields: Dict[str, Any]) -> Transaction:
    tx = _get(db, Transaction, transaction_id, "Transaction")
    for name, value in fields.items():
        setattr(tx, name, value)
    _commit(db, tx)
    logger.info("[transactions] Updated id=%s", tx.id)
    return tx


def duplicate_transaction(db: Session, transaction_id: str, today: Optional[date] = None) -> Transaction:
    """Copy a transaction under a fresh id, dated today."""
    source = _get(db, Transaction, transaction_id, "Transaction")
    copy = Transaction(
        amount=source.amount,
        type=source.type,
        description=source.description,
        category_id=source.category_id,
        date=today or date.today(),
    )
    db.add(copy)
    _commit(db, copy)
    logger.info("[transactions] Duplicated id=%s as id=%s", source.id, copy.id)
    return copy


def delete_transaction(db: Session, transaction_id: str) -> None:
    tx = _get(db, Transaction, transaction_id, "Transaction")
    db.delete(tx)
    _commit(db)
    logger.info("[transactions] Deleted id=%s", transaction_id)


# -------------------------------------------------------------------
# Category mutations
# -------------------------------------------------------------------

def create_category(db: Session, fields: Dict[str, Any]) -> Category:
    category = Category(**fields)
    db.add(category)
    _commit(db, category)
    logger.info("[categories] Added %r (%s)", category.name, category.type)
    return category


def delete_category(db: Session, category_id: str) -> str:
    """
    Remove a category. Referencing transactions and budgets are left as
    they are and show up as uncategorized from now on.
    """
    category = _get(db, Category, category_id, "Category")
    name = category.name
    db.delete(category)
    _commit(db)
    logger.info("[categories] Deleted %r (id=%s)", name, category_id)
    return name


# -------------------------------------------------------------------
# Budget mutations
# -------------------------------------------------------------------

def create_budget(db: Session, fields: Dict[str, Any], today: Optional[date] = None) -> Budget:
    start = today or date.today()
    budget = Budget(
        start_date=start,
        end_date=budget_end_date(start, fields["period"]),
        **fields,
    )
    db.add(budget)
    _commit(db, budget)
    logger.info(
        "[budgets] Added %s budget of %s for category id=%s (%s..%s)",
        budget.period, budget.amount, budget.category_id, budget.start_date, budget.end_date,
    )
    return budget


def delete_budget(db: Session, budget_id: str) -> str:
    budget = _get(db, Budget, budget_id, "Budget")
    name = budget.category.name if budget.category else "Uncategorized"
    db.delete(budget)
    _commit(db)
    logger.info("[budgets] Deleted budget id=%s", budget_id)
    return name
