# models.py
# Role: SQLAlchemy ORM models for the budget tracker domain.
#       Defines transactions, user-defined categories, and per-category budgets.
#       Category references are soft: deleting a category leaves the
#       referencing rows in place with a dangling category_id.

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Date, Float, Text, DateTime
from sqlalchemy.orm import relationship

from db import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Category(Base):
    """
    A user-defined label for transactions.

    A category belongs to exactly one transaction type ("income" or "expense")
    and carries a hex color used by charts.
    """

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)

    name = Column(String, nullable=False)

    # "income" or "expense"
    type = Column(String(7), nullable=False)

    # Presentation color, e.g. "#3b82f6"
    color = Column(String(7), nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.now)


class Transaction(Base):
    """
    ORM model representing a single dated income or expense record.

    The amount is always a non-negative magnitude; the direction lives in `type`.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=new_id)

    amount = Column(Float, nullable=False)

    # "income" or "expense"
    type = Column(String(7), nullable=False)

    description = Column(Text, nullable=True)

    date = Column(Date, nullable=False, index=True)

    # Soft reference to categories.id (no FK constraint, no cascade)
    category_id = Column(String(36), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # Resolved at fetch time; None once the category row is gone
    category = relationship(
        "Category",
        primaryjoin="foreign(Transaction.category_id) == Category.id",
        viewonly=True,
        lazy="joined",
    )


class Budget(Base):
    """
    Spending ceiling for one expense category over a fixed date window.

    `spent` is not stored; it is recomputed from transactions on every read.
    """

    __tablename__ = "budgets"

    id = Column(String(36), primary_key=True, default=new_id)

    amount = Column(Float, nullable=False)

    # "weekly", "monthly" or "yearly"
    period = Column(String(7), nullable=False)

    start_date = Column(Date, nullable=False)

    # start_date + period length, fixed at creation
    end_date = Column(Date, nullable=False)

    category_id = Column(String(36), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.now)

    category = relationship(
        "Category",
        primaryjoin="foreign(Budget.category_id) == Category.id",
        viewonly=True,
        lazy="joined",
    )
