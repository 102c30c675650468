# services/expenses.py
"""Expense ledger operations and per-user reporting."""

import logging
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..database import as_utc, utc_now
from ..schemas import expense as schemas

logger = logging.getLogger(__name__)


def apply_to_budget(db: Session, user_id: int, budget_id: int, amount: float) -> Optional[models.Budget]:
    """Subtract ``amount`` from the caller's budget in one UPDATE statement.

    Returns the budget, or None when it is missing or owned by someone else.
    """
    updated = db.query(models.Budget).filter(
        models.Budget.id == budget_id,
        models.Budget.user_id == user_id
    ).update(
        {models.Budget.remaining_amount: models.Budget.remaining_amount - amount},
        synchronize_session=False
    )

    if not updated:
        logger.warning(
            f"Budget {budget_id} not found for user {user_id}; "
            f"expense recorded without budget decrement"
        )
        return None

    return db.get(models.Budget, budget_id)


def create_expense(
    db: Session,
    user_id: int,
    data: schemas.ExpenseCreate
) -> Tuple[models.Expense, Optional[models.Budget]]:
    """Insert an expense and, in budget mode, decrement its budget.

    Both writes share one transaction.
    """
    expense = models.Expense(
        user_id=user_id,
        amount=data.amount,
        reason=data.reason,
        category=data.category,
        tracking_mode=data.tracking_mode,
        budget_id=data.budget_id,
        date=as_utc(data.date) if data.date else utc_now(),
    )
    db.add(expense)

    budget = None
    if data.tracking_mode == "budget" and data.budget_id is not None:
        budget = apply_to_budget(db, user_id, data.budget_id, data.amount)

    db.commit()
    db.refresh(expense)
    if budget is not None:
        db.refresh(budget)

    logger.info(f"Expense {expense.id} added for user {user_id} ({expense.amount})")
    return expense, budget


def filtered_query(db: Session, user_id: int, filters: schemas.ExpenseFilters):
    query = db.query(models.Expense).filter(models.Expense.user_id == user_id)

    if filters.category:
        query = query.filter(models.Expense.category == filters.category)
    if filters.tracking_mode:
        query = query.filter(models.Expense.tracking_mode == filters.tracking_mode)
    if filters.start_date:
        query = query.filter(models.Expense.date >= as_utc(filters.start_date))
    if filters.end_date:
        query = query.filter(models.Expense.date <= as_utc(filters.end_date))

    return query


def list_expenses(db: Session, user_id: int, filters: schemas.ExpenseFilters) -> List[models.Expense]:
    """The caller's expenses matching every filter, newest first."""
    return filtered_query(db, user_id, filters).order_by(
        models.Expense.date.desc(),
        models.Expense.id.desc()
    ).all()


def total_spent(db: Session, user_id: int) -> float:
    """Sum of every expense of the user, across both tracking modes."""
    return db.query(func.coalesce(func.sum(models.Expense.amount), 0.0)).filter(
        models.Expense.user_id == user_id
    ).scalar()


def _month_start(moment):
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def summarize(expenses: List[models.Expense], now=None) -> schemas.ExpenseSummary:
    """Totals, month-over-month trend and per-category breakdown."""
    now = as_utc(now) if now else utc_now()
    amounts = [e.amount for e in expenses]
    total = sum(amounts)

    this_month = _month_start(now)
    last_month = _month_start(this_month - timedelta(days=1))
    this_month_total = sum(e.amount for e in expenses if as_utc(e.date) >= this_month)
    last_month_total = sum(
        e.amount for e in expenses if last_month <= as_utc(e.date) < this_month
    )

    trend = None
    if last_month_total > 0:
        trend = round((this_month_total - last_month_total) / last_month_total * 100, 2)

    by_category = {}
    for e in expenses:
        entry = by_category.setdefault(e.category, schemas.CategoryTotal(category=e.category, total=0, count=0))
        entry.total += e.amount
        entry.count += 1

    return schemas.ExpenseSummary(
        count=len(expenses),
        total=total,
        average=total / len(expenses) if expenses else 0.0,
        highest=max(amounts) if amounts else 0.0,
        lowest=min(amounts) if amounts else 0.0,
        this_month_total=this_month_total,
        last_month_total=last_month_total,
        trend=trend,
        by_category=sorted(by_category.values(), key=lambda c: c.total, reverse=True),
    )


def bucket_key(moment, period: str) -> str:
    day = as_utc(moment).date()
    if period == "daily":
        return day.isoformat()
    if period == "weekly":
        # Weeks start on Sunday
        return (day - timedelta(days=(day.weekday() + 1) % 7)).isoformat()
    if period == "monthly":
        return f"{day.year}-{day.month:02d}"
    raise ValueError(f"Unknown report period: {period}")


def report(expenses: List[models.Expense], period: str) -> schemas.ExpenseReport:
    """Sum and count expenses per day, week or month, ordered by bucket."""
    buckets = {}
    for e in expenses:
        key = bucket_key(e.date, period)
        bucket = buckets.setdefault(key, schemas.ReportBucket(name=key, amount=0, count=0))
        bucket.amount += e.amount
        bucket.count += 1

    return schemas.ExpenseReport(
        period=period,
        buckets=[buckets[key] for key in sorted(buckets)],
    )
