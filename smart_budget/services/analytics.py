# services/analytics.py
"""System-wide usage figures for administrators."""

from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..database import as_utc, utc_now
from ..schemas.analytics import AdminAnalytics


def active_users_since(db: Session, since) -> int:
    return db.query(models.User).filter(models.User.last_login >= since).count()


def admin_analytics(db: Session, now=None) -> AdminAnalytics:
    """Point-in-time counts, recomputed on every call."""
    now = as_utc(now) if now else utc_now()

    total_amount = db.query(
        func.coalesce(func.sum(models.Expense.amount), 0.0)
    ).scalar()

    return AdminAnalytics(
        total_users=db.query(models.User).count(),
        total_expenses=db.query(models.Expense).count(),
        active_users_7_days=active_users_since(db, now - timedelta(days=7)),
        active_users_30_days=active_users_since(db, now - timedelta(days=30)),
        total_expense_amount=total_amount,
    )
