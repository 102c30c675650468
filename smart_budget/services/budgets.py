# services/budgets.py
"""Budget envelope operations."""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import as_utc, utc_now
from ..schemas import budget as schemas
from .expenses import total_spent

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = timedelta(days=30)
WARNING_PERCENTAGE = 10.0


def create_budget(db: Session, user_id: int, data: schemas.BudgetCreate) -> models.Budget:
    """Create a budget seeded with the user's spend so far.

    ``remaining_amount`` is a one-time snapshot of ``total - all prior expenses``.
    Earlier budgets are kept; the latest one is the current budget.
    """
    spent = total_spent(db, user_id)
    now = utc_now()

    budget = models.Budget(
        user_id=user_id,
        total_amount=data.total_amount,
        remaining_amount=data.total_amount - spent,
        start_date=as_utc(data.start_date) if data.start_date else now,
        end_date=as_utc(data.end_date) if data.end_date else now + DEFAULT_PERIOD,
        created_at=now,
    )
    db.add(budget)
    db.commit()
    db.refresh(budget)

    logger.info(f"Budget {budget.id} created for user {user_id} (total {data.total_amount}, spent {spent})")
    return budget


def list_budgets(db: Session, user_id: int) -> List[models.Budget]:
    return db.query(models.Budget).filter(
        models.Budget.user_id == user_id
    ).order_by(models.Budget.created_at.desc(), models.Budget.id.desc()).all()


def latest_budget(db: Session, user_id: int) -> Optional[models.Budget]:
    return db.query(models.Budget).filter(
        models.Budget.user_id == user_id
    ).order_by(models.Budget.created_at.desc(), models.Budget.id.desc()).first()


def budget_status(budget: Optional[models.Budget]) -> schemas.BudgetStatus:
    """Alert state: exceeded below zero, warning under 10% left, else ok."""
    if budget is None:
        return schemas.BudgetStatus()

    percentage = budget.remaining_amount / budget.total_amount * 100
    if budget.remaining_amount < 0:
        status = "exceeded"
    elif 0 < percentage < WARNING_PERCENTAGE:
        status = "warning"
    else:
        status = "ok"

    return schemas.BudgetStatus(
        budget=schemas.Budget.model_validate(budget),
        spent=budget.total_amount - budget.remaining_amount,
        remaining_percentage=round(percentage, 2),
        status=status,
    )
