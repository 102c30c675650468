# controllers/budgets.py
"""Budget envelope endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_account
from ..dependencies import get_db
from ..schemas import budget as schemas
from ..schemas.user import CurrentUser
from ..services import budgets as service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=schemas.BudgetCreated, status_code=status.HTTP_201_CREATED,
             summary="Create a new budget")
def create_budget(
    budget_data: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_account)
):
    """Create a budget; its remaining amount starts at total minus everything spent so far."""
    logger.info(f"Creating budget of {budget_data.total_amount} for user {current_user.user_id}")
    budget = service.create_budget(db, current_user.user_id, budget_data)
    return schemas.BudgetCreated(
        message="Budget created successfully",
        budget=schemas.Budget.model_validate(budget),
    )


@router.get("", response_model=schemas.BudgetCurrent, summary="Get my current budget")
def current_budget(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Most recently created budget, or null."""
    budget = service.latest_budget(db, current_user.user_id)
    return schemas.BudgetCurrent(
        budget=schemas.Budget.model_validate(budget) if budget is not None else None
    )


@router.get("/all", response_model=schemas.BudgetList, summary="List my budgets")
def list_budgets(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    budgets = service.list_budgets(db, current_user.user_id)
    return schemas.BudgetList(budgets=[schemas.Budget.model_validate(b) for b in budgets])


@router.get("/status", response_model=schemas.BudgetStatus, summary="Budget alert state")
def budget_status(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return service.budget_status(service.latest_budget(db, current_user.user_id))
