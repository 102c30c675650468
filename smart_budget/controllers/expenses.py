# controllers/expenses.py
"""Expense ledger endpoints and personal analytics."""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_account
from ..dependencies import get_db, get_notifier
from ..schemas import expense as schemas
from ..schemas.user import CurrentUser
from ..services import expenses as service
from ..services.realtime import expense_events, publish

logger = logging.getLogger(__name__)

router = APIRouter()


def expense_filters(
    category: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    tracking_mode: Optional[str] = Query(None, alias="trackingMode", pattern="^(free|budget)$"),
) -> schemas.ExpenseFilters:
    try:
        return schemas.ExpenseFilters(
            category=category,
            start_date=start_date,
            end_date=end_date,
            tracking_mode=tracking_mode,
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors())


@router.post("", response_model=schemas.ExpenseCreated, status_code=status.HTTP_201_CREATED,
             summary="Record an expense")
async def create_expense(
    expense: schemas.ExpenseCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_account),
    notifier=Depends(get_notifier)
):
    """Record an expense for the caller; budget-mode expenses also decrement their budget.

    Live updates go out after the response is sent.
    """
    logger.info(f"Creating {expense.tracking_mode} expense: {expense.reason} ({expense.amount})")

    new_expense, budget = await run_in_threadpool(
        service.create_expense, db, current_user.user_id, expense
    )
    background_tasks.add_task(
        publish, notifier, current_user.user_id, expense_events(new_expense, budget)
    )

    return schemas.ExpenseCreated(
        message="Expense added successfully",
        expense=schemas.Expense.model_validate(new_expense),
        budget=schemas.Budget.model_validate(budget) if budget is not None else None,
    )


@router.get("", response_model=schemas.ExpenseList, summary="List my expenses")
def list_expenses(
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Caller's expenses matching all filters, newest first. Date bounds are inclusive."""
    expenses = service.list_expenses(db, current_user.user_id, filters)
    return schemas.ExpenseList(expenses=[schemas.Expense.model_validate(e) for e in expenses])


@router.get("/summary", response_model=schemas.ExpenseSummary, summary="Spending statistics")
def expense_summary(
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return service.summarize(service.list_expenses(db, current_user.user_id, filters))


@router.get("/report", response_model=schemas.ExpenseReport, summary="Time-bucketed spending")
def expense_report(
    period: str = Query("monthly", pattern="^(daily|weekly|monthly)$"),
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Sum and count of expenses per day, week (starting Sunday) or month."""
    return service.report(service.list_expenses(db, current_user.user_id, filters), period)
