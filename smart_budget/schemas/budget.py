import math
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from .base import APIModel


class BudgetCreate(APIModel):
    total_amount: float
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('total_amount')
    @classmethod
    def total_must_be_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError('Budget amount must be a positive number')
        return v


class Budget(APIModel):
    id: int
    user_id: int
    total_amount: float
    remaining_amount: float
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: datetime


class BudgetCreated(APIModel):
    message: str
    budget: Budget


class BudgetCurrent(APIModel):
    budget: Optional[Budget] = None


class BudgetList(APIModel):
    budgets: List[Budget]


class BudgetStatus(APIModel):
    budget: Optional[Budget] = None
    spent: float = 0.0
    remaining_percentage: Optional[float] = None
    status: str = "none"  # none, ok, warning, exceeded
