import math
from datetime import datetime
from typing import List, Optional

from pydantic import field_validator, model_validator

from ..models import CATEGORIES, TRACKING_MODES
from .base import APIModel
from .budget import Budget


class ExpenseCreate(APIModel):
    amount: float
    reason: str
    category: str = "Other"
    date: Optional[datetime] = None
    tracking_mode: str = "free"
    budget_id: Optional[int] = None

    @field_validator('amount')
    @classmethod
    def amount_must_be_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError('Amount must be a positive number')
        return v

    @field_validator('reason')
    @classmethod
    def reason_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Description is required')
        return v

    @field_validator('category', mode='before')
    @classmethod
    def category_in_known_set(cls, v):
        if v in (None, ""):
            return "Other"
        if v not in CATEGORIES:
            raise ValueError(f"Unknown category: {v}")
        return v

    @field_validator('tracking_mode', mode='before')
    @classmethod
    def tracking_mode_known(cls, v):
        if v in (None, ""):
            return "free"
        if v not in TRACKING_MODES:
            raise ValueError("Tracking mode must be 'free' or 'budget'")
        return v

    @model_validator(mode='after')
    def budget_selection(self):
        if self.tracking_mode == "budget" and self.budget_id is None:
            raise ValueError('Select a budget for budget tracking')
        if self.tracking_mode == "free":
            self.budget_id = None
        return self


class Expense(APIModel):
    id: int
    user_id: int
    amount: float
    reason: str
    category: str
    tracking_mode: str
    budget_id: Optional[int] = None
    date: datetime
    created_at: datetime


class ExpenseCreated(APIModel):
    message: str
    expense: Expense
    # None when no budget was decremented
    budget: Optional[Budget] = None


class ExpenseList(APIModel):
    expenses: List[Expense]


class ExpenseFilters(APIModel):
    category: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    tracking_mode: Optional[str] = None

    @field_validator('category')
    @classmethod
    def category_in_known_set(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CATEGORIES:
            raise ValueError(f"Unknown category: {v}")
        return v


class CategoryTotal(APIModel):
    category: str
    total: float
    count: int


class ExpenseSummary(APIModel):
    count: int
    total: float
    average: float
    highest: float
    lowest: float
    this_month_total: float
    last_month_total: float
    trend: Optional[float] = None  # percent change vs. last month
    by_category: List[CategoryTotal] = []


class ReportBucket(APIModel):
    name: str
    amount: float
    count: int


class ExpenseReport(APIModel):
    period: str
    buckets: List[ReportBucket] = []
