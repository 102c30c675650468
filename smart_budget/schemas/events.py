"""Payloads pushed over the real-time channel."""

from datetime import datetime

from .base import APIModel


class ExpenseAdded(APIModel):
    id: int
    amount: float
    reason: str
    category: str
    tracking_mode: str
    date: datetime


class BudgetUpdated(APIModel):
    id: int
    total_amount: float
    remaining_amount: float
