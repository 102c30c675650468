from pydantic import Field

from .base import APIModel


class AdminAnalytics(APIModel):
    total_users: int
    total_expenses: int
    active_users_7_days: int = Field(alias="activeUsers7Days")
    active_users_30_days: int = Field(alias="activeUsers30Days")
    total_expense_amount: float
