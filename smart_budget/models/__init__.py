from .user import User
from .expense import Expense, CATEGORIES, TRACKING_MODES
from .budget import Budget

__all__ = ["User", "Expense", "CATEGORIES", "TRACKING_MODES", "Budget"]
