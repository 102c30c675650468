# models/expense.py
"""SQLAlchemy model for the expense ledger."""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from ..database import Base, utc_now

CATEGORIES = (
    "Food & Drinks",
    "Shopping",
    "Transport",
    "Bills & Utilities",
    "Rent",
    "Healthcare",
    "Entertainment",
    "Travel",
    "Education",
    "Investments",
    "Savings",
    "Other",
)

TRACKING_MODES = ("free", "budget")


class Expense(Base):
    """Single spend record, tagged with a tracking mode."""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    reason = Column(String, nullable=False)
    category = Column(String, nullable=False, default="Other")
    tracking_mode = Column(String, nullable=False, default="free")  # free, budget
    # Stored as submitted, even when the budget is missing or foreign
    budget_id = Column(Integer, nullable=True, index=True)
    date = Column(DateTime(timezone=True), default=utc_now, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("User", back_populates="expenses")
