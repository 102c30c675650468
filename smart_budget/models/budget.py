# models/budget.py
"""SQLAlchemy model for budget envelopes."""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from ..database import Base, utc_now


class Budget(Base):
    """Spending target with a running remaining balance.

    ``remaining_amount`` is signed; a negative value means overspend.
    """
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total_amount = Column(Float, nullable=False)
    remaining_amount = Column(Float, nullable=False)
    start_date = Column(DateTime(timezone=True), default=utc_now)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)

    user = relationship("User", back_populates="budgets")
