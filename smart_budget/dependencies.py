# smart_budget/dependencies.py
"""Centralized dependencies for FastAPI application."""

from fastapi import Request

from .database import SessionLocal
from .services.realtime import ConnectionManager


def get_db():
    """Database session dependency.

    Yields a database session and ensures it's closed after use.
    Usage: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notifier(request: Request) -> ConnectionManager:
    """Fan-out service held on app.state.

    Tests override this dependency with a recording implementation.
    """
    return request.app.state.notifier
