# scripts/seed_admin.py
"""Create the administrator account if it does not exist yet.

Usage: python -m smart_budget.scripts.seed_admin
Reads ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME from the environment.
"""

import logging
import os
import sys

from ..database import Base, SessionLocal, engine
from ..schemas.user import UserRegister
from ..services import users as service

logger = logging.getLogger(__name__)


def seed_admin(db, email: str, password: str, name: str = "Admin User"):
    """Return the existing or newly created admin user."""
    existing = service.get_by_email(db, email)
    if existing:
        logger.info(f"Admin {email} already exists")
        return existing

    data = UserRegister(name=name, email=email, password=password)
    return service.create_user(db, data, role="admin")


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db, email, password, os.getenv("ADMIN_NAME", "Admin User"))
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
