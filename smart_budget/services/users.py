# services/users.py
"""Account registration, login and admin user management."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..auth import hash_password, verify_password
from ..database import utc_now
from ..schemas import user as schemas

logger = logging.getLogger(__name__)


def get_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower()).first()


def create_user(db: Session, data: schemas.UserRegister, role: str = "user") -> models.User:
    user = models.User(
        name=data.name,
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({role})")
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[models.User]:
    """Check credentials; on success stamp last_login."""
    user = get_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None

    user.last_login = utc_now()
    db.commit()
    db.refresh(user)
    return user


def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(
        models.User.created_at.desc(), models.User.id.desc()
    ).all()


def delete_user(db: Session, user: models.User) -> None:
    """Remove the account together with its expenses and budgets."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")
