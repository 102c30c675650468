# controllers/users.py
"""User management. Listing and deletion are admin only."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..auth import get_current_user, require_admin
from ..dependencies import get_db
from ..schemas import user as schemas
from ..schemas.user import CurrentUser
from ..services import users as service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=schemas.UserList, summary="List all users")
def list_users(
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    users = service.list_users(db)
    return schemas.UserList(users=[schemas.User.model_validate(u) for u in users])


@router.get("/me", response_model=schemas.User, summary="My profile")
def my_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    user = db.get(models.User, current_user.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return schemas.User.model_validate(user)


@router.delete("/{user_id}", summary="Delete a user")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """Delete a non-admin user with all of their expenses and budgets."""
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user.is_admin:
        raise HTTPException(status_code=403, detail="Admin accounts cannot be deleted")

    logger.info(f"Admin {admin.user_id} deleting user {user_id}")
    service.delete_user(db, user)
    return {"message": "User deleted successfully"}
