# controllers/auth.py
"""Registration and login."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth import create_access_token
from ..dependencies import get_db
from ..schemas import user as schemas
from ..services import users as service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED,
             summary="Create an account")
def register(data: schemas.UserRegister, db: Session = Depends(get_db)):
    if service.get_by_email(db, data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = service.create_user(db, data)
    return schemas.AuthResponse(
        token=create_access_token(user.id, user.role),
        user=schemas.User.model_validate(user),
    )


@router.post("/login", response_model=schemas.AuthResponse, summary="Log in")
def login(data: schemas.UserLogin, db: Session = Depends(get_db)):
    user = service.authenticate(db, data.email, data.password)
    if not user:
        logger.info(f"Failed login for {data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return schemas.AuthResponse(
        token=create_access_token(user.id, user.role),
        user=schemas.User.model_validate(user),
    )
