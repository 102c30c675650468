# smart_budget/auth.py
import os
from datetime import timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from . import models
from .database import utc_now
from .dependencies import get_db
from .schemas.user import CurrentUser

ALGORITHM = "HS256"

# Security scheme; missing headers are reported as 401 below, not 403
security = HTTPBearer(auto_error=False)


def get_jwt_secret() -> Optional[str]:
    return os.getenv("JWT_SECRET")


def token_lifetime() -> timedelta:
    return timedelta(minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440")))


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: int, role: str) -> str:
    """Issue a signed token carrying the user id (sub) and role."""
    secret = get_jwt_secret()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT Secret not configured"
        )
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": utc_now() + token_lifetime(),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> CurrentUser:
    """Verify signature and expiry. Raises JWTError on any invalid token."""
    payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    user_id = payload.get("sub")
    if user_id is None:
        raise JWTError("Token has no subject")
    try:
        return CurrentUser(user_id=int(user_id), role=payload.get("role") or "user")
    except ValueError:
        raise JWTError("Malformed subject")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Verifies the bearer token and returns the caller's identity.
    """
    if credentials is None:
        raise _unauthorized("Unauthorized")

    secret = get_jwt_secret()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT Secret not configured"
        )

    try:
        return decode_access_token(credentials.credentials, secret)
    except JWTError:
        raise _unauthorized("Invalid authentication credentials")


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def require_account(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """Like get_current_user, but also requires the user row to still exist.

    Used on write paths so a deleted user's unexpired token cannot create orphaned rows.
    """
    if db.get(models.User, current_user.user_id) is None:
        raise _unauthorized("Account no longer exists")
    return current_user
