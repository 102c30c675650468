from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, field_validator

from .base import APIModel


class UserRegister(APIModel):
    name: str
    email: EmailStr
    password: str

    @field_validator('name')
    @classmethod
    def name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Name is required')
        return v

    @field_validator('password')
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters')
        return v


class UserLogin(APIModel):
    email: EmailStr
    password: str


class User(APIModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime
    last_login: Optional[datetime] = None


class AuthResponse(APIModel):
    token: str
    user: User


class UserList(APIModel):
    users: List[User]


class CurrentUser(APIModel):
    """Identity decoded from a verified bearer token."""
    user_id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
