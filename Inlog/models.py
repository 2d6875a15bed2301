# backend/models.py
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True, nullable=False)
    email: str = Field(index=True, unique=True, nullable=False)   # altijd lowercase
    hashed_password: str
    role: str = Field(default="user", index=True)   # 'user' | 'admin'
    created_at: datetime = Field(default_factory=utcnow)


class UserRead(SQLModel):
    id: int
    username: str
    email: str
    role: str


class RegisterIn(SQLModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(SQLModel):
    email: Optional[str] = None
    password: Optional[str] = None
