# backend/security.py
from datetime import datetime, timedelta, timezone
from typing import Any

from passlib.context import CryptContext
from jose import jwt

from Inlog.config import Settings, get_settings

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return pwd_context.hash(password + settings.pepper)


def verify_password(plain: str, hashed: str, settings: Settings | None = None) -> bool:
    settings = settings or get_settings()
    return pwd_context.verify(plain + settings.pepper, hashed)


def create_access_token(
    user, expires_delta: timedelta | None = None, settings: Settings | None = None
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expires_minutes)
    )
    to_encode = {"sub": str(user.id), "email": user.email, "role": user.role, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> Any:
    """Raises jose.JWTError bij een ongeldige handtekening of verlopen token."""
    settings = settings or get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
