# backend/accounts.py ───────────────────────────────────────
import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from errors import Conflict, Unauthenticated, ValidationError
from Inlog.models import LoginIn, RegisterIn, User, UserRead
from Inlog.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def public_user(user: User) -> dict:
    return UserRead.model_validate(user).model_dump()


# ▸ publieke API -------------------------------------------
def register_user(data: RegisterIn, db: Session, role: str = "user") -> Tuple[User, str]:
    if not data.username or not data.email or not data.password:
        raise ValidationError("Please provide username, email, and password")

    user = User(
        username=data.username.strip(),
        email=normalize_email(data.email),
        hashed_password=hash_password(data.password),
        role=role,
    )
    db.add(user)
    try:
        # uniekheid wordt door de unique-index afgedwongen, niet door een pre-check
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User with this email or username already exists")
    db.refresh(user)

    logger.info("Registered user %s (%s)", user.username, user.role)
    return user, create_access_token(user)


def authenticate_user(data: LoginIn, db: Session) -> Tuple[User, str]:
    if not data.email or not data.password:
        raise ValidationError("Please provide email and password")

    user: User | None = db.exec(
        select(User).where(User.email == normalize_email(data.email))
    ).first()

    if not user or not verify_password(data.password, user.hashed_password):
        raise Unauthenticated("Invalid email or password", reason="invalid")

    return user, create_access_token(user)
