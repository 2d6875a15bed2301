# Voorraad/seed.py ─── admin-account + voorbeeldsnoep
import logging

from sqlmodel import Session, select

from Inlog.accounts import normalize_email
from Inlog.models import User
from Inlog.security import hash_password
from Voorraad.models import Sweet

logger = logging.getLogger(__name__)

ADMIN = {"username": "admin", "email": "admin@example.com", "password": "admin123"}

SAMPLES = [
    {"name": "Chocolate Bar", "category": "Chocolate", "price": 2.5, "quantity": 100},
    {"name": "Gummy Bears", "category": "Gummies", "price": 1.75, "quantity": 200},
    {"name": "Lollipop", "category": "Hard Candy", "price": 0.5, "quantity": 150},
]


def seed(db: Session) -> dict:
    """Idempotent: bestaande admin (op e-mail) en snoep (op naam) blijven staan."""
    created = {"admin": False, "sweets": []}

    email = normalize_email(ADMIN["email"])
    if not db.exec(select(User).where(User.email == email)).first():
        db.add(User(
            username=ADMIN["username"],
            email=email,
            hashed_password=hash_password(ADMIN["password"]),
            role="admin",
        ))
        created["admin"] = True
        logger.info("Created admin user: %s", email)

    for sample in SAMPLES:
        if db.exec(select(Sweet).where(Sweet.name == sample["name"])).first():
            continue
        db.add(Sweet(**sample))
        created["sweets"].append(sample["name"])
        logger.info("Added sample sweet: %s", sample["name"])

    db.commit()
    return created
