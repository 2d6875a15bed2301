# backend/config.py
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    database_url: str = "sqlite:///./sweetshop.db"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24 * 7      # 7 dagen
    pepper: str = ""
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lees de configuratie één keer uit de omgeving (of .env)."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./sweetshop.db"),
        jwt_secret=os.getenv("JWT_SECRET", "change-me"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", 60 * 24 * 7)),
        pepper=os.getenv("PEPPER", ""),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
