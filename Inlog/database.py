# backend/database.py
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from Inlog.config import get_settings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = get_settings().database_url
    return create_engine(
        url, echo=False, connect_args={"check_same_thread": False} if url.startswith("sqlite") else {}
    )


def init_db(engine: Engine | None = None) -> None:
    # tabellen moeten geregistreerd zijn vóór create_all
    import Inlog.models  # noqa: F401
    import Voorraad.models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())


def get_session():
    with Session(get_engine()) as session:
        yield session
