import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from main import app
from Inlog.database import get_session, init_db
from Inlog.models import User
from Inlog.security import create_access_token, hash_password
from Voorraad.models import Sweet


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session, username, email, role):
    user = User(
        username=username, email=email, hashed_password=hash_password("password123"), role=role
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user(session):
    return _make_user(session, "testuser", "test@example.com", "user")


@pytest.fixture
def admin(session):
    return _make_user(session, "admin", "admin@example.com", "admin")


@pytest.fixture
def user_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def add_sweet(session):
    def _add(name="Chocolate Bar", category="Chocolate", price=2.5, quantity=100):
        sweet = Sweet(name=name, category=category, price=price, quantity=quantity)
        session.add(sweet)
        session.commit()
        session.refresh(sweet)
        return sweet

    return _add


@pytest.fixture
def stored_quantity(engine):
    """Leest de voorraad buiten de request-sessie om."""
    def _read(sweet_id):
        with Session(engine) as s:
            sweet = s.get(Sweet, sweet_id)
            return None if sweet is None else sweet.quantity

    return _read
