"""Toegangscontrole: token-validatie en admin-capabilities."""
from datetime import timedelta

import pytest
from jose import jwt

from errors import Forbidden, Unauthenticated
from Inlog.auth import DELETE, PURCHASE, READ, RESTOCK, Identity, authenticate, authorize
from Inlog.config import get_settings
from Inlog.security import create_access_token


def test_missing_token(client):
    response = client.get("/api/sweets")
    assert response.status_code == 401
    assert response.json()["success"] is False
    assert "token" in response.json()["message"].lower()


def test_garbage_token(client):
    response = client.get("/api/sweets", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token."


def test_token_signed_with_other_secret(client, user):
    token = jwt.encode({"sub": str(user.id), "role": "admin"}, "other-secret", algorithm="HS256")
    response = client.get("/api/sweets", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_expired_token(client, user):
    token = create_access_token(user, expires_delta=timedelta(minutes=-1))
    response = client.get("/api/sweets", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token."


def test_token_for_deleted_user(client, session, user, user_headers):
    session.delete(user)
    session.commit()

    response = client.get("/api/sweets", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token. User not found."


def test_authenticate_reasons(session, user):
    with pytest.raises(Unauthenticated) as exc:
        authenticate(None, session)
    assert exc.value.reason == "missing"

    with pytest.raises(Unauthenticated) as exc:
        authenticate("nope", session)
    assert exc.value.reason == "invalid"

    settings = get_settings()
    ghost = jwt.encode({"sub": "9999"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(Unauthenticated) as exc:
        authenticate(ghost, session)
    assert exc.value.reason == "stale"

    identity = authenticate(create_access_token(user), session)
    assert identity == Identity(id=user.id, email="test@example.com", role="user")


def test_role_comes_from_database_not_token(client, session, user, add_sweet):
    # een user met een vervalst 'admin'-token blijft een user
    settings = get_settings()
    token = jwt.encode(
        {"sub": str(user.id), "role": "admin"}, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )
    sweet = add_sweet()
    response = client.delete(f"/api/sweets/{sweet.id}", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_capabilities_per_role():
    user = Identity(id=1, email="u@example.com", role="user")
    admin = Identity(id=2, email="a@example.com", role="admin")
    stranger = Identity(id=3, email="x@example.com", role="guest")

    assert user.can(READ) and user.can(PURCHASE)
    assert not user.can(DELETE) and not user.can(RESTOCK)
    assert admin.can(DELETE) and admin.can(RESTOCK) and admin.can(PURCHASE)
    assert not stranger.can(READ)

    assert authorize(admin, DELETE) is admin
    with pytest.raises(Forbidden):
        authorize(user, RESTOCK)


@pytest.mark.parametrize("method,suffix,body", [
    ("delete", "", None),
    ("post", "/restock", {"quantity": 5}),
])
def test_non_admin_cannot_delete_or_restock(client, user_headers, add_sweet, stored_quantity,
                                            method, suffix, body):
    sweet = add_sweet(quantity=10)

    kwargs = {"headers": user_headers}
    if body is not None:
        kwargs["json"] = body
    response = getattr(client, method)(f"/api/sweets/{sweet.id}{suffix}", **kwargs)

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Admin privileges required."
    assert stored_quantity(sweet.id) == 10


def test_forbidden_comes_before_not_found(client, user_headers):
    assert client.delete("/api/sweets/424242", headers=user_headers).status_code == 403
