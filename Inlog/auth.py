from typing import Callable, Annotated, Dict, FrozenSet, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel

from errors import Forbidden, Unauthenticated
from Inlog.database import get_session
from Inlog.models import User
from Inlog.security import decode_token

# ---------------------------------------------------------------------------
# 1. Bearer-token uit de Authorization-header; zelf afhandelen als hij ontbreekt
# ---------------------------------------------------------------------------
bearer = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# 2. Rollen → capabilities
# ---------------------------------------------------------------------------
READ = "sweets:read"
WRITE = "sweets:write"
PURCHASE = "sweets:purchase"
DELETE = "sweets:delete"
RESTOCK = "sweets:restock"

_USER: FrozenSet[str] = frozenset({READ, WRITE, PURCHASE})

PERMISSIONS: Dict[str, FrozenSet[str]] = {
    "user": _USER,
    "admin": _USER | {DELETE, RESTOCK},
}


class Identity(BaseModel):
    id: int
    email: str
    role: str

    @property
    def permissions(self) -> FrozenSet[str]:
        return PERMISSIONS.get(self.role, frozenset())

    def can(self, permission: str) -> bool:
        return permission in self.permissions


# ---------------------------------------------------------------------------
# 3. Authenticatie: token → Identity, of Unauthenticated met de oorzaak
# ---------------------------------------------------------------------------
def authenticate(token: Optional[str], db) -> Identity:
    if not token:
        raise Unauthenticated("Access denied. No token provided.", reason="missing")

    try:
        payload = decode_token(token)  # {"sub": "12", "email": ..., "role": ..., "exp": ...}
        user_id = int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid or expired token.", reason="invalid")

    user: User | None = db.get(User, user_id)
    if not user:
        raise Unauthenticated("Invalid token. User not found.", reason="stale")

    # rol komt uit de database, niet uit het token
    return Identity(id=user.id, email=user.email, role=user.role)


def get_current_identity(
    creds: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer)],
    db=Depends(get_session),
) -> Identity:
    return authenticate(creds.credentials if creds else None, db)


# ---------------------------------------------------------------------------
# 4. Autorisatie: dependency-factory per benodigde capability
# ---------------------------------------------------------------------------
def authorize(identity: Identity, *permissions: str) -> Identity:
    missing = [p for p in permissions if not identity.can(p)]
    if missing:
        raise Forbidden("Access denied. Admin privileges required.")
    return identity


def permission_required(*permissions: str) -> Callable:
    """
    Gebruik als Depends(permission_required(DELETE)).
    Eerst authenticeren (401), daarna capabilities checken (403).
    """

    def _wrapper(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        return authorize(identity, *permissions)

    return _wrapper
