# errors.py ─────────────────────────────────────────────────
from typing import Dict, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Basis voor alle fouten die als envelope terug naar de client gaan."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(type(self).status_code, detail=message, headers=headers)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class OutOfStock(ValidationError):
    def __init__(self, message: str = "Sweet is out of stock"):
        super().__init__(message)


class InsufficientStock(ValidationError):
    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Insufficient stock. Only {available} available")


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    # reason: "missing" | "invalid" | "stale"
    def __init__(self, message: str, reason: str = "invalid"):
        self.reason = reason
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ApiError):
    # 409 zou netter zijn, maar de client verwacht 400
    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
