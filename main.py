#!/usr/bin/env python3
import sys
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, APIRouter, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from Inlog.config import get_settings
from Inlog.database import init_db, get_session
from Inlog.models import RegisterIn, LoginIn
from Inlog.accounts import register_user, authenticate_user, public_user
from Inlog.auth import (
    Identity, permission_required, READ, WRITE, PURCHASE, DELETE, RESTOCK,
)
from Voorraad.models import SweetCreate, SweetUpdate, StockChange
from Voorraad import sweets as inventory

settings = get_settings()

# Configure logging to stdout
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# ─── FASTAPI SETUP ─────────────────────────────────────────────────────────
app = FastAPI(
    title="Sweet Shop",
    description="Sweet Shop Management API: voorraad, aankopen en beheer",
    version="1.0.0",
    lifespan=lifespan,
)
api = APIRouter(prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ok(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonable_encoder(body)


# ─── FOUTAFHANDELING ───────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"success": False, "message": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return JSONResponse(
        {
            "success": False,
            "message": "Invalid request data",
            "error": f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid value"),
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(Exception)
async def internal_error(request: Request, exc: Exception):
    # details alleen in de log, nooit naar de client
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        {"success": False, "message": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ─── ROOT & HEALTH ─────────────────────────────────────────────────────────
@app.get("/", include_in_schema=False)
def root():
    return {"success": True, "message": "Sweet Shop Management API is running!"}


@app.get("/health", tags=["Health"])
def health_check():
    logger.info("Health check invoked")
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


# ─── AUTH ──────────────────────────────────────────────────────────────────
@api.post("/auth/register", status_code=status.HTTP_201_CREATED, tags=["Auth"])
def register(data: RegisterIn, db=Depends(get_session)):
    user, token = register_user(data, db)
    return ok({"user": public_user(user), "token": token}, "User registered successfully")


@api.post("/auth/login", summary="Obtain JWT access token", tags=["Auth"])
def login(data: LoginIn, db=Depends(get_session)):
    """Controleer e-mail + wachtwoord en geef een getekende JWT met rol-claim terug."""
    user, token = authenticate_user(data, db)
    return ok({"user": public_user(user), "token": token}, "Login successful")


# ─── SWEETS ────────────────────────────────────────────────────────────────
@api.get("/sweets", tags=["Sweets"])
def list_sweets(db=Depends(get_session), _: Identity = Depends(permission_required(READ))):
    sweets = [inventory.public_sweet(s) for s in inventory.list_sweets(db)]
    return ok(sweets, "Sweets retrieved successfully")


@api.get("/sweets/search", tags=["Sweets"])
def search_sweets(
    name: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    db=Depends(get_session),
    _: Identity = Depends(permission_required(READ)),
):
    found = inventory.search_sweets(db, name, category, min_price, max_price)
    return ok([inventory.public_sweet(s) for s in found], f"Found {len(found)} sweet(s)")


@api.post("/sweets", status_code=status.HTTP_201_CREATED, tags=["Sweets"])
def create_sweet(
    data: SweetCreate,
    db=Depends(get_session),
    _: Identity = Depends(permission_required(WRITE)),
):
    sweet = inventory.create_sweet(db, data)
    return ok(inventory.public_sweet(sweet), "Sweet created successfully")


@api.put("/sweets/{sweet_id}", tags=["Sweets"])
def update_sweet(
    sweet_id: int,
    data: SweetUpdate,
    db=Depends(get_session),
    _: Identity = Depends(permission_required(WRITE)),
):
    sweet = inventory.update_sweet(db, sweet_id, data)
    return ok(inventory.public_sweet(sweet), "Sweet updated successfully")


@api.delete("/sweets/{sweet_id}", tags=["Sweets"])
def delete_sweet(
    sweet_id: int,
    db=Depends(get_session),
    _: Identity = Depends(permission_required(DELETE)),
):
    sweet = inventory.delete_sweet(db, sweet_id)
    return ok({"id": sweet_id, "name": sweet.name}, "Sweet deleted successfully")


@api.post("/sweets/{sweet_id}/purchase", tags=["Inventory"])
def purchase_sweet(
    sweet_id: int,
    data: StockChange,
    db=Depends(get_session),
    _: Identity = Depends(permission_required(PURCHASE)),
):
    return ok(inventory.purchase_sweet(db, sweet_id, data.quantity), "Purchase successful")


@api.post("/sweets/{sweet_id}/restock", tags=["Inventory"])
def restock_sweet(
    sweet_id: int,
    data: StockChange,
    db=Depends(get_session),
    _: Identity = Depends(permission_required(RESTOCK)),
):
    return ok(inventory.restock_sweet(db, sweet_id, data.quantity), "Restock successful")


app.include_router(api)

# ─── Uvicorn LAUNCH (DEV ONLY) ─────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=True
    )
