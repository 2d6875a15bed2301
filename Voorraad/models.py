# Voorraad/models.py
from datetime import datetime
from typing import Optional

from pydantic import StrictInt
from sqlmodel import SQLModel, Field

from Inlog.models import utcnow


class Sweet(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False)
    category: str = Field(index=True, nullable=False)
    price: float = Field(nullable=False)        # >= 0
    quantity: int = Field(default=0, nullable=False)   # >= 0
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class SweetRead(SQLModel):
    id: int
    name: str
    category: str
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime


# Alle velden optioneel: ontbrekende velden geven een eigen 400-melding.
# StrictInt: JSON true/false of 2.5 is geen aantal
class SweetCreate(SQLModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[StrictInt] = None


class SweetUpdate(SQLModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[StrictInt] = None


class StockChange(SQLModel):
    quantity: Optional[StrictInt] = None
