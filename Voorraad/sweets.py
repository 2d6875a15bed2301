"""
Voorraadbeheer voor snoep: CRUD, zoeken en het aanpassen van de voorraad.

Koop en aanvulling lopen via één conditionele UPDATE in de database
(``quantity >= n -> quantity - n``), zodat gelijktijdige aankopen van
hetzelfde artikel elkaar niet kunnen overschrijven. Alleen als die UPDATE
niets raakt lezen we de rij om de juiste fout te bepalen.
"""
import logging
import math
from typing import Dict, List, Optional

from sqlalchemy import func, update
from sqlmodel import Session, select

from errors import Conflict, InsufficientStock, NotFound, OutOfStock, ValidationError
from Inlog.models import utcnow
from Voorraad.models import Sweet, SweetCreate, SweetRead, SweetUpdate

logger = logging.getLogger(__name__)

PURCHASE_ATTEMPTS = 3


# -- helpers ---------------------------------------------------------------

def public_sweet(sweet: Sweet) -> dict:
    return SweetRead.model_validate(sweet).model_dump()


def _get_or_404(db: Session, sweet_id: int) -> Sweet:
    sweet = db.get(Sweet, sweet_id)
    if sweet is None:
        raise NotFound("Sweet not found")
    return sweet


def _check_amount(amount: Optional[int], action: str) -> int:
    if amount is None or amount <= 0:
        raise ValidationError(f"Please provide a valid {action} quantity (positive integer)")
    return amount


def _newest_first(stmt):
    return stmt.order_by(Sweet.created_at.desc(), Sweet.id.desc())


# -- lezen -----------------------------------------------------------------

def list_sweets(db: Session) -> List[Sweet]:
    return list(db.exec(_newest_first(select(Sweet))).all())


def search_sweets(
    db: Session,
    name: Optional[str] = None,
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[Sweet]:
    """Filters combineren met AND; een leeg resultaat is geen fout."""
    stmt = select(Sweet)
    if name:
        stmt = stmt.where(func.lower(Sweet.name).contains(name.lower(), autoescape=True))
    if category:
        stmt = stmt.where(func.lower(Sweet.category).contains(category.lower(), autoescape=True))
    if min_price is not None:
        stmt = stmt.where(Sweet.price >= min_price)
    if max_price is not None:
        stmt = stmt.where(Sweet.price <= max_price)
    return list(db.exec(_newest_first(stmt)).all())


# -- schrijven -------------------------------------------------------------

def create_sweet(db: Session, data: SweetCreate) -> Sweet:
    # prijs en aantal mogen 0 zijn, maar niet ontbreken
    if not data.name or not data.category or data.price is None or data.quantity is None:
        raise ValidationError(
            "Please provide name, category, price, and quantity (all fields are required)"
        )
    if not math.isfinite(data.price) or data.price < 0 or data.quantity < 0:
        raise ValidationError("Price and quantity must be non-negative numbers")

    now = utcnow()
    sweet = Sweet(
        name=data.name,
        category=data.category,
        price=data.price,
        quantity=data.quantity,
        created_at=now,
        updated_at=now,
    )
    db.add(sweet)
    db.commit()
    db.refresh(sweet)
    logger.info("Created sweet %s (%s)", sweet.id, sweet.name)
    return sweet


def _validate_changes(data: SweetUpdate) -> Dict[str, object]:
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None:
            raise ValidationError(f"{field} cannot be null")
    if "name" in changes and not changes["name"]:
        raise ValidationError("name cannot be empty")
    if "category" in changes and not changes["category"]:
        raise ValidationError("category cannot be empty")
    if "price" in changes and (not math.isfinite(changes["price"]) or changes["price"] < 0):
        raise ValidationError("Price must be a non-negative number")
    if "quantity" in changes and changes["quantity"] < 0:
        raise ValidationError("Quantity must be a non-negative number")
    return changes


def update_sweet(db: Session, sweet_id: int, data: SweetUpdate) -> Sweet:
    sweet = _get_or_404(db, sweet_id)
    # eerst alles valideren, pas daarna toewijzen: nooit een halve update
    changes = _validate_changes(data)

    for field, value in changes.items():
        setattr(sweet, field, value)
    sweet.updated_at = utcnow()
    db.add(sweet)
    db.commit()
    db.refresh(sweet)
    logger.info("Updated sweet %s: %s", sweet.id, ", ".join(changes) or "no fields")
    return sweet


def delete_sweet(db: Session, sweet_id: int) -> Sweet:
    sweet = _get_or_404(db, sweet_id)
    db.delete(sweet)
    db.commit()
    logger.info("Deleted sweet %s (%s)", sweet_id, sweet.name)
    return sweet


# -- voorraad --------------------------------------------------------------

def purchase_sweet(db: Session, sweet_id: int, amount: Optional[int]) -> Dict[str, object]:
    amount = _check_amount(amount, "purchase")

    for _ in range(PURCHASE_ATTEMPTS):
        stmt = (
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity >= amount)
            .values(quantity=Sweet.quantity - amount, updated_at=utcnow())
        )
        result = db.connection().execute(stmt)
        if result.rowcount:
            break

        db.rollback()
        sweet = _get_or_404(db, sweet_id)
        if sweet.quantity == 0:
            logger.warning("Purchase of %s rejected: out of stock", sweet_id)
            raise OutOfStock()
        if sweet.quantity < amount:
            logger.warning(
                "Purchase of %s rejected: wanted %s, %s available", sweet_id, amount, sweet.quantity
            )
            raise InsufficientStock(sweet.quantity)
        # tussen UPDATE en lezen aangevuld: opnieuw proberen
    else:
        raise Conflict("Stock changed during purchase, please try again")

    db.commit()
    sweet = _get_or_404(db, sweet_id)
    db.refresh(sweet)
    logger.info("Purchased %s x sweet %s, %s left", amount, sweet_id, sweet.quantity)
    return {"id": sweet.id, "name": sweet.name, "quantity": sweet.quantity, "purchased": amount}


def restock_sweet(db: Session, sweet_id: int, amount: Optional[int]) -> Dict[str, object]:
    amount = _check_amount(amount, "restock")

    stmt = (
        update(Sweet)
        .where(Sweet.id == sweet_id)
        .values(quantity=Sweet.quantity + amount, updated_at=utcnow())
    )
    result = db.connection().execute(stmt)

    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Sweet not found")

    db.commit()
    sweet = _get_or_404(db, sweet_id)
    db.refresh(sweet)
    logger.info("Restocked %s x sweet %s, now %s", amount, sweet_id, sweet.quantity)
    return {"id": sweet.id, "name": sweet.name, "quantity": sweet.quantity, "restocked": amount}
