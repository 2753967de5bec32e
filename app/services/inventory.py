"""Stock primitives.

Product.quantity is shared between every buyer and the owning seller, so it
is only changed with single conditional UPDATE statements. No caller reads
the quantity, computes a new value and writes it back.
"""
import logging
from sqlalchemy import update

from models import db
from models.product import Product

logger = logging.getLogger(__name__)


class StockError(Exception):
    pass


def decrement_stock(product_id: int, quantity: int) -> bool:
    """Take ``quantity`` units if at least that many remain.

    Returns False, changing nothing, when the stock is insufficient or the
    product does not exist. Does NOT commit.
    """
    if quantity < 1:
        raise StockError("Quantity must be at least 1")
    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.quantity >= quantity)
        .values(quantity=Product.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    return result.rowcount == 1


def restock(product_id: int, quantity: int) -> bool:
    """Give ``quantity`` units back. Does NOT commit."""
    if quantity < 1:
        raise StockError("Quantity must be at least 1")
    stmt = (
        update(Product)
        .where(Product.id == product_id)
        .values(quantity=Product.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    result = db.session.execute(stmt)
    return result.rowcount == 1


def adjust_stock(product_id: int, delta: int) -> bool:
    """Apply a signed change, refusing any change that would go below zero."""
    if delta == 0:
        raise StockError("Stock change must not be zero")
    if delta < 0:
        return decrement_stock(product_id, -delta)
    return restock(product_id, delta)


def current_stock(product_id: int):
    return db.session.execute(
        db.select(Product.quantity).where(Product.id == product_id)
    ).scalar_one_or_none()
