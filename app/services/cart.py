from dataclasses import dataclass
from decimal import Decimal
from typing import List

from app.exceptions import AppError, NotFound
from app.utils.money import to_money
from models import db
from models.cart import CartItem
from models.product import Product
from models.profile import Profile


class CartError(AppError):
    pass


@dataclass
class CartLine:
    """One cart row joined with the product as it is right now."""

    item_id: int
    product_id: int
    seller_id: int
    name: str
    quantity: int
    stock: int
    unit_price: Decimal
    original_price: Decimal
    available: bool

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)

    @property
    def savings(self) -> Decimal:
        if self.original_price <= self.unit_price:
            return to_money(0)
        return to_money((self.original_price - self.unit_price) * self.quantity)


def _listable_product(product_id) -> Product:
    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product or not product.is_listable():
        raise NotFound("Product not available")
    return product


def _check_quantity(quantity, stock):
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise CartError("Quantity must be a whole number")
    if quantity < 1:
        raise CartError("Quantity must be at least 1")
    if quantity > stock:
        raise CartError(f"Not enough stock available. Only {stock} left")


def add_item(user_id: int, product_id, quantity=1) -> CartItem:
    """Create the cart row or increment it. Does NOT commit."""
    product = _listable_product(product_id)
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise CartError("Quantity must be at least 1")
    item = CartItem.query.filter_by(user_id=user_id, product_id=product.id).first()
    new_quantity = quantity + (item.quantity if item else 0)
    _check_quantity(new_quantity, product.quantity)
    if item:
        item.quantity = new_quantity
    else:
        item = CartItem(user_id=user_id, product_id=product.id, quantity=new_quantity)
        db.session.add(item)
    return item


def _own_item(user_id: int, item_id) -> CartItem:
    item = CartItem.query.filter_by(id=item_id, user_id=user_id).first() if item_id else None
    if not item:
        raise NotFound("Item not found in cart")
    return item


def update_item(user_id: int, item_id, quantity) -> CartItem:
    item = _own_item(user_id, item_id)
    _check_quantity(quantity, item.product.quantity)
    item.quantity = quantity
    return item


def remove_item(user_id: int, item_id):
    db.session.delete(_own_item(user_id, item_id))


def clear(user_id: int) -> int:
    return CartItem.query.filter_by(user_id=user_id).delete()


def count(user_id: int) -> int:
    return CartItem.query.filter_by(user_id=user_id).count()


def load_lines(user_id: int) -> List[CartLine]:
    rows = (
        db.session.query(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.created_at.asc(), CartItem.id.asc())
        .all()
    )
    return [
        CartLine(
            item_id=ci.id,
            product_id=p.id,
            seller_id=p.seller_id,
            name=p.name,
            quantity=ci.quantity,
            stock=p.quantity,
            unit_price=to_money(p.discounted_price),
            original_price=to_money(p.original_price),
            available=p.is_listable(),
        )
        for ci, p in rows
    ]


def summarize(lines: List[CartLine]) -> dict:
    total = sum((line.subtotal for line in lines), Decimal("0.00"))
    savings = sum((line.savings for line in lines), Decimal("0.00"))
    return {"total_price": float(total), "total_savings": float(savings)}


def seller_names(seller_ids) -> dict:
    if not seller_ids:
        return {}
    rows = Profile.query.filter(Profile.id.in_(list(seller_ids))).all()
    return {p.id: p.display_name for p in rows}
