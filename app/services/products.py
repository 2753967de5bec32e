"""Seller-side product management. Callers commit."""
import logging

from app.exceptions import AppError, NotFound
from app.schemas.product import prices_consistent
from app.services import inventory
from models import db
from models.cart import CartItem
from models.favorite import Favorite
from models.order import OrderItem
from models.product import Product

logger = logging.getLogger(__name__)


class ProductError(AppError):
    pass


def own_product(seller_id: int, product_id) -> Product:
    product = db.session.get(Product, product_id)
    if not product or product.seller_id != seller_id:
        raise NotFound("Product not found")
    return product


def list_for_seller(seller_id: int):
    return (
        Product.query.filter_by(seller_id=seller_id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )


def create_product(seller_id: int, data) -> Product:
    product = Product(
        seller_id=seller_id,
        name=data.name,
        description=data.description,
        category=data.category,
        original_price=data.original_price,
        discounted_price=data.discounted_price,
        quantity=data.quantity,
        expiry_date=data.expiry_date,
        image_urls=data.image_urls or None,
        is_active=True,
    )
    db.session.add(product)
    return product


def update_product(product: Product, data) -> Product:
    changes = data.model_dump(exclude_unset=True)
    original = changes.get("original_price", product.original_price)
    discounted = changes.get("discounted_price", product.discounted_price)
    if not prices_consistent(original, discounted):
        raise ProductError("Discounted price must be less than original price")
    for key, value in changes.items():
        if key == "image_urls":
            value = value or None
        setattr(product, key, value)
    return product


def toggle_active(product: Product) -> bool:
    product.is_active = not product.is_active
    return product.is_active


def adjust_stock(product: Product, delta: int) -> int:
    if not inventory.adjust_stock(product.id, delta):
        raise ProductError(f"Not enough stock to remove {-delta} units")
    db.session.flush()
    db.session.refresh(product)
    return product.quantity


def delete_product(product: Product) -> str:
    """Hard delete a product nobody ordered; otherwise hide it."""
    ordered = db.session.query(OrderItem.id).filter_by(product_id=product.id).first() is not None
    if ordered:
        product.is_active = False
        return "deactivated"
    CartItem.query.filter_by(product_id=product.id).delete()
    Favorite.query.filter_by(product_id=product.id).delete()
    db.session.delete(product)
    return "deleted"
