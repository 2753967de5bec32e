from decimal import Decimal

from sqlalchemy import func

from models import db
from models.order import Order
from models.product import Product


def seller_stats(seller_id: int) -> dict:
    products_count = Product.query.filter_by(seller_id=seller_id, is_active=True).count()
    orders_count = Order.query.filter_by(seller_id=seller_id).count()
    pending_count = Order.query.filter_by(seller_id=seller_id, status="pending").count()
    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.seller_id == seller_id, Order.status == "completed")
        .scalar()
    )
    return {
        "products_count": products_count,
        "orders_count": orders_count,
        "pending_orders_count": pending_count,
        "total_revenue": float(Decimal(revenue or 0)),
    }
