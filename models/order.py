from sqlalchemy import Column, String, Numeric, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.sql import func
from models import BIGINT
from models import db

ORDER_STATUSES = ("pending", "confirmed", "preparing", "ready", "completed", "cancelled")


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_seller_status", "seller_id", "status"),
    )
    id = Column(BIGINT, primary_key=True)
    buyer_id = Column(BIGINT, ForeignKey("profiles.id"), nullable=False, index=True)
    seller_id = Column(BIGINT, ForeignKey("profiles.id"), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    delivery_address = Column(Text, nullable=False)
    phone_number = Column(String(30), nullable=False)
    notes = Column(Text, nullable=True)
    pickup_time = Column(DateTime, nullable=True)

    # Set when a compensating write could not be applied
    needs_review = Column(Boolean, nullable=False, default=False)
    review_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    buyer = db.relationship("Profile", foreign_keys=[buyer_id], lazy=True)
    seller = db.relationship("Profile", foreign_keys=[seller_id], lazy=True)
    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)
    status_logs = db.relationship("OrderStatusLog", backref="order", cascade="all, delete-orphan", lazy=True)

    def to_dict(self, with_items=True):
        data = {
            "order_id": self.id,
            "buyer_id": self.buyer_id,
            "seller_id": self.seller_id,
            "seller_name": self.seller.display_name if self.seller else None,
            "status": self.status,
            "total_amount": float(self.total_amount),
            "delivery_address": self.delivery_address,
            "phone_number": self.phone_number,
            "notes": self.notes,
            "pickup_time": self.pickup_time.isoformat() if self.pickup_time else None,
            "needs_review": bool(self.needs_review),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_items:
            data["items"] = [oi.to_dict() for oi in self.items]
        return data


class OrderItem(db.Model):
    __tablename__ = "order_items"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(BIGINT, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(BIGINT, db.ForeignKey("products.id"), nullable=False)

    # Snapshot taken at purchase time
    product_name = db.Column(db.String(150))
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.product_name,
            "unit_price": float(self.unit_price),
            "quantity": self.quantity,
            "total_price": float(self.total_price),
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("orders.id"), nullable=False)
    status = Column(String(20), nullable=False)
    updated_by = Column(BIGINT, nullable=False)
    timestamp = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "status": self.status,
            "updated_by": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
