# --- models/product.py ---
from datetime import datetime
from models import db, BIGINT

CATEGORIES = ("bakery", "vegetables", "dairy", "meat", "fruits", "beverages", "other")


class Product(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        db.CheckConstraint("discounted_price < original_price", name="ck_products_discount_below_original"),
        db.Index("ix_products_category_active", "category", "is_active"),
    )

    id = db.Column(BIGINT, primary_key=True)
    seller_id = db.Column(BIGINT, db.ForeignKey("profiles.id"), nullable=False, index=True)

    # Core details
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(20), nullable=False)

    # Pricing
    original_price = db.Column(db.Numeric(12, 2), nullable=False)
    discounted_price = db.Column(db.Numeric(12, 2), nullable=False)

    # Stock, only ever changed through app.services.inventory
    quantity = db.Column(db.Integer, nullable=False, default=0)
    expiry_date = db.Column(db.Date, nullable=False)

    image_urls = db.Column(db.JSON, nullable=True)
    is_active = db.Column(db.Boolean, default=True)  # Soft delete

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    seller = db.relationship("Profile", backref=db.backref("products", lazy=True))

    def is_listable(self, today=None):
        today = today or datetime.utcnow().date()
        return bool(self.is_active) and self.expiry_date is not None and self.expiry_date >= today

    def to_dict(self, with_seller=False):
        data = {
            "id": self.id,
            "seller_id": self.seller_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "original_price": float(self.original_price),
            "discounted_price": float(self.discounted_price),
            "quantity": self.quantity,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "image_urls": self.image_urls or [],
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_seller and self.seller:
            data["seller"] = {
                "business_name": self.seller.business_name,
                "full_name": self.seller.full_name,
            }
        return data
