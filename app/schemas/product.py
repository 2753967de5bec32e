from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, condecimal, conint, constr, field_validator, model_validator

from models.product import CATEGORIES

Category = Literal[CATEGORIES]
Price = condecimal(gt=0, max_digits=12, decimal_places=2)
MAX_IMAGES = 5


def _future(value: Optional[date]) -> Optional[date]:
    if value is not None and value <= datetime.utcnow().date():
        raise ValueError("Expiry date must be in the future")
    return value


def _images(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is not None and len(value) > MAX_IMAGES:
        raise ValueError(f"At most {MAX_IMAGES} images per product")
    return value


class ProductCreateRequest(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=150)
    description: Optional[str] = None
    category: Category
    original_price: Price
    discounted_price: Price
    quantity: conint(ge=0)
    expiry_date: date
    image_urls: Optional[List[str]] = None

    @field_validator("expiry_date")
    @classmethod
    def check_expiry(cls, v):
        return _future(v)

    @field_validator("image_urls")
    @classmethod
    def check_images(cls, v):
        return _images(v)

    @model_validator(mode="after")
    def discount_below_original(self):
        if self.discounted_price >= self.original_price:
            raise ValueError("Discounted price must be less than original price")
        return self


class ProductUpdateRequest(BaseModel):
    """Partial update. Stock is changed through the stock endpoint only."""

    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=150)] = None
    description: Optional[str] = None
    category: Optional[Category] = None
    original_price: Optional[Price] = None
    discounted_price: Optional[Price] = None
    expiry_date: Optional[date] = None
    image_urls: Optional[List[str]] = None

    # Omitting a field keeps it; sending null for a required column is an error
    @field_validator("name", "category", "original_price", "discounted_price", "expiry_date")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("expiry_date")
    @classmethod
    def check_expiry(cls, v):
        return _future(v)

    @field_validator("image_urls")
    @classmethod
    def check_images(cls, v):
        return _images(v)


class StockAdjustRequest(BaseModel):
    delta: conint(strict=True)

    @field_validator("delta")
    @classmethod
    def non_zero(cls, v):
        if v == 0:
            raise ValueError("Stock change must not be zero")
        return v


class OrderStatusRequest(BaseModel):
    status: str
    pickup_time: Optional[datetime] = None

    @model_validator(mode="after")
    def pickup_only_when_ready(self):
        if self.pickup_time is not None and self.status != "ready":
            raise ValueError("Pickup time can only be set when marking an order ready")
        return self


class ImageRemoveRequest(BaseModel):
    url: constr(min_length=1)


def prices_consistent(original: Decimal, discounted: Decimal) -> bool:
    return Decimal(discounted) < Decimal(original)
