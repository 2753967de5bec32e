from typing import Optional
from pydantic import BaseModel


class CheckoutRequest(BaseModel):
    # Blank values are rejected by the checkout service with its own message
    delivery_address: Optional[str] = None
    phone_number: Optional[str] = None
    notes: Optional[str] = None
