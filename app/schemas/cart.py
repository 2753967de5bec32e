from pydantic import BaseModel, conint


class CartAddRequest(BaseModel):
    product_id: int
    quantity: conint(strict=True, ge=1) = 1


class CartUpdateRequest(BaseModel):
    item_id: int
    quantity: conint(strict=True, ge=1)


class CartItemRequest(BaseModel):
    item_id: int


class ProductRefRequest(BaseModel):
    product_id: int
