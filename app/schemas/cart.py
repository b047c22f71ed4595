from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class SetQuantityRequest(BaseModel):
    product_id: int
    quantity: int


class RemoveFromCartRequest(BaseModel):
    product_id: int
