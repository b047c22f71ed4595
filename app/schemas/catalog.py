from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, Field, constr

Category = Literal["electronics", "fashion", "food", "books", "toys", "sports", "other"]


class ProductCreateRequest(BaseModel):
    name: constr(strip_whitespace=True, min_length=6, max_length=100)
    description: constr(strip_whitespace=True, min_length=1)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    stock: int = Field(gt=0)
    category: Category


class ProductUpdateRequest(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=6, max_length=100)] = None
    description: Optional[constr(strip_whitespace=True, min_length=1)] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    category: Optional[Category] = None


class BulkDeleteRequest(BaseModel):
    product_ids: list[int] = Field(min_length=1)
