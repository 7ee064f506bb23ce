# backend/schemas/product.py
from typing import Annotated, List

from pydantic import Field, field_validator

from schemas.common import ORMBase, ObjectIdStr, StrictIn

PictureUrl = Annotated[str, Field(pattern=r"^https?://.+")]


# Shared attributes of a catalog product
class ProductIn(StrictIn):
    name: str = Field(..., min_length=5, max_length=50)
    description: str = Field(..., min_length=5, max_length=255)
    price: float = Field(..., ge=0)
    pictures: List[PictureUrl] = Field(default_factory=list, description="Picture URLs (http or https)")
    category_id: ObjectIdStr
    stock_quantity: int = Field(..., ge=0)

    @field_validator("price")
    @classmethod
    def _two_decimals(cls, v: float) -> float:
        return round(v, 2)


# Full product representation including ID
class ProductOut(ORMBase):
    id: str
    name: str
    description: str
    price: float
    pictures: List[str] = []
    category_id: str
    stock_quantity: int
