# backend/schemas/category.py
from pydantic import Field
from schemas.common import ORMBase, StrictIn


# Body of POST /categories and PUT /categories/{id}
class CategoryIn(StrictIn):
    name: str = Field(..., min_length=5, max_length=50)
    description: str = Field(..., min_length=5, max_length=255)


class CategoryOut(ORMBase):
    id: str
    name: str
    description: str
