# backend/schemas/review.py
from datetime import datetime
from typing import Optional
from pydantic import Field
from schemas.common import ORMBase, ObjectIdStr, StrictIn


class ReviewIn(StrictIn):
    product_id: ObjectIdStr
    user_id: ObjectIdStr
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1024)
    review_date: Optional[datetime] = None  # defaults to the time of the write


class ReviewOut(ORMBase):
    id: str
    product_id: str
    user_id: str
    rating: int
    comment: Optional[str] = None
    review_date: datetime
