# backend/models/review.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from database import Base, new_object_id

class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(24), primary_key=True, default=new_object_id)
    product_id = Column(String(24), ForeignKey("products.id"), nullable=False, index=True)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, CheckConstraint("rating >= 1 AND rating <= 5"), nullable=False)
    comment = Column(String(1024), nullable=True)
    review_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
