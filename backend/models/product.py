# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, JSON, ForeignKey, CheckConstraint
from database import Base, new_object_id

# Model Product
# A catalog entry belonging to exactly one category.
# Price and stock are guarded by CHECK constraints, picture URLs are kept as a JSON list.
class Product(Base):
    __tablename__ = "products"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=False)

    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    pictures = Column(JSON, nullable=False, default=list)

    category_id = Column(String(24), ForeignKey("categories.id"), nullable=False, index=True)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False)
