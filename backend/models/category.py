# backend/models/category.py
from sqlalchemy import Column, String
from database import Base, new_object_id

class Category(Base):
    __tablename__ = "categories"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=False)
