# backend/models/order.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base, new_object_id

ORDER_STATUSES = ("Pending", "Shipped", "Delivered", "Cancelled")

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(24), primary_key=True, default=new_object_id)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    total_price = Column(Float, CheckConstraint("total_price >= 0"), nullable=False)
    order_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    status = Column(String(16), nullable=False, default="Pending")

    # Line items are owned by the order and replaced together with it
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan",
        order_by="OrderItem.position", lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('Pending', 'Shipped', 'Delivered', 'Cancelled')", name="ck_order_status"
        ),
    )

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(24), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(24), ForeignKey("products.id"), nullable=False, index=True)
    # Keeps line items in the order they were submitted
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)

    order = relationship("Order", back_populates="items")
