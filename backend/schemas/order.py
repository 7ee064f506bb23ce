from pydantic import AliasChoices, BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

from schemas.common import ORMBase, ObjectIdStr, StrictIn

OrderStatus = Literal["Pending", "Shipped", "Delivered", "Cancelled"]


# Input schema for a single order line
class OrderLineIn(StrictIn):
    product_id: ObjectIdStr
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


# Body of POST /orders and PUT /orders/{id}
class OrderIn(StrictIn):
    user_id: ObjectIdStr
    products: List[OrderLineIn]
    total_price: float = Field(..., ge=0)
    order_date: Optional[datetime] = None
    status: OrderStatus


# Output schema for an individual order line item
class OrderLineOut(ORMBase):
    product_id: str
    quantity: int
    price: float


# Output schema representing the full order; lines are read from Order.items
class OrderOut(ORMBase):
    id: str
    user_id: str
    products: List[OrderLineOut] = Field(validation_alias=AliasChoices("products", "items"))
    total_price: float
    order_date: datetime
    status: str
