# backend/routes/orders.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order, OrderItem
from models.product import Product
from models.users import User
from schemas.order import OrderIn, OrderOut
from utils.audit import actor_id, write_log
from utils.integrity import require_entity, require_reference, require_references
from utils.logger import get_logger
from utils.tokenJWT import policy_required
from utils.transaction import Transaction

router = APIRouter(prefix="/orders", tags=["Orders"])

can_mutate = policy_required("orders")


# Customer first, then every line's product in submission order
def _check_references(db: Session, payload: OrderIn) -> None:
    require_reference(db, User, payload.user_id, "user_id")
    require_references(db, Product, [line.product_id for line in payload.products], "product_id")

# Build order line rows keeping the submitted order
def _order_items(payload: OrderIn) -> List[OrderItem]:
    return [
        OrderItem(position=pos, product_id=line.product_id, quantity=line.quantity, price=line.price)
        for pos, line in enumerate(payload.products)
    ]


@router.get("", response_model=List[OrderOut])
def list_orders(
    user_id: Optional[str] = Query(None, description="Only orders placed by this user"),
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
):
    log.info("Retrieving all orders")
    query = db.query(Order)
    if user_id:
        query = query.filter(Order.user_id == user_id.lower())
    if status:
        query = query.filter(Order.status == status)
    orders = query.order_by(Order.order_date.asc()).all()
    log.info("Orders retrieved successfully count=%d", len(orders))
    return orders


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    log.info("Retrieving order by ID id=%s", order_id)
    return require_entity(db, Order, order_id, "order")


@router.post("", response_model=OrderOut)
def create_order(
    payload: OrderIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Creating new order user_id=%s total_price=%s status=%s",
             payload.user_id, payload.total_price, payload.status)

    with Transaction(db, log, "ORDER_CREATE") as tx:
        _check_references(db, payload)

        tx.writing()
        order = Order(
            user_id=payload.user_id,
            total_price=payload.total_price,
            order_date=payload.order_date or datetime.now(timezone.utc),
            status=payload.status,
            items=_order_items(payload),
        )
        db.add(order)
        db.flush()
        write_log(db, user_id=actor, action="ORDER_CREATE", resource="orders",
                  meta={"id": order.id, "lines": len(order.items)})

    log.info("Order created successfully id=%s", order.id)
    return order


@router.put("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: str,
    payload: OrderIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Updating order id=%s status=%s", order_id, payload.status)

    with Transaction(db, log, "ORDER_UPDATE") as tx:
        order = require_entity(db, Order, order_id, "order", lock=True)
        _check_references(db, payload)

        tx.writing()
        order.user_id = payload.user_id
        order.total_price = payload.total_price
        order.status = payload.status
        if payload.order_date is not None:
            order.order_date = payload.order_date
        # delete-orphan cascade drops the previous lines
        order.items = _order_items(payload)
        write_log(db, user_id=actor, action="ORDER_UPDATE", resource="orders", meta={"id": order.id})

    log.info("Order updated successfully id=%s", order.id)
    return order


@router.delete("/{order_id}", response_model=OrderOut)
def delete_order(
    order_id: str,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Deleting order id=%s", order_id)

    with Transaction(db, log, "ORDER_DELETE") as tx:
        order = require_entity(db, Order, order_id, "order", lock=True)

        tx.writing()
        db.delete(order)
        write_log(db, user_id=actor, action="ORDER_DELETE", resource="orders", meta={"id": order.id})

    log.info("Order deleted successfully id=%s", order.id)
    return order
