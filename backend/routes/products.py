# backend/routes/products.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from models.order import OrderItem
from models.product import Product
from models.review import Review
from models.users import User
import schemas.product as product_schemas
from utils.audit import actor_id, write_log
from utils.integrity import ensure_no_dependents, ensure_unique, require_entity, require_reference
from utils.logger import get_logger
from utils.tokenJWT import policy_required
from utils.transaction import Transaction

router = APIRouter(prefix="/products", tags=["Products"])

can_mutate = policy_required("products")

DUPLICATE_NAME = "Product name already exists."


# =========================
# LIST OF PRODUCTS
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    category_id: Optional[str] = Query(None, description="Only products of this category"),
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
):
    log.info("Retrieving all products")
    query = db.query(Product)
    if category_id:
        query = query.filter(Product.category_id == category_id.lower())
    products = query.order_by(Product.name.asc()).all()
    log.info("Products retrieved successfully count=%d", len(products))
    return products


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    log.info("Retrieving product by ID id=%s", product_id)
    return require_entity(db, Product, product_id, "product")


# =========================
# CREATE PRODUCT
# =========================
@router.post("", response_model=product_schemas.ProductOut)
def add_product(
    payload: product_schemas.ProductIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Creating new product name=%s category_id=%s", payload.name, payload.category_id)

    with Transaction(db, log, "PRODUCT_CREATE", duplicate=DUPLICATE_NAME) as tx:
        require_reference(db, Category, payload.category_id, "category_id")
        ensure_unique(db, Product.name, payload.name, DUPLICATE_NAME)

        tx.writing()
        new_product = Product(**payload.model_dump())
        db.add(new_product)
        db.flush()
        write_log(db, user_id=actor, action="PRODUCT_CREATE", resource="products",
                  meta={"id": new_product.id, "name": new_product.name})

    log.info("Product created successfully id=%s", new_product.id)
    return new_product


# =========================
# UPDATE PRODUCT (PUT - full replace)
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: str,
    payload: product_schemas.ProductIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Updating product id=%s", product_id)

    with Transaction(db, log, "PRODUCT_UPDATE", duplicate=DUPLICATE_NAME) as tx:
        # Unknown target wins over a bad reference in the body
        product = require_entity(db, Product, product_id, "product", lock=True)
        require_reference(db, Category, payload.category_id, "category_id")
        ensure_unique(db, Product.name, payload.name, DUPLICATE_NAME, exclude_id=product.id)

        tx.writing()
        for key, value in payload.model_dump().items():
            setattr(product, key, value)
        write_log(db, user_id=actor, action="PRODUCT_UPDATE", resource="products", meta={"id": product.id})

    log.info("Product updated successfully id=%s", product.id)
    return product


# =========================
# DELETE PRODUCT
# =========================
@router.delete("/{product_id}", response_model=product_schemas.ProductOut)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Deleting product id=%s", product_id)

    with Transaction(db, log, "PRODUCT_DELETE") as tx:
        product = require_entity(db, Product, product_id, "product", lock=True)
        ensure_no_dependents(db, "product", product.id, [
            ("reviews", Review.product_id),
            ("orders", OrderItem.product_id, OrderItem.order_id),
        ])

        tx.writing()
        db.delete(product)
        write_log(db, user_id=actor, action="PRODUCT_DELETE", resource="products", meta={"id": product.id})

    log.info("Product deleted successfully id=%s", product.id)
    return product
