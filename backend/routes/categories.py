# backend/routes/categories.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from models.product import Product
from models.users import User
from schemas.category import CategoryIn, CategoryOut
from utils.audit import actor_id, write_log
from utils.integrity import ensure_no_dependents, ensure_unique, require_entity
from utils.logger import get_logger
from utils.tokenJWT import policy_required
from utils.transaction import Transaction

router = APIRouter(prefix="/categories", tags=["Categories"])

can_mutate = policy_required("categories")

DUPLICATE_NAME = "Category name already exists."


# Retrieve all categories sorted by name
@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    log.info("Obtaining the full list of categories")
    categories = db.query(Category).order_by(Category.name.asc()).all()
    log.info("Categories retrieved successfully count=%d", len(categories))
    return categories


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return require_entity(db, Category, category_id, "category")


# Create a new category with a unique name
@router.post("", response_model=CategoryOut)
def create_category(
    payload: CategoryIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Creating new category name=%s", payload.name)

    with Transaction(db, log, "CATEGORY_CREATE", duplicate=DUPLICATE_NAME) as tx:
        ensure_unique(db, Category.name, payload.name, DUPLICATE_NAME)

        tx.writing()
        category = Category(**payload.model_dump())
        db.add(category)
        db.flush()
        write_log(db, user_id=actor, action="CATEGORY_CREATE", resource="categories",
                  meta={"id": category.id, "name": category.name})

    log.info("Category created successfully id=%s", category.id)
    return category


# Replace name and description of an existing category
@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: str,
    payload: CategoryIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Updating category id=%s", category_id)

    with Transaction(db, log, "CATEGORY_UPDATE", duplicate=DUPLICATE_NAME) as tx:
        category = require_entity(db, Category, category_id, "category", lock=True)
        ensure_unique(db, Category.name, payload.name, DUPLICATE_NAME, exclude_id=category.id)

        tx.writing()
        for key, value in payload.model_dump().items():
            setattr(category, key, value)
        write_log(db, user_id=actor, action="CATEGORY_UPDATE", resource="categories", meta={"id": category.id})

    log.info("Category updated successfully id=%s", category.id)
    return category


# Delete a category unless products still belong to it
@router.delete("/{category_id}", response_model=CategoryOut)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Deleting category id=%s", category_id)

    with Transaction(db, log, "CATEGORY_DELETE") as tx:
        category = require_entity(db, Category, category_id, "category", lock=True)
        ensure_no_dependents(db, "category", category.id, [("products", Product.category_id)])

        tx.writing()
        db.delete(category)
        write_log(db, user_id=actor, action="CATEGORY_DELETE", resource="categories", meta={"id": category.id})

    log.info("Category deleted successfully id=%s", category.id)
    return category
