# backend/routes/reviews.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.review import Review
from models.users import User
from schemas.review import ReviewIn, ReviewOut
from utils.audit import actor_id, write_log
from utils.integrity import require_entity, require_reference
from utils.logger import get_logger
from utils.tokenJWT import policy_required
from utils.transaction import Transaction

router = APIRouter(prefix="/reviews", tags=["Reviews"])

can_mutate = policy_required("reviews")


# Reviewer and product must both exist inside the current transaction
def _check_references(db: Session, payload: ReviewIn) -> None:
    require_reference(db, User, payload.user_id, "user_id")
    require_reference(db, Product, payload.product_id, "product_id")


@router.get("", response_model=List[ReviewOut])
def list_reviews(db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    log.info("Retrieving all reviews")
    reviews = db.query(Review).order_by(Review.review_date.asc()).all()
    log.info("Reviews retrieved successfully count=%d", len(reviews))
    return reviews


@router.get("/{review_id}", response_model=ReviewOut)
def get_review(review_id: str, db: Session = Depends(get_db)):
    return require_entity(db, Review, review_id, "review")


@router.post("", response_model=ReviewOut)
def create_review(
    payload: ReviewIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Creating new review product_id=%s user_id=%s rating=%d",
             payload.product_id, payload.user_id, payload.rating)

    with Transaction(db, log, "REVIEW_CREATE") as tx:
        _check_references(db, payload)

        tx.writing()
        data = payload.model_dump()
        data["review_date"] = data["review_date"] or datetime.now(timezone.utc)
        review = Review(**data)
        db.add(review)
        db.flush()
        write_log(db, user_id=actor, action="REVIEW_CREATE", resource="reviews",
                  meta={"id": review.id, "product_id": review.product_id})

    log.info("Review created successfully id=%s", review.id)
    return review


@router.put("/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: str,
    payload: ReviewIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Updating review id=%s", review_id)

    with Transaction(db, log, "REVIEW_UPDATE") as tx:
        review = require_entity(db, Review, review_id, "review", lock=True)
        _check_references(db, payload)

        tx.writing()
        data = payload.model_dump()
        # An omitted date keeps the original one
        if data["review_date"] is None:
            data.pop("review_date")
        for key, value in data.items():
            setattr(review, key, value)
        write_log(db, user_id=actor, action="REVIEW_UPDATE", resource="reviews", meta={"id": review.id})

    log.info("Review updated successfully id=%s", review.id)
    return review


@router.delete("/{review_id}", response_model=ReviewOut)
def delete_review(
    review_id: str,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Deleting review id=%s", review_id)

    with Transaction(db, log, "REVIEW_DELETE") as tx:
        review = require_entity(db, Review, review_id, "review", lock=True)

        tx.writing()
        db.delete(review)
        write_log(db, user_id=actor, action="REVIEW_DELETE", resource="reviews", meta={"id": review.id})

    log.info("Review deleted successfully id=%s", review.id)
    return review
