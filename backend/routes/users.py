# backend/routes/users.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order
from models.review import Review
from models.users import User
from schemas.user import UserIn, UserOut
from utils.audit import actor_id, write_log
from utils.hashing import get_password_hash
from utils.integrity import ensure_no_dependents, ensure_unique, require_entity
from utils.logger import get_logger
from utils.tokenJWT import policy_required
from utils.transaction import Transaction

router = APIRouter(prefix="/users", tags=["Users"])

can_mutate = policy_required("users")

ALREADY_REGISTERED = "User already registered."


# Retrieve all users sorted by username
@router.get("", response_model=List[UserOut])
def get_all_users(db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    log.info("Retrieving all users")
    users = db.query(User).order_by(User.username.asc()).all()
    log.info("Users retrieved successfully count=%d", len(users))
    return users


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return require_entity(db, User, user_id, "user")


# Create an account on behalf of someone (administrators may grant the admin flag)
@router.post("", response_model=UserOut)
def create_user(
    payload: UserIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    normalized_email = payload.email.strip().lower()
    log.info("Checking if user already exists email=%s", normalized_email)

    with Transaction(db, log, "USER_CREATE", duplicate=ALREADY_REGISTERED) as tx:
        ensure_unique(db, User.email, normalized_email, ALREADY_REGISTERED)

        tx.writing()
        user = User(
            username=payload.username,
            email=normalized_email,
            password_hash=get_password_hash(payload.password),
            is_admin=payload.is_admin,
            is_verified=False,
        )
        db.add(user)
        db.flush()
        write_log(db, user_id=actor, action="USER_CREATE", resource="users",
                  meta={"id": user.id, "email": user.email})

    log.info("User created successfully id=%s", user.id)
    return user


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    normalized_email = payload.email.strip().lower()
    log.info("Updating user id=%s", user_id)

    with Transaction(db, log, "USER_UPDATE", duplicate=ALREADY_REGISTERED) as tx:
        user = require_entity(db, User, user_id, "user", lock=True)
        ensure_unique(db, User.email, normalized_email, ALREADY_REGISTERED, exclude_id=user.id)

        tx.writing()
        user.username = payload.username
        user.email = normalized_email
        user.password_hash = get_password_hash(payload.password)
        user.is_admin = payload.is_admin
        write_log(db, user_id=actor, action="USER_UPDATE", resource="users", meta={"id": user.id})

    log.info("User updated successfully id=%s", user.id)
    return user


# Delete an account unless it still owns reviews or orders
@router.delete("/{user_id}", response_model=UserOut)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    current_user: Optional[User] = Depends(can_mutate),
):
    actor = actor_id(current_user)
    log.info("Deleting user id=%s", user_id)

    with Transaction(db, log, "USER_DELETE") as tx:
        user = require_entity(db, User, user_id, "user", lock=True)

        # Prevent self-deletion
        if actor is not None and user.id == actor:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

        ensure_no_dependents(db, "user", user.id, [
            ("reviews", Review.user_id),
            ("orders", Order.user_id),
        ])

        tx.writing()
        db.delete(user)
        write_log(db, user_id=actor, action="USER_DELETE", resource="users", meta={"id": user.id})

    log.info("User deleted successfully id=%s", user.id)
    return user
