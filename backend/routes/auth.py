# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import user as schemas
from utils.audit import record_failure
from utils.hashing import verify_password
from utils.logger import get_logger
from utils.tokenJWT import create_user_token, get_current_user

router = APIRouter(tags=["Auth"])


# Authenticate user and issue JWT token
@router.post("/auth", response_model=schemas.Token)
def login(payload: schemas.UserLogin, db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    normalized_email = payload.email.strip().lower()
    log.info("Received authentication request email=%s", normalized_email)

    db_user = db.query(User).filter(User.email == normalized_email).first()

    # Same answer for unknown e-mail and wrong password
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        log.info("Authentication failed email=%s", normalized_email)
        record_failure(db, log, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                       meta={"email": normalized_email})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password.")

    access_token = create_user_token(db_user)
    log.info("Authentication successful email=%s", normalized_email)
    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
