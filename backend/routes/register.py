# backend/routes/register.py
import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.common import Message
from schemas.user import RegisterIn
from utils.audit import record_failure, write_log
from utils.errors import Duplicate, MailDeliveryError
from utils.hashing import get_password_hash
from utils.integrity import ensure_unique
from utils.logger import get_logger
from utils.mailer import Mailer, get_mailer
from utils.tokenJWT import create_verification_token, decode_verification_token
from utils.transaction import Transaction

router = APIRouter(prefix="/register", tags=["Auth"])

ALREADY_REGISTERED = "User already registered."


# Insert the unverified account and commit it; runs in a worker thread
def create_pending_user(db: Session, log: logging.Logger, payload: RegisterIn, email: str) -> User:
    try:
        with Transaction(db, log, "REGISTER", duplicate=ALREADY_REGISTERED) as tx:
            ensure_unique(db, User.email, email, ALREADY_REGISTERED)

            tx.writing()
            user = User(
                username=payload.username,
                email=email,
                password_hash=get_password_hash(payload.password),
                is_admin=False,
                is_verified=False,
                verification_token=create_verification_token(email),
            )
            db.add(user)
            db.flush()
            write_log(db, user_id=user.id, action="REGISTER", resource="auth", meta={"email": user.email})
    except Duplicate:
        record_failure(db, log, user_id=None, action="REGISTER", resource="auth",
                       meta={"email": email, "reason": "Email exists"})
        raise
    return user


# Undo a registration whose verification mail could not be delivered
def discard_pending_user(db: Session, log: logging.Logger, user_id: str, email: str) -> None:
    with Transaction(db, log, "REGISTER_DISCARD") as tx:
        user = db.query(User).filter(User.id == user_id).with_for_update().first()
        tx.writing()
        if user is not None and not user.is_verified:
            db.delete(user)
        write_log(db, user_id=user_id, action="REGISTER", resource="auth", status="FAIL",
                  meta={"email": email, "reason": "Error sending email."})


# Register a new account and mail the verification link.
# Database work runs in the thread pool and no transaction stays open while the mail is in flight.
@router.post("", response_model=Message, status_code=status.HTTP_202_ACCEPTED)
async def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    log: logging.Logger = Depends(get_logger),
    mailer: Mailer = Depends(get_mailer),
):
    normalized_email = payload.email.strip().lower()
    log.info("Checking if user already exists email=%s", normalized_email)

    user = await run_in_threadpool(create_pending_user, db, log, payload, normalized_email)

    log.info("Sending verification email email=%s", normalized_email)
    try:
        await mailer.send_verification(normalized_email, user.verification_token)
    except (smtplib.SMTPException, OSError) as e:
        log.error("Error sending verification email email=%s error=%s", normalized_email, e)
        await run_in_threadpool(discard_pending_user, db, log, user.id, normalized_email)
        raise MailDeliveryError() from e

    log.info("Verification email sent email=%s", normalized_email)
    return {"message": "Verification email sent."}


# Confirm ownership of the e-mail address
@router.get("/verify/{token}", response_model=Message)
def verify_email(token: str, db: Session = Depends(get_db), log: logging.Logger = Depends(get_logger)):
    email = decode_verification_token(token)
    log.info("Verifying user email email=%s", email)

    with Transaction(db, log, "VERIFY_EMAIL") as tx:
        user = db.query(User).filter(User.email == email).with_for_update().first()
        if user is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token or user.")
        if user.is_verified:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already verified.")
        # Only the most recently issued token is accepted
        if user.verification_token != token:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token or user.")

        tx.writing()
        user.is_verified = True
        user.verification_token = None
        write_log(db, user_id=user.id, action="VERIFY_EMAIL", resource="auth", meta={"email": user.email})

    log.info("Email verified successfully email=%s", email)
    return {"message": "Email verified successfully."}
