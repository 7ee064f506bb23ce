# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

VERIFY_PURPOSE = "verify-email"

# Missing credentials are reported by get_current_user, not by the scheme itself
bearer_scheme = HTTPBearer(auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def create_user_token(user: User) -> str:
    return create_access_token({"sub": user.id, "isAdmin": bool(user.is_admin)})

# Short-lived token mailed to the user to prove ownership of the address
def create_verification_token(email: str) -> str:
    return create_access_token(
        {"email": email, "purpose": VERIFY_PURPOSE},
        expires_delta=timedelta(minutes=settings.VERIFICATION_TOKEN_EXPIRE_MINUTES),
    )

def decode_verification_token(token: str) -> str:
    """Return the e-mail address carried by a verification token."""
    invalid = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token.")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise invalid
    if payload.get("purpose") != VERIFY_PURPOSE or not payload.get("email"):
        raise invalid
    return payload["email"]

# Resolve a bearer token to the user it was issued for
def authenticate(token: str, db: Session) -> User:
    invalid = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token.")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        # Verification tokens carry no subject and cannot be used as credentials
        if user_id is None:
            raise invalid
    except JWTError:
        raise invalid

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise invalid
    return user

def authorize(user: User) -> bool:
    return bool(user.is_admin)

# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return authenticate(credentials.credentials, db)

# Dependency factory enforcing the configured mutation policy of a resource
def policy_required(resource: str):
    def _checker(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db),
    ) -> Optional[User]:
        # Unknown resources and unknown policy names fall back to admin
        policy = settings.ROUTE_POLICIES.get(resource, "admin")
        if policy == "public":
            return None
        current_user = get_current_user(credentials, db)
        if policy != "user" and not authorize(current_user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Admin privileges required."
            )
        return current_user
    return _checker

def admin_required(current_user: User = Depends(get_current_user)) -> User:
    if not authorize(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required."
        )
    return current_user
