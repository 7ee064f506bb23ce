# backend/models/users.py
from sqlalchemy import Column, String, Boolean, CheckConstraint
from database import Base, new_object_id

# Represents a user account with credentials, admin flag and e-mail verification state
class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_object_id)
    username = Column(String(50), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(1024), CheckConstraint("password_hash <> ''"), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String, nullable=True)
