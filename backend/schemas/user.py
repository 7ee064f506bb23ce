from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import Optional

from schemas.common import ORMBase, StrictIn


# Schema for authentication credentials (POST /auth)
class UserLogin(StrictIn):
    email: EmailStr
    password: str = Field(..., min_length=5, max_length=255)

# Schema for self-service registration requests
class RegisterIn(UserLogin):
    username: str = Field(..., min_length=5, max_length=50)

# Schema for users created or replaced by an administrator
class UserIn(RegisterIn):
    is_admin: bool = Field(False, alias="isAdmin")

# Output schema for user profile details; the password hash never leaves the API
class UserOut(ORMBase):
    id: str
    username: str
    email: str
    is_admin: bool = Field(
        False, validation_alias=AliasChoices("is_admin", "isAdmin"), serialization_alias="isAdmin"
    )
    is_verified: bool = Field(
        False, validation_alias=AliasChoices("is_verified", "isVerified"), serialization_alias="isVerified"
    )

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
