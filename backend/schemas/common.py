# backend/schemas/common.py
from typing import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints

# 24 hexadecimal characters, normalized to lower case
ObjectIdStr = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=r"^[0-9a-fA-F]{24}$")]

# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# Request bodies reject fields they do not declare
class StrictIn(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

class Message(BaseModel):
    message: str
