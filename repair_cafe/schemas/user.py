# repair_cafe/schemas/user.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UserRole(str, Enum):
    attendee = "attendee"
    fixer = "fixer"
    admin = "admin"


class UserSummary(BaseModel):
    id: str
    email: str
    name: str

    model_config = {"from_attributes": True}


class User(UserSummary):
    role: UserRole
    email_verified: bool = False


class UserCreate(BaseModel):
    email: str
    name: str
    role: UserRole = UserRole.attendee


class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    email_verified: Optional[bool] = None
