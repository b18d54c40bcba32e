# repair_cafe/schemas/auth.py
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from repair_cafe.schemas.user import User


class SessionTokenPayload(BaseModel):
    sub: str  # user id
    role: str
    exp: int

    model_config = {"from_attributes": True}


class MagicLinkRequest(BaseModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "alice@example.com"})
    name: Optional[str] = None


class MagicLinkResponse(BaseModel):
    success: bool = True
    message: str


class VerifyResponse(BaseModel):
    success: bool = True
    user: User


class PrincipalResponse(BaseModel):
    success: bool = True
    user: User
