# repair_cafe/schemas/registration.py
from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from repair_cafe.schemas.item import Item, ItemIn
from repair_cafe.schemas.user import UserSummary


class RegistrationStatus(str, Enum):
    registered = "registered"
    waitlisted = "waitlisted"
    checked_in = "checked_in"
    cancelled = "cancelled"


class RegistrationCreate(BaseModel):
    event_id: str
    email: EmailStr = Field(..., json_schema_extra={"example": "alice@example.com"})
    name: str = Field(..., min_length=1, json_schema_extra={"example": "Alice"})
    items: List[ItemIn] = Field(default_factory=list)


class ItemsUpdate(BaseModel):
    items: List[ItemIn]


class Registration(BaseModel):
    id: str
    event_id: str
    user_id: str
    status: RegistrationStatus
    position: int
    qr_code: str
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegistrationCreated(BaseModel):
    success: bool = True
    registration: Registration
    qr_code: str
    management_token: str
    user: UserSummary
    items: List[Item]


class RegistrationDetail(Registration):
    event_title: str
    event_date: date
    start_time: time
    end_time: time
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None
    venue_city: Optional[str] = None
    user_name: str
    email: str
    items: List[Item]


class RegistrationDetailResponse(BaseModel):
    success: bool = True
    registration: RegistrationDetail
    management_token: str


class ItemsUpdated(BaseModel):
    success: bool = True
    message: str = "Items updated"
    items: List[Item]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class AdminRegistration(Registration):
    user_name: str
    email: str
    item_count: int


class AdminRegistrationList(BaseModel):
    success: bool = True
    registrations: List[AdminRegistration]


class RegistrationStatusResponse(BaseModel):
    success: bool = True
    message: str
    registration: Registration
