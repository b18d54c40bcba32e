# repair_cafe/schemas/check_in.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from repair_cafe.schemas.registration import RegistrationStatus


class CheckInItem(BaseModel):
    id: str
    name: str
    problem: str
    status: str

    model_config = {"from_attributes": True}


class Attendee(BaseModel):
    id: str  # registration id
    name: str
    email: str
    status: RegistrationStatus
    checked_in_at: Optional[datetime] = None
    items: List[CheckInItem]


class AttendeeLookupResponse(BaseModel):
    success: bool = True
    attendee: Attendee


class AttendeeSearchResponse(BaseModel):
    success: bool = True
    attendees: List[Attendee]


class CheckInRequest(BaseModel):
    registration_id: str = Field(..., alias="registrationId")

    model_config = {"populate_by_name": True}


class CheckInResponse(BaseModel):
    success: bool = True
    message: str
    checked_in_at: datetime


class CheckInData(BaseModel):
    success: bool = True
    event_id: str
    event_title: str
    total_count: int
    checked_in_count: int
