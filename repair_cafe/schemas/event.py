import datetime as dt
from datetime import datetime, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from repair_cafe.schemas.venue import Venue


class EventStatus(str, Enum):
    draft = "draft"
    published = "published"
    cancelled = "cancelled"
    completed = "completed"


class Event(BaseModel):
    id: str = Field(..., json_schema_extra={"example": "evt_c5a6d8e0f9b1"})
    title: str = Field(..., json_schema_extra={"example": "Spring Repair Cafe"})
    description: Optional[str] = None
    date: dt.date
    start_time: time
    end_time: time
    venue_id: Optional[str] = None
    venue: Optional[Venue] = None
    capacity: int
    status: EventStatus
    waitlist_enabled: bool = True
    registration_opens_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EventWithCapacity(Event):
    registration_count: int = 0
    spots_left: int = 0


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: dt.date
    start_time: time
    end_time: time
    venue_id: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    status: EventStatus = EventStatus.draft
    waitlist_enabled: bool = True
    registration_opens_at: Optional[datetime] = None


# All fields optional; only the ones sent are applied.
class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    venue_id: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None
    waitlist_enabled: Optional[bool] = None
    registration_opens_at: Optional[datetime] = None


class EventResponse(BaseModel):
    success: bool = True
    event: EventWithCapacity


class EventList(BaseModel):
    success: bool = True
    events: List[EventWithCapacity]
