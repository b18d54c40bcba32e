# repair_cafe/schemas/volunteer.py
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class FixerStatus(str, Enum):
    pending = "pending"
    active = "active"
    rejected = "rejected"
    removed = "removed"


class FixerAction(str, Enum):
    approve = "approve"
    reject = "reject"
    remove = "remove"


class HelperStatus(str, Enum):
    pending = "pending"
    contacted = "contacted"
    active = "active"
    inactive = "inactive"


class Skill(BaseModel):
    id: str
    name: str
    category: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class EventRsvp(BaseModel):
    event_id: str = Field(..., alias="eventId")
    response: str = Field(..., pattern="^(yes|no|maybe)$")

    model_config = {"populate_by_name": True}


class FixerRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    skills: Optional[str] = None
    skill_ids: List[str] = Field(default_factory=list, alias="skillIds")
    availability: Optional[str] = None
    comments: Optional[str] = None
    event_rsvps: List[EventRsvp] = Field(default_factory=list, alias="eventRsvps")

    model_config = {"populate_by_name": True}


class FixerProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None
    availability: Optional[str] = None
    comments: Optional[str] = None
    skills: Optional[str] = None
    skill_ids: Optional[List[str]] = Field(None, alias="skillIds")

    model_config = {"populate_by_name": True}


class Fixer(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    skills: Optional[str] = None
    bio: Optional[str] = None
    availability: Optional[str] = None
    comments: Optional[str] = None
    photo_url: Optional[str] = None
    status: FixerStatus
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AdminFixer(Fixer):
    user_skills: List[Skill] = Field(default_factory=list)
    upcoming_events_count: int = 0


class FixerRegistered(BaseModel):
    success: bool = True
    message: str
    fixer_id: str


class UpcomingEvent(BaseModel):
    id: str
    title: str
    date: date
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None


class FixerSignupOptions(BaseModel):
    success: bool = True
    events: List[UpcomingEvent]
    skills: List[Skill]


class FixerDecision(BaseModel):
    fixer_id: str = Field(..., alias="fixerId")
    action: FixerAction

    model_config = {"populate_by_name": True}


class AdminFixerList(BaseModel):
    success: bool = True
    fixers: List[AdminFixer]


class RepairStats(BaseModel):
    total_repairs: int = 0
    fixed_items: int = 0
    partially_fixed: int = 0
    not_repairable: int = 0


class RecentRepair(BaseModel):
    name: str
    problem: str
    outcome: Optional[str] = None
    outcome_notes: Optional[str] = None
    repair_completed_at: Optional[datetime] = None
    event_title: str
    event_date: date


class FixerProfile(BaseModel):
    success: bool = True
    fixer: Optional[Fixer] = None
    user_skills: List[Skill]
    all_skills: List[Skill]
    stats: RepairStats
    recent_repairs: List[RecentRepair]


class FixerProfileUpdated(BaseModel):
    success: bool = True
    fixer: Fixer


class HelperCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    availability: Optional[str] = None
    comments: Optional[str] = None
    has_volunteered_before: bool = Field(False, alias="hasVolunteeredBefore")
    roles: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class HelperUpdate(BaseModel):
    status: HelperStatus


class Helper(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    availability: Optional[str] = None
    comments: Optional[str] = None
    has_volunteered_before: bool = False
    roles: List[str] = Field(default_factory=list)
    status: HelperStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HelperResponse(BaseModel):
    success: bool = True
    message: str
    helper: Helper


class HelperList(BaseModel):
    success: bool = True
    helpers: List[Helper]
