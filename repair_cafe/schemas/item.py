# repair_cafe/schemas/item.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemStatus(str, Enum):
    registered = "registered"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"


class RepairOutcome(str, Enum):
    fixed = "fixed"
    partially_fixed = "partially_fixed"
    not_repairable = "not_repairable"
    needs_parts = "needs_parts"
    referred = "referred"


class ItemIn(BaseModel):
    """An item as typed on the registration form. Blank rows are dropped."""

    name: Optional[str] = None
    problem: Optional[str] = None
    item_type: Optional[str] = None


class Item(BaseModel):
    id: str
    registration_id: str
    event_id: str
    name: str
    problem: str
    item_type: Optional[str] = None
    status: ItemStatus
    queue_position: Optional[int] = None
    fixer_id: Optional[str] = None
    outcome: Optional[str] = None
    outcome_notes: Optional[str] = None
    repair_method: Optional[str] = None
    parts_used: Optional[str] = None
    repair_started_at: Optional[datetime] = None
    repair_completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QueueItem(BaseModel):
    id: str
    name: str
    problem: str
    status: ItemStatus
    queue_position: Optional[int] = None
    owner_name: Optional[str] = None
    fixer_name: Optional[str] = None


class QueueResponse(BaseModel):
    success: bool = True
    event_title: str
    items: List[QueueItem]


class ItemDetail(Item):
    owner_name: Optional[str] = None
    fixer_name: Optional[str] = None


class ItemDetailResponse(BaseModel):
    success: bool = True
    item: ItemDetail


class MatchedItem(Item):
    owner_name: Optional[str] = None
    suggested_skills: List[str] = Field(default_factory=list)
    skill_match: bool = False
    comment_count: int = 0
    interest_count: int = 0
    user_interested: bool = False


class MatchedItemList(BaseModel):
    success: bool = True
    is_fixer: bool
    user_skills: List[str]
    items: List[MatchedItem]


class ClaimItemRequest(BaseModel):
    item_id: str = Field(..., alias="itemId")

    model_config = {"populate_by_name": True}


class OutcomeRequest(BaseModel):
    # Kept as a plain string so legacy spellings can be normalized and
    # unknown values reported through the domain ValidationError.
    outcome: str
    outcome_notes: Optional[str] = None
    repair_method: Optional[str] = None
    parts_used: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    item_id: str = Field(..., alias="itemId")
    status: ItemStatus
    outcome: Optional[str] = None
    outcome_notes: Optional[str] = None
    repair_method: Optional[str] = None
    parts_used: Optional[str] = None

    model_config = {"populate_by_name": True}


class ItemResponse(BaseModel):
    success: bool = True
    message: str
    item: Item


class MyItem(Item):
    event_title: Optional[str] = None
    # Feedback ratings left on the item
    ratings: List[int] = Field(default_factory=list)


class MyItemList(BaseModel):
    success: bool = True
    items: List[MyItem]
