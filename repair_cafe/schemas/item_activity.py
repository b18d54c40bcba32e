# repair_cafe/schemas/item_activity.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# --- Comments ---
class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=2000)


class ItemComment(BaseModel):
    id: str
    item_id: str
    user_id: str
    comment: str
    created_at: Optional[datetime] = None
    user_name: Optional[str] = None

    model_config = {"from_attributes": True}


class CommentResponse(BaseModel):
    success: bool = True
    comment: ItemComment


class CommentList(BaseModel):
    success: bool = True
    comments: List[ItemComment]


# --- Feedback ---
class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ItemFeedback(BaseModel):
    id: str
    item_id: str
    rating: int
    comment: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FeedbackResponse(BaseModel):
    success: bool = True
    feedback: Optional[ItemFeedback] = None


# --- Fixer interest ---
class InterestUpdate(BaseModel):
    """`interested=False` withdraws; otherwise the given notes are saved."""

    interested: bool = True
    notes: Optional[str] = None
    suggested_parts: Optional[str] = Field(None, alias="suggestedParts")
    questions: Optional[str] = None

    model_config = {"populate_by_name": True}


class FixerInterest(BaseModel):
    id: str
    item_id: str
    user_id: str
    notes: Optional[str] = None
    suggested_parts: Optional[str] = None
    questions: Optional[str] = None

    model_config = {"from_attributes": True}


class InterestResponse(BaseModel):
    success: bool = True
    interested: bool
    interest: Optional[FixerInterest] = None
