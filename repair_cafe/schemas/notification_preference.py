"""Pydantic schemas for notification preferences."""

from typing import Optional
from pydantic import BaseModel


class NotificationPreferenceBase(BaseModel):
    notify_comments: bool = True
    notify_events: bool = True
    notify_daily_digest: bool = False
    notify_weekly_digest: bool = False

    model_config = {"from_attributes": True}


class NotificationPreferenceUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    notify_comments: Optional[bool] = None
    notify_events: Optional[bool] = None
    notify_daily_digest: Optional[bool] = None
    notify_weekly_digest: Optional[bool] = None


class NotificationPreferenceResponse(BaseModel):
    success: bool = True
    preferences: NotificationPreferenceBase
