# repair_cafe/api/v1/endpoints/notification_preferences.py
"""Notification preference endpoints for the signed-in user."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.schemas.notification_preference import (
    NotificationPreferenceBase,
    NotificationPreferenceResponse,
    NotificationPreferenceUpdate,
)
from repair_cafe.services.auth_service import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notification Preferences"])


@router.get("/preferences", response_model=NotificationPreferenceResponse)
def get_preferences(
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    """Stored preferences, or the defaults if none were ever saved."""
    prefs = crud.notification_preference.get_effective(db, user_id=principal.user_id)
    return NotificationPreferenceResponse(preferences=NotificationPreferenceBase(**prefs))


@router.patch("/preferences", response_model=NotificationPreferenceResponse)
def update_preferences(
    prefs_in: NotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    pref = crud.notification_preference.upsert(
        db, user_id=principal.user_id, obj_in=prefs_in
    )
    logger.info(f"Notification preferences updated for user {principal.user_id}")
    return NotificationPreferenceResponse(
        preferences=NotificationPreferenceBase.model_validate(pref)
    )
