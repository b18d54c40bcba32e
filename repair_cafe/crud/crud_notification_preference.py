"""CRUD operations for notification preferences."""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from .base import CRUDBase
from repair_cafe.models.notification_preference import NotificationPreference
from repair_cafe.schemas.notification_preference import (
    NotificationPreferenceBase,
    NotificationPreferenceUpdate,
)

logger = logging.getLogger(__name__)

# Used when a user has never saved preferences
DEFAULT_PREFERENCES: Dict[str, bool] = {
    "notify_comments": True,
    "notify_events": True,
    "notify_daily_digest": False,
    "notify_weekly_digest": False,
}


class CRUDNotificationPreference(
    CRUDBase[
        NotificationPreference,
        NotificationPreferenceBase,
        NotificationPreferenceUpdate,
    ]
):
    def get_by_user(self, db: Session, *, user_id: str):
        return db.query(self.model).filter(self.model.user_id == user_id).first()

    def get_effective(self, db: Session, *, user_id: str) -> Dict[str, bool]:
        """Stored flags, or the defaults when the user has no row."""
        pref = self.get_by_user(db, user_id=user_id)
        if not pref:
            return dict(DEFAULT_PREFERENCES)
        return {key: getattr(pref, key) for key in DEFAULT_PREFERENCES}

    def upsert(
        self, db: Session, *, user_id: str, obj_in: NotificationPreferenceUpdate
    ) -> NotificationPreference:
        """
        Applies the fields that were sent. Creates the row from the
        defaults on first save.
        """
        changes = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        pref = self.get_by_user(db, user_id=user_id)
        if pref is None:
            values = dict(DEFAULT_PREFERENCES)
            values.update(changes)
            pref = self.model(user_id=user_id, **values)
            db.add(pref)
            logger.info(f"Created notification preferences for user {user_id}")
        else:
            for field, value in changes.items():
                setattr(pref, field, value)
            db.add(pref)
        db.commit()
        db.refresh(pref)
        return pref

    def wants(self, db: Session, *, user_id: str, preference: str) -> bool:
        """Whether the user accepts mail of this kind, e.g. `notify_comments`."""
        return self.get_effective(db, user_id=user_id)[preference]


notification_preference = CRUDNotificationPreference(NotificationPreference)
