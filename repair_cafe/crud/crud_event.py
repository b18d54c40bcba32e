# repair_cafe/crud/crud_event.py
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from repair_cafe.core.config import settings
from repair_cafe.models.event import Event
from repair_cafe.models.registration import Registration
from repair_cafe.schemas.event import EventCreate, EventUpdate
from .base import CRUDBase


def default_registration_opens_at(event_date: date) -> datetime:
    """Registration opens a fixed number of days before the event."""
    opens_on = event_date - timedelta(days=settings.REGISTRATION_OPENS_DAYS_BEFORE)
    return datetime.combine(opens_on, time.min, tzinfo=timezone.utc)


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def get_for_update(self, db: Session, *, id: str) -> Optional[Event]:
        """
        Loads the event row with a row lock where the backend supports it
        (PostgreSQL), serializing registrations for the same event.
        """
        return (
            db.query(self.model)
            .filter(self.model.id == id)
            .with_for_update(of=self.model)
            .first()
        )

    def create(self, db: Session, *, obj_in: EventCreate) -> Event:
        data = obj_in.model_dump()
        if data.get("capacity") is None:
            data["capacity"] = settings.DEFAULT_EVENT_CAPACITY
        if data.get("registration_opens_at") is None:
            data["registration_opens_at"] = default_registration_opens_at(obj_in.date)
        data["status"] = obj_in.status.value
        db_obj = self.model(**data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Event, obj_in: EventUpdate) -> Event:
        update_data = obj_in.model_dump(exclude_unset=True)
        if "status" in update_data and update_data["status"] is not None:
            update_data["status"] = update_data["status"].value
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def count_active_registrations(self, db: Session, *, event_id: str) -> int:
        """Non-cancelled registrations (registered, waitlisted, checked in)."""
        return (
            db.query(func.count(Registration.id))
            .filter(
                Registration.event_id == event_id,
                Registration.status != "cancelled",
            )
            .scalar()
        ) or 0

    def get_active_counts(
        self, db: Session, *, event_ids: List[str]
    ) -> Dict[str, int]:
        if not event_ids:
            return {}
        rows = (
            db.query(Registration.event_id, func.count(Registration.id))
            .filter(
                Registration.event_id.in_(event_ids),
                Registration.status != "cancelled",
            )
            .group_by(Registration.event_id)
            .all()
        )
        return {event_id: count for event_id, count in rows}

    def get_multi_ordered(self, db: Session) -> List[Event]:
        return (
            db.query(self.model)
            .order_by(self.model.date.desc(), self.model.start_time.asc())
            .all()
        )

    def get_published_upcoming(
        self, db: Session, *, today: Optional[date] = None
    ) -> List[Event]:
        today = today or date.today()
        return (
            db.query(self.model)
            .filter(self.model.status == "published", self.model.date >= today)
            .order_by(self.model.date.asc(), self.model.start_time.asc())
            .all()
        )

    def get_upcoming_not_cancelled(
        self, db: Session, *, today: Optional[date] = None, limit: int = 10
    ) -> List[Event]:
        today = today or date.today()
        return (
            db.query(self.model)
            .filter(self.model.date > today, self.model.status != "cancelled")
            .order_by(self.model.date.asc())
            .limit(limit)
            .all()
        )

    def get_published_on_dates(self, db: Session, *, dates: List[date]) -> List[Event]:
        return (
            db.query(self.model)
            .filter(self.model.date.in_(dates), self.model.status == "published")
            .order_by(self.model.date.asc())
            .all()
        )


def spots_left(capacity: int, registration_count: int) -> int:
    return max(capacity - registration_count, 0)


event = CRUDEvent(Event)
