# repair_cafe/crud/crud_fixer.py
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from repair_cafe.models.event import Event
from repair_cafe.models.fixer import Fixer, FixerEventRsvp
from repair_cafe.schemas.volunteer import FixerProfileUpdate, FixerRegister
from .base import CRUDBase


class CRUDFixer(CRUDBase[Fixer, FixerRegister, FixerProfileUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[Fixer]:
        return (
            db.query(self.model)
            .filter(func.lower(self.model.email) == email.strip().lower())
            .first()
        )

    def get_multi_ordered(self, db: Session) -> List[Fixer]:
        return db.query(self.model).order_by(self.model.created_at.desc()).all()

    def replace_rsvps(self, db: Session, *, db_obj: Fixer, rsvps: List[dict]) -> None:
        """Drops all of the fixer's RSVPs and stores the given ones. Flush only."""
        db.query(FixerEventRsvp).filter(FixerEventRsvp.fixer_id == db_obj.id).delete(
            synchronize_session="fetch"
        )
        for rsvp in rsvps:
            db.add(
                FixerEventRsvp(
                    fixer_id=db_obj.id,
                    event_id=rsvp["event_id"],
                    response=rsvp["response"],
                )
            )
        db.flush()

    def count_upcoming_rsvps(
        self, db: Session, *, fixer_id: str, today: Optional[date] = None
    ) -> int:
        today = today or date.today()
        return (
            db.query(func.count(FixerEventRsvp.id))
            .join(Event, Event.id == FixerEventRsvp.event_id)
            .filter(
                FixerEventRsvp.fixer_id == fixer_id,
                Event.date >= today,
            )
            .scalar()
        ) or 0

    def count_yes_for_event(self, db: Session, *, event_id: str) -> int:
        return (
            db.query(func.count(FixerEventRsvp.id))
            .filter(
                FixerEventRsvp.event_id == event_id,
                FixerEventRsvp.response == "yes",
            )
            .scalar()
        ) or 0


fixer = CRUDFixer(Fixer)
