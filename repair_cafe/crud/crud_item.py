# repair_cafe/crud/crud_item.py
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from repair_cafe.models.event import Event
from repair_cafe.models.item import Item
from repair_cafe.models.registration import Registration
from repair_cafe.schemas.item import ItemIn
from .base import CRUDBase

# Queue filter name -> item status
QUEUE_FILTERS = {
    "queued": "registered",
    "in-progress": "in-progress",
    "completed": "completed",
}

def usable_items(items: Iterable[ItemIn]) -> List[ItemIn]:
    """Rows with both a name and a problem; blank rows are dropped."""
    return [
        item
        for item in items
        if item.name and item.name.strip() and item.problem and item.problem.strip()
    ]

class CRUDItem(CRUDBase[Item, ItemIn, ItemIn]):
    def next_queue_position(self, db: Session, *, event_id: str) -> int:
        current = (
            db.query(func.max(self.model.queue_position))
            .filter(self.model.event_id == event_id)
            .scalar()
        )
        return (current or 0) + 1

    def add_to_registration(
        self, db: Session, *, registration: Registration, items: Iterable[ItemIn]
    ) -> List[Item]:
        """
        Inserts the usable items at the back of the event queue. Flush only.
        """
        position = self.next_queue_position(db, event_id=registration.event_id)
        created = []
        for item_in in usable_items(items):
            db_obj = self.model(
                registration_id=registration.id,
                event_id=registration.event_id,
                user_id=registration.user_id,
                name=item_in.name.strip(),
                problem=item_in.problem.strip(),
                item_type=item_in.item_type,
                status="registered",
                queue_position=position,
            )
            db.add(db_obj)
            created.append(db_obj)
            position += 1
        db.flush()
        return created

    def delete_for_registration(self, db: Session, *, registration_id: str) -> int:
        deleted = (
            db.query(self.model)
            .filter(self.model.registration_id == registration_id)
            .delete(synchronize_session="fetch")
        )
        db.flush()
        return deleted

    def cancel_for_registration(self, db: Session, *, registration_id: str) -> int:
        """Cancels every item that is not cancelled yet."""
        result = db.execute(
            update(self.model)
            .where(
                self.model.registration_id == registration_id,
                self.model.status != "cancelled",
            )
            .values(status="cancelled")
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def get_in_event(self, db: Session, *, event_id: str, item_id: str) -> Optional[Item]:
        return (
            db.query(self.model)
            .filter(self.model.id == item_id, self.model.event_id == event_id)
            .first()
        )

    def claim(self, db: Session, *, item_id: str, fixer_id: str) -> bool:
        """
        Assigns the fixer only while the item is still queued.

        Returns False when another fixer got there first; the existing
        assignment is left untouched in that case.
        """
        result = db.execute(
            update(self.model)
            .where(self.model.id == item_id, self.model.status == "registered")
            .values(
                status="in-progress",
                fixer_id=fixer_id,
                repair_started_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    def complete(
        self,
        db: Session,
        *,
        db_obj: Item,
        outcome: str,
        outcome_notes: Optional[str] = None,
        repair_method: Optional[str] = None,
        parts_used: Optional[str] = None,
    ) -> Item:
        now = datetime.now(timezone.utc)
        db_obj.status = "completed"
        db_obj.outcome = outcome
        db_obj.outcome_notes = outcome_notes
        db_obj.repair_method = repair_method
        db_obj.parts_used = parts_used
        db_obj.repair_completed_at = now
        if db_obj.repair_started_at is None:
            db_obj.repair_started_at = now
        db.add(db_obj)
        db.flush()
        return db_obj

    def start(self, db: Session, *, db_obj: Item, fixer_id: str) -> Item:
        """
        Marks the item in progress. An existing fixer assignment is kept;
        `fixer_id` only fills an empty one.
        """
        db_obj.status = "in-progress"
        if db_obj.fixer_id is None:
            db_obj.fixer_id = fixer_id
        db_obj.repair_started_at = datetime.now(timezone.utc)
        db_obj.repair_completed_at = None
        db_obj.outcome = None
        db_obj.outcome_notes = None
        db_obj.repair_method = None
        db_obj.parts_used = None
        db.add(db_obj)
        db.flush()
        return db_obj

    def revert(self, db: Session, *, db_obj: Item) -> Item:
        """Back to the queue: no fixer, no timestamps, no outcome."""
        db_obj.status = "registered"
        db_obj.fixer_id = None
        db_obj.repair_started_at = None
        db_obj.repair_completed_at = None
        db_obj.outcome = None
        db_obj.outcome_notes = None
        db_obj.repair_method = None
        db_obj.parts_used = None
        db.add(db_obj)
        db.flush()
        return db_obj

    def get_queue(
        self,
        db: Session,
        *,
        event_id: str,
        status_filter: str = "all",
        sort: str = "position",
    ) -> List[Item]:
        """Items of the event's non-cancelled registrations."""
        query = (
            db.query(self.model)
            .join(Registration, Registration.id == self.model.registration_id)
            .filter(
                self.model.event_id == event_id,
                Registration.status != "cancelled",
                self.model.status != "cancelled",
            )
        )
        if status_filter in QUEUE_FILTERS:
            query = query.filter(self.model.status == QUEUE_FILTERS[status_filter])
        if sort == "name":
            query = query.order_by(self.model.name.asc())
        else:
            query = query.order_by(
                self.model.queue_position.asc(), self.model.created_at.asc()
            )
        return query.all()

    def get_by_event(self, db: Session, *, event_id: str) -> List[Item]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id)
            .order_by(self.model.queue_position.asc())
            .all()
        )

    def get_multi_by_owner(self, db: Session, *, user_id: str) -> List[Item]:
        return (
            db.query(self.model)
            .join(Event, Event.id == self.model.event_id)
            .filter(self.model.user_id == user_id)
            .order_by(Event.date.desc(), self.model.queue_position.asc())
            .all()
        )

    def get_by_fixer(self, db: Session, *, fixer_id: str) -> List[Item]:
        return db.query(self.model).filter(self.model.fixer_id == fixer_id).all()

    def get_completed_by_fixer(
        self, db: Session, *, fixer_id: str, limit: Optional[int] = None
    ) -> List[Item]:
        query = (
            db.query(self.model)
            .filter(self.model.fixer_id == fixer_id, self.model.status == "completed")
            .order_by(self.model.repair_completed_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_event_title(self, db: Session, *, event_id: str) -> Optional[str]:
        return db.query(Event.title).filter(Event.id == event_id).scalar()


item = CRUDItem(Item)
