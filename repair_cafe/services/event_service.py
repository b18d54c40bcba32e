# repair_cafe/services/event_service.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import NotFoundError, ValidationError
from repair_cafe.crud.crud_event import spots_left
from repair_cafe.models.event import Event
from repair_cafe.schemas.event import EventCreate, EventUpdate, EventWithCapacity

logger = logging.getLogger(__name__)


def with_capacity(event: Event, registration_count: int) -> EventWithCapacity:
    result = EventWithCapacity.model_validate(event)
    result.registration_count = registration_count
    result.spots_left = spots_left(event.capacity, registration_count)
    return result


def _with_counts(db: Session, events: List[Event]) -> List[EventWithCapacity]:
    counts = crud.event.get_active_counts(db, event_ids=[e.id for e in events])
    return [with_capacity(e, counts.get(e.id, 0)) for e in events]


def get_event(db: Session, *, event_id: str) -> Event:
    event = crud.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def get_event_with_capacity(db: Session, *, event_id: str) -> EventWithCapacity:
    event = get_event(db, event_id=event_id)
    return with_capacity(
        event, crud.event.count_active_registrations(db, event_id=event.id)
    )


def get_public_event(db: Session, *, event_id: str) -> EventWithCapacity:
    """Drafts are invisible to the public."""
    event = get_event(db, event_id=event_id)
    if event.status == "draft":
        raise NotFoundError("Event not found")
    return with_capacity(
        event, crud.event.count_active_registrations(db, event_id=event.id)
    )


def list_public_events(
    db: Session, *, today: Optional[date] = None
) -> List[EventWithCapacity]:
    return _with_counts(db, crud.event.get_published_upcoming(db, today=today))


def list_all_events(db: Session) -> List[EventWithCapacity]:
    return _with_counts(db, crud.event.get_multi_ordered(db))


def _check_venue(db: Session, venue_id: Optional[str]) -> None:
    if venue_id and not crud.venue.get(db, id=venue_id):
        raise ValidationError("Venue not found", field="venue_id")


def create_event(db: Session, *, obj_in: EventCreate) -> EventWithCapacity:
    _check_venue(db, obj_in.venue_id)
    event = crud.event.create(db, obj_in=obj_in)
    logger.info(f"Event {event.id} created ({event.status})")
    return with_capacity(event, 0)


def update_event(
    db: Session, *, event_id: str, obj_in: EventUpdate
) -> EventWithCapacity:
    event = get_event(db, event_id=event_id)
    if not obj_in.model_dump(exclude_unset=True):
        raise ValidationError("No fields to update")
    if "venue_id" in obj_in.model_fields_set:
        _check_venue(db, obj_in.venue_id)
    event = crud.event.update(db, db_obj=event, obj_in=obj_in)
    logger.info(f"Event {event.id} updated")
    return get_event_with_capacity(db, event_id=event.id)


def delete_event(db: Session, *, event_id: str) -> None:
    get_event(db, event_id=event_id)
    crud.event.remove(db, id=event_id)
    logger.info(f"Event {event_id} deleted")
