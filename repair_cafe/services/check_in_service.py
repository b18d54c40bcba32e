# repair_cafe/services/check_in_service.py
import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import InvalidStateError, NotFoundError
from repair_cafe.models.event import Event
from repair_cafe.models.registration import Registration

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 20


def _get_event(db: Session, event_id: str) -> Event:
    event = crud.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def lookup_by_qr(db: Session, *, event_id: str, qr_code: str) -> Registration:
    """
    The live registration behind a scanned code. Cancelled registrations
    are treated as unknown.
    """
    _get_event(db, event_id)
    registration = crud.registration.get_by_qr(
        db, event_id=event_id, qr_code=qr_code.strip()
    )
    if not registration:
        raise NotFoundError("Registration not found", error_code="QR_NOT_FOUND")
    return registration


def search_attendees(db: Session, *, event_id: str, query: str) -> List[Registration]:
    """Name or email search; queries shorter than two characters match nothing."""
    _get_event(db, event_id)
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []
    return crud.registration.search(
        db, event_id=event_id, query=query, limit=MAX_RESULTS
    )


def check_in(db: Session, *, event_id: str, registration_id: str) -> Registration:
    _get_event(db, event_id)
    registration = crud.registration.get_active_in_event(
        db, event_id=event_id, registration_id=registration_id
    )
    if not registration:
        raise NotFoundError("Registration not found")
    if registration.status == "checked_in":
        raise InvalidStateError("Already checked in", error_code="ALREADY_CHECKED_IN")

    registration = crud.registration.mark_checked_in(db, db_obj=registration)
    logger.info(f"Registration {registration.id} checked in for event {event_id}")
    return registration


def get_check_in_counts(db: Session, *, event_id: str) -> Tuple[Event, int, int]:
    """(event, non-cancelled registrations, checked in)."""
    event = _get_event(db, event_id)
    counts = crud.registration.count_by_status(db, event_id=event_id)
    total = sum(n for status, n in counts.items() if status != "cancelled")
    return event, total, counts.get("checked_in", 0)
