# repair_cafe/services/registration_service.py
"""
Registration lifecycle: create, read, replace items, cancel, promote.
Also stores the optional demographic answers given after signing up.

Every mutation runs as a single transaction. Creation locks the event row
(where the database supports it) while it counts, decides the status and
assigns the next position, so two submissions cannot both take the last
place.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from repair_cafe.models.item import Item
from repair_cafe.models.registration import Registration
from repair_cafe.models.registration_demographics import RegistrationDemographics
from repair_cafe.models.user import User
from repair_cafe.schemas.demographics import DemographicsSubmit
from repair_cafe.schemas.item import ItemIn
from repair_cafe.schemas.registration import RegistrationCreate
from repair_cafe.services import notification_service
from repair_cafe.services.auth_service import Principal

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    registration: Registration
    user: User
    items: List[Item]
    # Outbox rows to deliver once the transaction has committed
    notification_ids: List[str] = field(default_factory=list)


def decide_status(active_count: int, capacity: int, waitlist_enabled: bool) -> str:
    """`registered` while there is room, else `waitlisted` or ConflictError."""
    if active_count < capacity:
        return "registered"
    if waitlist_enabled:
        return "waitlisted"
    raise ConflictError("Event is full", error_code="EVENT_FULL")


def create_registration(db: Session, *, obj_in: RegistrationCreate) -> RegistrationResult:
    try:
        db_user = crud.user.get_or_create(
            db, email=obj_in.email, name=obj_in.name, commit=False
        )

        event = crud.event.get_for_update(db, id=obj_in.event_id)
        if not event:
            raise NotFoundError("Event not found")

        if crud.registration.get_active_for_user(
            db, event_id=event.id, user_id=db_user.id
        ):
            raise ConflictError(
                "Already registered for this event", error_code="ALREADY_REGISTERED"
            )

        active_count = crud.event.count_active_registrations(db, event_id=event.id)
        status = decide_status(active_count, event.capacity, event.waitlist_enabled)

        registration = crud.registration.create_for_event(
            db, event_id=event.id, user_id=db_user.id, status=status
        )
        items = crud.item.add_to_registration(
            db, registration=registration, items=obj_in.items
        )
        db.refresh(registration)

        message = notification_service.enqueue_registration_confirmation(
            db, registration=registration, event=event, items=items
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(registration)
    logger.info(
        f"Registration {registration.id} created for event {event.id} "
        f"as {status} at position {registration.position}"
    )
    return RegistrationResult(
        registration=registration,
        user=db_user,
        items=list(registration.items),
        notification_ids=[message.id],
    )


def _get_authorized(db: Session, registration_id: str, principal: Principal) -> Registration:
    registration = crud.registration.get(db, id=registration_id)
    if not registration:
        raise NotFoundError("Registration not found")
    if not principal.can_manage_registration(registration):
        raise UnauthorizedError()
    return registration


def get_registration(
    db: Session, *, registration_id: str, principal: Principal
) -> Registration:
    """
    The registration with its items. A registration that never had a
    management token gets one here.
    """
    registration = _get_authorized(db, registration_id, principal)
    crud.registration.ensure_management_token(db, db_obj=registration)
    return registration


def update_items(
    db: Session, *, registration_id: str, principal: Principal, items: List[ItemIn]
) -> Registration:
    """Replaces the registration's items with the given list."""
    registration = _get_authorized(db, registration_id, principal)
    if registration.status == "cancelled":
        raise InvalidStateError("Cannot update a cancelled registration")

    try:
        crud.item.delete_for_registration(db, registration_id=registration.id)
        crud.item.add_to_registration(db, registration=registration, items=items)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire(registration)
    logger.info(f"Items replaced on registration {registration.id}")
    return registration


def cancel_registration(
    db: Session, *, registration_id: str, principal: Principal
) -> Registration:
    """
    Cancels the registration and all of its items. Cancelling twice is
    harmless.
    """
    registration = _get_authorized(db, registration_id, principal)

    try:
        registration.status = "cancelled"
        db.add(registration)
        cancelled_items = crud.item.cancel_for_registration(
            db, registration_id=registration.id
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(registration)
    logger.info(
        f"Registration {registration.id} cancelled ({cancelled_items} items cancelled)"
    )
    return registration


def promote_from_waitlist(
    db: Session, *, event_id: str, registration_id: str
) -> Registration:
    """Manual waitlist promotion by an admin."""
    registration = crud.registration.get(db, id=registration_id)
    if not registration or registration.event_id != event_id:
        raise NotFoundError("Registration not found")
    if registration.status != "waitlisted":
        raise InvalidStateError(
            f"Only waitlisted registrations can be promoted (status is {registration.status})"
        )

    registration.status = "registered"
    db.add(registration)
    db.commit()
    db.refresh(registration)
    logger.info(f"Registration {registration.id} promoted from the waitlist")
    return registration


def list_for_event(db: Session, *, event_id: str) -> List[Registration]:
    if not crud.event.get(db, id=event_id):
        raise NotFoundError("Event not found")
    return crud.registration.get_multi_by_event(db, event_id=event_id)


def save_demographics(
    db: Session, *, obj_in: DemographicsSubmit
) -> Tuple[RegistrationDemographics, bool]:
    """
    Stores the optional demographic answers for a registration or a fixer
    profile. Returns (row, created); a resubmission overwrites the answers.
    """
    if obj_in.registration_id:
        if not crud.registration.get(db, id=obj_in.registration_id):
            raise NotFoundError("Registration not found")
    elif not crud.fixer.get(db, id=obj_in.fixer_id):
        raise NotFoundError("Fixer not found")

    try:
        row, created = crud.demographics.upsert(db, obj_in=obj_in)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    return row, created
