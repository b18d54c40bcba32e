# repair_cafe/api/v1/endpoints/events.py
"""Public event listing and admin event management."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.schemas.event import EventCreate, EventList, EventResponse, EventUpdate
from repair_cafe.schemas.registration import MessageResponse
from repair_cafe.services import event_service

router = APIRouter(tags=["Events"])


@router.get("/events", response_model=EventList)
def list_events(db: Session = Depends(get_db)):
    """Published events from today on, with live spots left."""
    return EventList(events=event_service.list_public_events(db))


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return EventResponse(event=event_service.get_public_event(db, event_id=event_id))


@router.get(
    "/admin/events",
    response_model=EventList,
    dependencies=[Depends(deps.require_admin)],
)
def admin_list_events(db: Session = Depends(get_db)):
    return EventList(events=event_service.list_all_events(db))


@router.post(
    "/admin/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_admin)],
)
def admin_create_event(event_in: EventCreate, db: Session = Depends(get_db)):
    return EventResponse(event=event_service.create_event(db, obj_in=event_in))


@router.get(
    "/admin/events/{event_id}",
    response_model=EventResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_get_event(event_id: str, db: Session = Depends(get_db)):
    return EventResponse(
        event=event_service.get_event_with_capacity(db, event_id=event_id)
    )


@router.patch(
    "/admin/events/{event_id}",
    response_model=EventResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_update_event(
    event_id: str, event_in: EventUpdate, db: Session = Depends(get_db)
):
    return EventResponse(
        event=event_service.update_event(db, event_id=event_id, obj_in=event_in)
    )


@router.delete(
    "/admin/events/{event_id}",
    response_model=MessageResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_delete_event(event_id: str, db: Session = Depends(get_db)):
    event_service.delete_event(db, event_id=event_id)
    return MessageResponse(message="Event deleted")
