# repair_cafe/api/v1/endpoints/check_in.py
"""Door check-in: QR scan, name search and confirmation. Admin only."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.models.registration import Registration
from repair_cafe.schemas.check_in import (
    Attendee,
    AttendeeLookupResponse,
    AttendeeSearchResponse,
    CheckInData,
    CheckInItem,
    CheckInRequest,
    CheckInResponse,
)
from repair_cafe.services import check_in_service

router = APIRouter(
    prefix="/admin/events/{event_id}",
    tags=["Check-in"],
    dependencies=[Depends(deps.require_admin)],
)


def _attendee(registration: Registration) -> Attendee:
    return Attendee(
        id=registration.id,
        name=registration.user.name,
        email=registration.user.email,
        status=registration.status,
        checked_in_at=registration.checked_in_at,
        items=[
            CheckInItem.model_validate(i)
            for i in registration.items
            if i.status != "cancelled"
        ],
    )


@router.get("/checkin-lookup", response_model=AttendeeLookupResponse)
def lookup_by_qr(event_id: str, qr: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    registration = check_in_service.lookup_by_qr(db, event_id=event_id, qr_code=qr)
    return AttendeeLookupResponse(attendee=_attendee(registration))


@router.get("/checkin-search", response_model=AttendeeSearchResponse)
def search_attendees(event_id: str, q: str = Query(""), db: Session = Depends(get_db)):
    registrations = check_in_service.search_attendees(db, event_id=event_id, query=q)
    return AttendeeSearchResponse(attendees=[_attendee(r) for r in registrations])


@router.post("/checkin", response_model=CheckInResponse)
def check_in(event_id: str, check_in_in: CheckInRequest, db: Session = Depends(get_db)):
    registration = check_in_service.check_in(
        db, event_id=event_id, registration_id=check_in_in.registration_id
    )
    return CheckInResponse(
        message=f"{registration.user.name} checked in",
        checked_in_at=registration.checked_in_at,
    )


@router.get("/checkin-data", response_model=CheckInData)
def get_check_in_data(event_id: str, db: Session = Depends(get_db)):
    event, total, checked_in = check_in_service.get_check_in_counts(db, event_id=event_id)
    return CheckInData(
        event_id=event.id,
        event_title=event.title,
        total_count=total,
        checked_in_count=checked_in,
    )
