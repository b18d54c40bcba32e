# repair_cafe/api/v1/endpoints/registrations.py
from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.orm import Session

from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.models.registration import Registration as RegistrationModel
from repair_cafe.schemas.demographics import DemographicsResponse, DemographicsSubmit
from repair_cafe.schemas.item import Item
from repair_cafe.schemas.registration import (
    AdminRegistration,
    AdminRegistrationList,
    ItemsUpdate,
    ItemsUpdated,
    MessageResponse,
    Registration,
    RegistrationCreate,
    RegistrationCreated,
    RegistrationDetail,
    RegistrationDetailResponse,
    RegistrationStatusResponse,
)
from repair_cafe.schemas.user import UserSummary
from repair_cafe.services import notification_service, registration_service
from repair_cafe.services.auth_service import Principal

router = APIRouter(tags=["Registrations"])


def _detail(registration: RegistrationModel) -> RegistrationDetail:
    event = registration.event
    venue = event.venue
    return RegistrationDetail(
        **Registration.model_validate(registration).model_dump(),
        event_title=event.title,
        event_date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
        venue_name=venue.name if venue else None,
        venue_address=venue.address if venue else None,
        venue_city=venue.city if venue else None,
        user_name=registration.user.name,
        email=registration.user.email,
        items=[Item.model_validate(i) for i in registration.items],
    )


@router.post(
    "/registrations",
    response_model=RegistrationCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_registration(
    registration_in: RegistrationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Register for an event. No sign-in needed: the user is looked up or
    created by email. When the event is full the registration goes on the
    waitlist, or is refused if the event has no waitlist.
    """
    result = registration_service.create_registration(db, obj_in=registration_in)
    background_tasks.add_task(
        notification_service.dispatch_pending, result.notification_ids
    )
    return RegistrationCreated(
        registration=result.registration,
        qr_code=result.registration.qr_code,
        management_token=result.registration.management_token,
        user=UserSummary.model_validate(result.user),
        items=result.items,
    )


@router.post(
    "/registrations/demographics",
    response_model=DemographicsResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_demographics(
    demographics_in: DemographicsSubmit,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Optional demographic answers for a registration or a fixer profile.
    Answered from the confirmation page, so no sign-in is needed.
    Returns 201 the first time and 200 when the answers are replaced.
    """
    row, created = registration_service.save_demographics(db, obj_in=demographics_in)
    if not created:
        response.status_code = status.HTTP_200_OK
    return DemographicsResponse(demographics=row)


@router.get(
    "/registrations/{registration_id}", response_model=RegistrationDetailResponse
)
def get_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_registration_principal),
):
    registration = registration_service.get_registration(
        db, registration_id=registration_id, principal=principal
    )
    return RegistrationDetailResponse(
        registration=_detail(registration),
        management_token=registration.management_token,
    )


@router.patch("/registrations/{registration_id}", response_model=ItemsUpdated)
def update_registration_items(
    registration_id: str,
    items_in: ItemsUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_registration_principal),
):
    """Replaces the whole item list; blank rows are dropped."""
    registration = registration_service.update_items(
        db, registration_id=registration_id, principal=principal, items=items_in.items
    )
    return ItemsUpdated(items=registration.items)


@router.delete("/registrations/{registration_id}", response_model=MessageResponse)
def cancel_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_registration_principal),
):
    registration_service.cancel_registration(
        db, registration_id=registration_id, principal=principal
    )
    return MessageResponse(message="Registration cancelled")


@router.get(
    "/admin/events/{event_id}/registrations",
    response_model=AdminRegistrationList,
    dependencies=[Depends(deps.require_admin)],
)
def admin_list_registrations(event_id: str, db: Session = Depends(get_db)):
    registrations = registration_service.list_for_event(db, event_id=event_id)
    return AdminRegistrationList(
        registrations=[
            AdminRegistration(
                **Registration.model_validate(r).model_dump(),
                user_name=r.user.name,
                email=r.user.email,
                item_count=len(r.items),
            )
            for r in registrations
        ]
    )


@router.post(
    "/admin/events/{event_id}/registrations/{registration_id}/promote",
    response_model=RegistrationStatusResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_promote_registration(
    event_id: str, registration_id: str, db: Session = Depends(get_db)
):
    registration = registration_service.promote_from_waitlist(
        db, event_id=event_id, registration_id=registration_id
    )
    return RegistrationStatusResponse(
        message="Registration promoted from the waitlist",
        registration=registration,
    )
