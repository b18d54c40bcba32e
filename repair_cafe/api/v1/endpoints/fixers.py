# repair_cafe/api/v1/endpoints/fixers.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.schemas.registration import MessageResponse
from repair_cafe.schemas.volunteer import (
    AdminFixer,
    AdminFixerList,
    Fixer,
    FixerDecision,
    FixerProfile,
    FixerProfileUpdate,
    FixerProfileUpdated,
    FixerRegister,
    FixerRegistered,
    FixerSignupOptions,
    RecentRepair,
    UpcomingEvent,
)
from repair_cafe.services import volunteer_service
from repair_cafe.services.auth_service import Principal

router = APIRouter(tags=["Fixers"])


@router.get("/fixers/register", response_model=FixerSignupOptions)
def get_signup_options(db: Session = Depends(get_db)):
    events, skills = volunteer_service.signup_options(db)
    return FixerSignupOptions(
        events=[
            UpcomingEvent(
                id=e.id,
                title=e.title,
                date=e.date,
                venue_name=e.venue.name if e.venue else None,
                venue_address=e.venue.address if e.venue else None,
            )
            for e in events
        ],
        skills=skills,
    )


@router.post("/fixers/register", response_model=FixerRegistered)
def register_fixer(fixer_in: FixerRegister, db: Session = Depends(get_db)):
    """Public fixer sign-up. Signing up again with the same email updates the profile."""
    db_fixer, created = volunteer_service.register_fixer(db, obj_in=fixer_in)
    return FixerRegistered(
        message="Registration successful" if created else "Profile updated successfully",
        fixer_id=db_fixer.id,
    )


@router.get(
    "/admin/fixers",
    response_model=AdminFixerList,
    dependencies=[Depends(deps.require_admin)],
)
def admin_list_fixers(db: Session = Depends(get_db)):
    return AdminFixerList(
        fixers=[
            AdminFixer(
                **Fixer.model_validate(row["fixer"]).model_dump(),
                user_skills=row["user_skills"],
                upcoming_events_count=row["upcoming_events_count"],
            )
            for row in volunteer_service.list_fixers(db)
        ]
    )


@router.patch(
    "/admin/fixers",
    response_model=MessageResponse,
    dependencies=[Depends(deps.require_admin)],
)
def admin_decide_fixer(decision: FixerDecision, db: Session = Depends(get_db)):
    volunteer_service.decide_fixer(db, fixer_id=decision.fixer_id, action=decision.action)
    past = {"approve": "approved", "reject": "rejected", "remove": "removed"}
    return MessageResponse(message=f"Fixer {past[decision.action.value]} successfully")


@router.get("/fixer/profile", response_model=FixerProfile)
def get_fixer_profile(
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    profile = volunteer_service.get_profile(db, principal=principal)
    return FixerProfile(
        fixer=profile["fixer"],
        user_skills=profile["user_skills"],
        all_skills=profile["all_skills"],
        stats=profile["stats"],
        recent_repairs=[
            RecentRepair(
                name=i.name,
                problem=i.problem,
                outcome=i.outcome,
                outcome_notes=i.outcome_notes,
                repair_completed_at=i.repair_completed_at,
                event_title=i.registration.event.title,
                event_date=i.registration.event.date,
            )
            for i in profile["recent_repairs"]
        ],
    )


@router.patch("/fixer/profile", response_model=FixerProfileUpdated)
def update_fixer_profile(
    profile_in: FixerProfileUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(deps.get_current_principal),
):
    db_fixer = volunteer_service.update_profile(db, principal=principal, obj_in=profile_in)
    return FixerProfileUpdated(fixer=db_fixer)
