# repair_cafe/services/volunteer_service.py
"""
Fixer and helper volunteers.

Fixer profiles are matched to user accounts by email. Approving a fixer
gives the matching user the `fixer` role; rejecting or removing one takes
it away again. Admins keep their role either way.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import NotFoundError, ValidationError
from repair_cafe.models.fixer import Fixer
from repair_cafe.models.helper import Helper
from repair_cafe.schemas.volunteer import (
    FixerAction,
    FixerProfileUpdate,
    FixerRegister,
    HelperCreate,
    RepairStats,
)
from repair_cafe.services.auth_service import Principal

logger = logging.getLogger(__name__)

RECENT_REPAIRS_LIMIT = 10


def signup_options(db: Session):
    """Upcoming events to RSVP for and the skill catalogue."""
    return (
        crud.event.get_upcoming_not_cancelled(db),
        crud.skill.get_all_ordered(db),
    )


def register_fixer(db: Session, *, obj_in: FixerRegister) -> Tuple[Fixer, bool]:
    """
    Creates the fixer profile or refreshes the existing one for that email.

    Returns (fixer, created).
    """
    email = obj_in.email.strip().lower()
    try:
        db_fixer = crud.fixer.get_by_email(db, email=email)
        created = db_fixer is None
        if created:
            db_fixer = Fixer(email=email, name=obj_in.name, status="pending")
        else:
            db_fixer.name = obj_in.name
        db_fixer.phone = obj_in.phone
        db_fixer.skills = obj_in.skills
        db_fixer.availability = obj_in.availability
        db_fixer.comments = obj_in.comments
        db.add(db_fixer)
        db.flush()

        db_user = crud.user.get_by_email(db, email=email)
        if db_user and obj_in.skill_ids:
            crud.skill.replace_for_user(db, db_user=db_user, skill_ids=obj_in.skill_ids)

        if obj_in.event_rsvps:
            crud.fixer.replace_rsvps(
                db,
                db_obj=db_fixer,
                rsvps=[r.model_dump() for r in obj_in.event_rsvps],
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_fixer)
    logger.info(f"Fixer {db_fixer.id} {'registered' if created else 'updated'}")
    return db_fixer, created


def list_fixers(db: Session) -> List[dict]:
    """Every fixer profile with the linked user's skills and upcoming RSVPs."""
    rows = []
    for db_fixer in crud.fixer.get_multi_ordered(db):
        db_user = crud.user.get_by_email(db, email=db_fixer.email)
        rows.append(
            {
                "fixer": db_fixer,
                "user_skills": list(db_user.skills) if db_user else [],
                "upcoming_events_count": crud.fixer.count_upcoming_rsvps(
                    db, fixer_id=db_fixer.id
                ),
            }
        )
    return rows


def decide_fixer(db: Session, *, fixer_id: str, action: FixerAction) -> Fixer:
    db_fixer = crud.fixer.get(db, id=fixer_id)
    if not db_fixer:
        raise NotFoundError("Fixer not found")

    db_user = crud.user.get_by_email(db, email=db_fixer.email)
    if action == FixerAction.approve:
        db_fixer.status = "active"
        db_fixer.approved_at = datetime.now(timezone.utc)
        if db_user and db_user.role != "admin":
            crud.user.set_role(db, db_obj=db_user, role="fixer")
    elif action in (FixerAction.reject, FixerAction.remove):
        db_fixer.status = "rejected" if action == FixerAction.reject else "removed"
        db_fixer.approved_at = None
        if db_user and db_user.role == "fixer":
            crud.user.set_role(db, db_obj=db_user, role="attendee")
    else:
        raise ValidationError("Invalid action", field="action")

    db.add(db_fixer)
    db.commit()
    db.refresh(db_fixer)
    logger.info(f"Fixer {db_fixer.id} -> {db_fixer.status}")
    return db_fixer


def get_profile(db: Session, *, principal: Principal) -> dict:
    db_fixer = crud.fixer.get_by_email(db, email=principal.email)
    user_skills = []
    stats = RepairStats()
    if db_fixer:
        db_user = crud.user.get(db, id=principal.user_id)
        user_skills = list(db_user.skills)
        repaired = crud.item.get_by_fixer(db, fixer_id=principal.user_id)
        stats = RepairStats(
            total_repairs=len(repaired),
            fixed_items=sum(1 for i in repaired if i.outcome == "fixed"),
            partially_fixed=sum(1 for i in repaired if i.outcome == "partially_fixed"),
            not_repairable=sum(1 for i in repaired if i.outcome == "not_repairable"),
        )

    recent = crud.item.get_completed_by_fixer(
        db, fixer_id=principal.user_id, limit=RECENT_REPAIRS_LIMIT
    )
    return {
        "fixer": db_fixer,
        "user_skills": user_skills,
        "all_skills": crud.skill.get_all_ordered(db),
        "stats": stats,
        "recent_repairs": recent,
    }


def update_profile(
    db: Session, *, principal: Principal, obj_in: FixerProfileUpdate
) -> Fixer:
    """Updates the caller's fixer profile, creating it on first use."""
    changes = obj_in.model_dump(exclude_unset=True, exclude_none=True)
    skill_ids: Optional[List[str]] = changes.pop("skill_ids", None)

    try:
        db_fixer = crud.fixer.get_by_email(db, email=principal.email)
        if db_fixer is None:
            db_fixer = Fixer(
                email=principal.email,
                name=changes.pop("name", None) or principal.name,
                skills=changes.pop("skills", ""),
                status="pending",
            )
        for field, value in changes.items():
            setattr(db_fixer, field, value)
        db.add(db_fixer)

        if skill_ids is not None:
            db_user = crud.user.get(db, id=principal.user_id)
            crud.skill.replace_for_user(db, db_user=db_user, skill_ids=skill_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_fixer)
    return db_fixer


def create_helper(db: Session, *, obj_in: HelperCreate) -> Helper:
    db_helper = crud.helper.create(db, obj_in=obj_in)
    logger.info(f"Helper {db_helper.id} signed up")
    return db_helper


def update_helper_status(db: Session, *, helper_id: str, status: str) -> Helper:
    db_helper = crud.helper.get(db, id=helper_id)
    if not db_helper:
        raise NotFoundError("Helper not found")
    return crud.helper.update(db, db_obj=db_helper, obj_in={"status": status})
