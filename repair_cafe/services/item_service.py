# repair_cafe/services/item_service.py
"""
Repair item queue.

    registered --claim--> in-progress --outcome--> completed
         ^______________ revert ___________________|

Claiming is a conditional update on `status = 'registered'`, so when two
fixers race for the same item the second one gets InvalidStateError and
the first assignment stands.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from repair_cafe.models.event import Event
from repair_cafe.models.item import Item
from repair_cafe.schemas.item import RepairOutcome
from repair_cafe.services import notification_service
from repair_cafe.services.auth_service import Principal

logger = logging.getLogger(__name__)

# Older clients send these spellings
LEGACY_OUTCOMES = {
    "partial_fix": RepairOutcome.partially_fixed.value,
    "not_fixable": RepairOutcome.not_repairable.value,
}

SUCCESSFUL_OUTCOMES = (RepairOutcome.fixed.value, RepairOutcome.partially_fixed.value)


@dataclass
class ItemChange:
    item: Item
    message: str
    notification_ids: List[str] = field(default_factory=list)


def normalize_outcome(outcome: Optional[str]) -> str:
    """Canonical outcome value, or ValidationError for anything unknown."""
    value = (outcome or "").strip().lower()
    value = LEGACY_OUTCOMES.get(value, value)
    try:
        return RepairOutcome(value).value
    except ValueError:
        allowed = ", ".join(o.value for o in RepairOutcome)
        raise ValidationError(
            f"Invalid outcome '{outcome}'. Must be one of: {allowed}", field="outcome"
        )


def _get_event(db: Session, event_id: str) -> Event:
    event = crud.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def _get_item(db: Session, event_id: str, item_id: str) -> Item:
    db_item = crud.item.get_in_event(db, event_id=event_id, item_id=item_id)
    if not db_item:
        raise NotFoundError("Item not found")
    return db_item


def _ensure_can_update(db_item: Item, principal: Principal) -> None:
    if principal.is_admin:
        return
    if db_item.fixer_id != principal.user_id:
        raise ForbiddenError("Only the assigned fixer or an admin can update this item")


def claim_item(
    db: Session, *, event_id: str, item_id: str, principal: Principal
) -> ItemChange:
    event = _get_event(db, event_id)
    db_item = _get_item(db, event_id, item_id)

    if not crud.item.claim(db, item_id=db_item.id, fixer_id=principal.user_id):
        db.rollback()
        raise InvalidStateError("Item is not available", error_code="ITEM_UNAVAILABLE")

    try:
        db.refresh(db_item)
        message = notification_service.enqueue_item_in_progress(
            db, db_item=db_item, event=event
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_item)
    logger.info(f"Item {db_item.id} claimed by {principal.user_id}")
    return ItemChange(db_item, "Item claimed", [message.id])


def log_outcome(
    db: Session,
    *,
    event_id: str,
    item_id: str,
    principal: Principal,
    outcome: str,
    outcome_notes: Optional[str] = None,
    repair_method: Optional[str] = None,
    parts_used: Optional[str] = None,
) -> ItemChange:
    # Validated before anything is read or written
    canonical = normalize_outcome(outcome)

    event = _get_event(db, event_id)
    db_item = _get_item(db, event_id, item_id)
    _ensure_can_update(db_item, principal)
    if db_item.status == "cancelled":
        raise InvalidStateError("Cannot log an outcome for a cancelled item")

    return _complete(
        db,
        event=event,
        db_item=db_item,
        outcome=canonical,
        outcome_notes=outcome_notes,
        repair_method=repair_method,
        parts_used=parts_used,
    )


def _complete(db: Session, *, event: Event, db_item: Item, **outcome_fields) -> ItemChange:
    try:
        crud.item.complete(db, db_obj=db_item, **outcome_fields)
        message = notification_service.enqueue_item_completed(
            db, db_item=db_item, event=event
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_item)
    logger.info(f"Item {db_item.id} completed with outcome {db_item.outcome}")
    return ItemChange(db_item, "Outcome logged", [message.id])


def update_status(
    db: Session,
    *,
    event_id: str,
    item_id: str,
    principal: Principal,
    status: str,
    outcome: Optional[str] = None,
    outcome_notes: Optional[str] = None,
    repair_method: Optional[str] = None,
    parts_used: Optional[str] = None,
) -> ItemChange:
    """
    General transition endpoint.

    `completed` needs an outcome, `registered` puts the item back in the
    queue, `in-progress` restarts the repair and assigns the caller only
    when nobody holds the item.
    """
    canonical = normalize_outcome(outcome) if status == "completed" else None

    event = _get_event(db, event_id)
    db_item = _get_item(db, event_id, item_id)
    _ensure_can_update(db_item, principal)
    if db_item.status == "cancelled":
        raise InvalidStateError("Cannot update a cancelled item")

    if status == "completed":
        return _complete(
            db,
            event=event,
            db_item=db_item,
            outcome=canonical,
            outcome_notes=outcome_notes,
            repair_method=repair_method,
            parts_used=parts_used,
        )

    notification_ids = []
    try:
        if status == "registered":
            crud.item.revert(db, db_obj=db_item)
            message = "Item returned to queue"
        elif status == "in-progress":
            crud.item.start(db, db_obj=db_item, fixer_id=principal.user_id)
            queued = notification_service.enqueue_item_in_progress(
                db, db_item=db_item, event=event
            )
            notification_ids.append(queued.id)
            message = "Item in progress"
        else:
            raise ValidationError(f"Unsupported status '{status}'", field="status")
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_item)
    logger.info(f"Item {db_item.id} moved to {db_item.status} by {principal.user_id}")
    return ItemChange(db_item, message, notification_ids)


def get_queue(
    db: Session, *, event_id: str, status_filter: str = "all", sort: str = "position"
):
    event = _get_event(db, event_id)
    items = crud.item.get_queue(db, event_id=event_id, status_filter=status_filter, sort=sort)
    return event, items


def get_item_detail(db: Session, *, event_id: str, item_id: str) -> Item:
    _get_event(db, event_id)
    return _get_item(db, event_id, item_id)


@dataclass
class SkillMatch:
    item: Item
    suggested_skills: List[str]
    skill_match: bool


def match_items(
    db: Session,
    *,
    event_id: str,
    principal: Principal,
    skill: Optional[str] = None,
    item_type: Optional[str] = None,
):
    """
    The event's open items, flagged where their suggested skills overlap
    the caller's skill tags. Matches come first, queue order otherwise.

    Returns (is_fixer, user_skills, matches).
    """
    _get_event(db, event_id)
    is_fixer = principal.is_fixer or crud.fixer.get_by_email(
        db, email=principal.email
    ) is not None
    user_skills: List[str] = []
    if is_fixer:
        db_user = crud.user.get(db, id=principal.user_id)
        user_skills = sorted({s.name for s in db_user.skills})
    mine = {s.lower() for s in user_skills}

    matches = []
    for db_item in crud.item.get_queue(db, event_id=event_id):
        suggested = list(db_item.suggested_skills or [])
        suggested_lower = {s.lower() for s in suggested}
        kind = (db_item.item_type or "").lower()
        if skill and skill.lower() not in suggested_lower and skill.lower() not in kind:
            continue
        if item_type and item_type.lower() not in kind:
            continue
        matches.append(SkillMatch(db_item, suggested, bool(mine & suggested_lower)))

    # sort is stable, so queue order survives inside each group
    matches.sort(key=lambda m: not m.skill_match)
    return is_fixer, user_skills, matches


def get_my_items(db: Session, *, principal: Principal) -> List[Item]:
    return crud.item.get_multi_by_owner(db, user_id=principal.user_id)
