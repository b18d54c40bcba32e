# repair_cafe/services/item_activity_service.py
"""
Conversation around an item outside the repair queue itself.

- comments: any signed-in user; the owner is emailed unless they wrote
  the comment or turned off `notify_comments`
- feedback: the owner's rating of the repair, one per item
- interest: fixers flagging items they would like to take on
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from repair_cafe.models.fixer_interest import FixerInterest
from repair_cafe.models.item import Item
from repair_cafe.models.item_comment import ItemComment
from repair_cafe.models.item_feedback import ItemFeedback
from repair_cafe.schemas.item_activity import FeedbackCreate, InterestUpdate
from repair_cafe.services import notification_service
from repair_cafe.services.auth_service import Principal

logger = logging.getLogger(__name__)


@dataclass
class CommentResult:
    comment: ItemComment
    notification_ids: List[str] = field(default_factory=list)


def _get_item(db: Session, item_id: str) -> Item:
    db_item = crud.item.get(db, id=item_id)
    if not db_item:
        raise NotFoundError("Item not found")
    return db_item


def add_comment(
    db: Session, *, item_id: str, principal: Principal, comment: str
) -> CommentResult:
    text = (comment or "").strip()
    if not text:
        raise ValidationError("Comment is required", field="comment")
    db_item = _get_item(db, item_id)

    notification_ids = []
    try:
        db_comment = crud.item_comment.add(
            db, item_id=db_item.id, user_id=principal.user_id, comment=text
        )
        if db_item.user_id != principal.user_id:
            queued = notification_service.enqueue_item_comment(
                db,
                db_item=db_item,
                commenter_name=principal.name or "Someone",
                comment=text,
            )
            notification_ids.append(queued.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(db_comment)
    logger.info(f"Comment {db_comment.id} added to item {db_item.id} by {principal.user_id}")
    return CommentResult(db_comment, notification_ids)


def list_comments(db: Session, *, item_id: str) -> List[ItemComment]:
    _get_item(db, item_id)
    return crud.item_comment.get_by_item(db, item_id=item_id)


def _get_owned_item(db: Session, item_id: str, principal: Principal) -> Item:
    db_item = _get_item(db, item_id)
    if db_item.user_id != principal.user_id:
        raise ForbiddenError("Only the item's owner can rate the repair")
    return db_item


def submit_feedback(
    db: Session, *, item_id: str, principal: Principal, obj_in: FeedbackCreate
) -> ItemFeedback:
    db_item = _get_owned_item(db, item_id, principal)
    try:
        db_feedback = crud.item_feedback.upsert(
            db, item_id=db_item.id, user_id=principal.user_id, obj_in=obj_in
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_feedback)
    return db_feedback


def get_feedback(
    db: Session, *, item_id: str, principal: Principal
) -> Optional[ItemFeedback]:
    _get_owned_item(db, item_id, principal)
    return crud.item_feedback.get_for_user(db, item_id=item_id, user_id=principal.user_id)


def _ensure_fixer(db: Session, principal: Principal) -> None:
    if principal.is_fixer:
        return
    # Fixers who signed up but are not approved yet may still browse and flag
    if crud.fixer.get_by_email(db, email=principal.email) is None:
        raise ForbiddenError("You are not registered as a fixer")


def set_interest(
    db: Session, *, item_id: str, principal: Principal, obj_in: InterestUpdate
) -> Optional[FixerInterest]:
    """Returns the saved interest, or None once it has been withdrawn."""
    _ensure_fixer(db, principal)
    db_item = _get_item(db, item_id)
    try:
        if not obj_in.interested:
            crud.fixer_interest.remove_for_user(
                db, item_id=db_item.id, user_id=principal.user_id
            )
            db.commit()
            return None
        db_interest = crud.fixer_interest.upsert(
            db, item_id=db_item.id, user_id=principal.user_id, obj_in=obj_in
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_interest)
    return db_interest


def get_interest(
    db: Session, *, item_id: str, principal: Principal
) -> Optional[FixerInterest]:
    _get_item(db, item_id)
    return crud.fixer_interest.get_for_user(db, item_id=item_id, user_id=principal.user_id)
