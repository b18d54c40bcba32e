"""
CRUD operations for the notification outbox.

A row is claimed before it is sent: `claim` moves it to `sending` with a
conditional update and commits, so overlapping dispatchers (the request's
background task and the scheduler job) never deliver the same row twice.
A `sending` row whose claim is older than the claim timeout is treated as
abandoned and becomes deliverable again.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import and_, or_, update
from sqlalchemy.orm import Session

from repair_cafe.models.notification_outbox import NotificationOutbox

RETRYABLE_STATUSES = ("pending", "failed")


def add(
    db: Session,
    *,
    kind: str,
    recipient_email: str,
    subject: str,
    text_body: str,
    html_body: str,
    user_id: Optional[str] = None,
    reference_id: Optional[str] = None,
    status: str = "pending",
) -> NotificationOutbox:
    """Stages a message in the caller's transaction. Flush only."""
    db_obj = NotificationOutbox(
        kind=kind,
        user_id=user_id,
        reference_id=reference_id,
        recipient_email=recipient_email,
        subject=subject,
        text_body=text_body,
        html_body=html_body,
        status=status,
        attempts=0,
    )
    db.add(db_obj)
    db.flush()
    return db_obj


def _deliverable(max_attempts: int, claim_timeout: timedelta):
    stale_before = datetime.now(timezone.utc) - claim_timeout
    return and_(
        NotificationOutbox.attempts < max_attempts,
        or_(
            NotificationOutbox.status.in_(RETRYABLE_STATUSES),
            and_(
                NotificationOutbox.status == "sending",
                NotificationOutbox.claimed_at < stale_before,
            ),
        ),
    )


def get_deliverable(
    db: Session,
    *,
    max_attempts: int,
    claim_timeout: timedelta,
    ids: Optional[List[str]] = None,
    limit: int = 100,
) -> List[NotificationOutbox]:
    """Rows with attempts left that nobody is sending, oldest first."""
    query = db.query(NotificationOutbox).filter(_deliverable(max_attempts, claim_timeout))
    if ids is not None:
        query = query.filter(NotificationOutbox.id.in_(ids))
    return query.order_by(NotificationOutbox.created_at.asc()).limit(limit).all()


def claim(
    db: Session, *, outbox_id: str, max_attempts: int, claim_timeout: timedelta
) -> bool:
    """
    Takes the row for this dispatcher and counts the attempt. Commits.

    Returns False when the row was sent, claimed elsewhere or ran out of
    attempts since it was read.
    """
    result = db.execute(
        update(NotificationOutbox)
        .where(
            NotificationOutbox.id == outbox_id,
            _deliverable(max_attempts, claim_timeout),
        )
        .values(
            status="sending",
            attempts=NotificationOutbox.attempts + 1,
            claimed_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def mark_sent(
    db: Session, *, db_obj: NotificationOutbox, external_id: Optional[str] = None
) -> NotificationOutbox:
    db_obj.status = "sent"
    db_obj.external_id = external_id
    db_obj.last_error = None
    db_obj.sent_at = datetime.now(timezone.utc)
    db.add(db_obj)
    db.commit()
    return db_obj


def mark_failed(db: Session, *, db_obj: NotificationOutbox, error: str) -> NotificationOutbox:
    db_obj.status = "failed"
    db_obj.last_error = error[:1000]
    db.add(db_obj)
    db.commit()
    return db_obj


def get_by_reference(
    db: Session, *, reference_id: str, kind: Optional[str] = None
) -> List[NotificationOutbox]:
    query = db.query(NotificationOutbox).filter(
        NotificationOutbox.reference_id == reference_id
    )
    if kind:
        query = query.filter(NotificationOutbox.kind == kind)
    return query.order_by(NotificationOutbox.created_at.asc()).all()
