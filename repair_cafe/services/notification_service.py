# repair_cafe/services/notification_service.py
"""
Notification outbox.

Messages are rendered and stored as `notification_outbox` rows inside the
caller's transaction, then delivered after commit by `dispatch_pending`.
Delivery failures stay on the row (status `failed`, `last_error`) and are
retried by the scheduler until NOTIFICATION_MAX_ATTEMPTS is reached.
"""

import logging
from datetime import date, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.config import settings
from repair_cafe.core.email import send_email
from repair_cafe.crud import crud_notification_outbox
from repair_cafe.db.session import SessionLocal
from repair_cafe.models.event import Event
from repair_cafe.models.item import Item
from repair_cafe.models.notification_outbox import NotificationOutbox
from repair_cafe.models.registration import Registration
from repair_cafe.models.user import User
from repair_cafe.utils import email_templates
from repair_cafe.utils.email_templates import RenderedEmail

logger = logging.getLogger(__name__)


def _enqueue(
    db: Session,
    *,
    kind: str,
    db_user: User,
    rendered: RenderedEmail,
    reference_id: Optional[str] = None,
    preference: Optional[str] = "notify_events",
) -> NotificationOutbox:
    """
    Stages the message. With `preference` set and switched off for the
    recipient, the row is stored as `skipped` and never sent.
    """
    status = "pending"
    if preference and not crud.notification_preference.wants(
        db, user_id=db_user.id, preference=preference
    ):
        logger.info(f"User {db_user.id} opted out via {preference}, skipping {kind}")
        status = "skipped"

    return crud_notification_outbox.add(
        db,
        kind=kind,
        user_id=db_user.id,
        reference_id=reference_id,
        recipient_email=db_user.email,
        subject=rendered.subject,
        text_body=rendered.text,
        html_body=rendered.html,
        status=status,
    )


def manage_url(registration: Registration) -> str:
    return (
        f"{settings.APP_URL}/my-registration/{registration.id}"
        f"?token={registration.management_token}"
    )


def enqueue_registration_confirmation(
    db: Session, *, registration: Registration, event: Event, items: List[Item]
) -> NotificationOutbox:
    venue = event.venue
    rendered = email_templates.registration_confirmation(
        name=registration.user.name,
        event_title=event.title,
        event_date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
        venue_name=venue.name if venue else None,
        venue_address=venue.address if venue else None,
        items=[i.name for i in items],
        status=registration.status,
        manage_url=manage_url(registration),
    )
    return _enqueue(
        db,
        kind="registration_confirmation",
        db_user=registration.user,
        rendered=rendered,
        reference_id=registration.id,
    )


def enqueue_item_in_progress(db: Session, *, db_item: Item, event: Event) -> NotificationOutbox:
    rendered = email_templates.item_in_progress(
        name=db_item.owner.name,
        item_name=db_item.name,
        problem=db_item.problem,
        event_title=event.title,
        event_date=event.date,
    )
    return _enqueue(
        db,
        kind="item_in_progress",
        db_user=db_item.owner,
        rendered=rendered,
        reference_id=db_item.id,
    )


def enqueue_item_completed(db: Session, *, db_item: Item, event: Event) -> NotificationOutbox:
    rendered = email_templates.item_completed(
        name=db_item.owner.name,
        item_name=db_item.name,
        outcome=db_item.outcome,
        outcome_notes=db_item.outcome_notes,
        repair_method=db_item.repair_method,
        parts_used=db_item.parts_used,
        event_title=event.title,
        event_date=event.date,
    )
    return _enqueue(
        db,
        kind="item_completed",
        db_user=db_item.owner,
        rendered=rendered,
        reference_id=db_item.id,
    )


def enqueue_event_reminder(
    db: Session, *, registration: Registration, event: Event, today: date
) -> NotificationOutbox:
    venue = event.venue
    address = None
    if venue:
        address = ", ".join(part for part in (venue.address, venue.city) if part)
    rendered = email_templates.event_reminder(
        name=registration.user.name,
        event_title=event.title,
        event_date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
        venue_name=venue.name if venue else None,
        venue_address=address,
        items=[i.name for i in registration.items if i.status != "cancelled"],
        days_until=(event.date - today).days,
    )
    return _enqueue(
        db,
        kind="event_reminder",
        db_user=registration.user,
        rendered=rendered,
        reference_id=registration.id,
    )


def enqueue_magic_link(db: Session, *, db_user: User, url: str) -> NotificationOutbox:
    # Sign-in links go out regardless of preferences
    rendered = email_templates.magic_link(name=db_user.name, url=url)
    return _enqueue(
        db,
        kind="magic_link",
        db_user=db_user,
        rendered=rendered,
        reference_id=db_user.id,
        preference=None,
    )


def enqueue_item_comment(
    db: Session, *, db_item: Item, commenter_name: str, comment: str
) -> NotificationOutbox:
    rendered = email_templates.item_comment(
        name=db_item.owner.name,
        item_name=db_item.name,
        commenter_name=commenter_name,
        comment=comment,
        items_url=f"{settings.APP_URL}/my-items",
    )
    return _enqueue(
        db,
        kind="item_comment",
        db_user=db_item.owner,
        rendered=rendered,
        reference_id=db_item.id,
        preference="notify_comments",
    )


def dispatch_pending(
    ids: Optional[List[str]] = None,
    session_factory: Optional[Callable[[], Session]] = None,
) -> dict:
    """
    Delivers pending and previously failed outbox rows.

    Runs in its own session, after the request that queued the rows has
    committed. With `ids`, only those rows are considered. Each row is
    claimed before sending; rows another dispatcher got first are skipped.
    """
    db = (session_factory or SessionLocal)()
    claim_timeout = timedelta(minutes=settings.NOTIFICATION_CLAIM_TIMEOUT_MINUTES)
    max_attempts = settings.NOTIFICATION_MAX_ATTEMPTS
    sent_count = 0
    failed_count = 0

    try:
        messages = crud_notification_outbox.get_deliverable(
            db, max_attempts=max_attempts, claim_timeout=claim_timeout, ids=ids
        )
        if not messages:
            return {"sent": 0, "failed": 0}

        logger.info(f"Dispatching {len(messages)} notifications")

        for message in messages:
            if not crud_notification_outbox.claim(
                db,
                outbox_id=message.id,
                max_attempts=max_attempts,
                claim_timeout=claim_timeout,
            ):
                logger.info(f"Notification {message.id} already taken, skipping")
                continue
            try:
                result = send_email(
                    message.recipient_email,
                    message.subject,
                    message.text_body,
                    message.html_body,
                )
            except Exception as e:
                logger.error(f"Error sending notification {message.id}: {e}", exc_info=True)
                result = {"success": False, "error": str(e)}

            if result.get("success"):
                crud_notification_outbox.mark_sent(
                    db, db_obj=message, external_id=result.get("id")
                )
                sent_count += 1
            else:
                crud_notification_outbox.mark_failed(
                    db, db_obj=message, error=result.get("error") or "unknown error"
                )
                failed_count += 1
                logger.warning(
                    f"Notification {message.id} failed "
                    f"(attempt {message.attempts}/{max_attempts})"
                )

        if sent_count or failed_count:
            logger.info(f"Notifications: {sent_count} sent, {failed_count} failed")
        return {"sent": sent_count, "failed": failed_count}
    finally:
        db.close()
