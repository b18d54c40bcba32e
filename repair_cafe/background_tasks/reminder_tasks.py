"""
Event reminder emails.

Finds published events happening REMINDER_DAYS_AHEAD days from today
(7 and 1 by default) and queues one reminder per live registration, then
delivers them. Invoked by `run_reminders.py` from cron, or daily by the
in-process scheduler when it is enabled.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.config import settings
from repair_cafe.db.session import SessionLocal
from repair_cafe.services import notification_service

logger = logging.getLogger(__name__)


def send_event_reminders(
    today: Optional[date] = None,
    session_factory: Optional[Callable[[], Session]] = None,
) -> dict:
    """
    Returns counts: events found, reminders queued, sent and failed.
    """
    today = today or date.today()
    factory = session_factory or SessionLocal
    db = factory()
    queued_ids = []
    target_dates = [today + timedelta(days=d) for d in settings.REMINDER_DAYS_AHEAD]

    try:
        events = crud.event.get_published_on_dates(db, dates=target_dates)
        logger.info(f"Found {len(events)} events needing reminders")

        for event in events:
            registrations = crud.registration.get_active_by_event(db, event_id=event.id)
            logger.info(f"Event '{event.title}': {len(registrations)} registrations")
            for registration in registrations:
                message = notification_service.enqueue_event_reminder(
                    db, registration=registration, event=event, today=today
                )
                if message.status == "pending":
                    queued_ids.append(message.id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    result = {"events": len(events), "queued": len(queued_ids), "sent": 0, "failed": 0}
    if queued_ids:
        delivery = notification_service.dispatch_pending(
            ids=queued_ids, session_factory=factory
        )
        result.update(delivery)

    logger.info(
        f"Reminders: {result['queued']} queued, {result['sent']} sent, "
        f"{result['failed']} failed"
    )
    return result
