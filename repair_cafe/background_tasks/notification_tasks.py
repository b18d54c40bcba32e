"""Periodic delivery of outbox rows that were not sent on the first try."""

import logging

from repair_cafe.services import notification_service

logger = logging.getLogger(__name__)


def deliver_pending_notifications():
    """
    Runs every minute via APScheduler.

    Picks up `pending` rows whose post-request dispatch never ran and
    `failed` rows that still have attempts left, plus rows whose sender
    claimed them and then went away.
    """
    try:
        result = notification_service.dispatch_pending()
    except Exception as e:
        logger.error(f"Error in deliver_pending_notifications: {e}", exc_info=True)
        return None
    return result
