#!/usr/bin/env python3
"""
Event reminder batch.

Emails everyone registered for events happening in 7 days or tomorrow.
Meant to be run once a day from cron, e.g.:

    0 9 * * * cd /srv/repair-cafe && python run_reminders.py >> logs/reminders.log 2>&1
"""
import logging
import sys

from repair_cafe.background_tasks.reminder_tasks import send_event_reminders

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("run_reminders")


def main() -> int:
    logger.info("Starting reminder email job")
    try:
        result = send_event_reminders()
    except Exception:
        logger.exception("Reminder job failed")
        return 1
    logger.info(
        "Done: %s events, %s queued, %s sent, %s failed",
        result["events"], result["queued"], result["sent"], result["failed"],
    )
    return 1 if result["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
