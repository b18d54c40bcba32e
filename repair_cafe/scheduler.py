# repair_cafe/scheduler.py
"""
Periodic work for the repair cafe, run in-process with APScheduler:

- retry outbox emails that were not delivered right after their request
- morning reminders for attendees with an event coming up
"""

import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED

from repair_cafe.background_tasks.notification_tasks import deliver_pending_notifications
from repair_cafe.background_tasks.reminder_tasks import send_event_reminders

logger = logging.getLogger(__name__)

# (job id, callable, trigger, description for the startup log)
JOBS = (
    (
        "deliver_pending_notifications",
        deliver_pending_notifications,
        IntervalTrigger(minutes=1),
        "outbox retry, every minute",
    ),
    (
        "send_event_reminders",
        send_event_reminders,
        CronTrigger(hour=9, minute=0),
        "attendee reminders, 09:00 UTC",
    ),
)

scheduler = None


def _log_job_failure(event):
    """A failed run is logged and the job stays scheduled for its next run."""
    logger.error(
        "Periodic task %s raised %r; it will run again on its next trigger",
        event.job_id,
        event.exception,
    )
    if event.traceback:
        logger.error("%s traceback:\n%s", event.job_id, event.traceback)


def _log_job_skipped(event):
    logger.warning(
        "Periodic task %s did not run at %s (process busy or asleep)",
        event.job_id,
        event.scheduled_run_time,
    )


def init_scheduler():
    """
    Starts the periodic tasks. Called from the application lifespan when
    ENABLE_SCHEDULER is set; a second call returns the running scheduler.
    """
    global scheduler

    if scheduler is not None:
        logger.debug("Periodic tasks are already running")
        return scheduler

    # Runs that pile up while the process is busy collapse into one
    scheduler = BackgroundScheduler(
        timezone="UTC",
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 60},
    )
    for job_id, func, trigger, description in JOBS:
        scheduler.add_job(func=func, trigger=trigger, id=job_id, replace_existing=True)
        logger.info(f"Periodic task {job_id} registered ({description})")

    scheduler.add_listener(_log_job_failure, EVENT_JOB_ERROR)
    scheduler.add_listener(_log_job_skipped, EVENT_JOB_MISSED)

    scheduler.start()
    logger.info(f"Repair cafe scheduler running {len(JOBS)} periodic tasks")
    return scheduler


def shutdown_scheduler():
    """Waits for running tasks to finish, then stops the scheduler."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=True)
        logger.info("Repair cafe scheduler stopped")
        scheduler = None
