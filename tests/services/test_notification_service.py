# tests/services/test_notification_service.py

from datetime import date, datetime, timedelta, timezone

from repair_cafe import crud
from repair_cafe.core.config import settings
from repair_cafe.background_tasks.reminder_tasks import send_event_reminders
from repair_cafe.crud import crud_notification_outbox
from repair_cafe.schemas.notification_preference import NotificationPreferenceUpdate
from repair_cafe.services import notification_service

from tests.conftest import TestingSessionLocal
from tests.utils.factories import create_event, create_user, create_venue, register


def test_dispatch_sends_pending_confirmation(db_session, sent_emails):
    event = create_event(db_session)
    reg = register(db_session, event)

    result = notification_service.dispatch_pending()

    assert result == {"sent": 1, "failed": 0}
    assert sent_emails[0]["to"] == "alice@example.com"
    assert sent_emails[0]["subject"] == f"Confirmation: {event.title} - Registered"
    db_session.expire_all()
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    assert message.status == "sent"
    assert message.attempts == 1
    assert message.external_id == "email_1"


def test_opted_out_user_gets_skipped_row(db_session, sent_emails):
    db_user = create_user(db_session)
    crud.notification_preference.upsert(
        db_session, user_id=db_user.id, obj_in=NotificationPreferenceUpdate(notify_events=False)
    )
    event = create_event(db_session)
    reg = register(db_session, event)

    notification_service.dispatch_pending()

    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    assert message.status == "skipped"
    assert sent_emails == []


def test_failed_delivery_is_kept_for_retry(db_session, monkeypatch):
    monkeypatch.setattr(
        notification_service,
        "send_email",
        lambda *args: {"success": False, "error": "mailbox unavailable"},
    )
    monkeypatch.setattr(notification_service, "SessionLocal", TestingSessionLocal)
    event = create_event(db_session)
    reg = register(db_session, event)

    result = notification_service.dispatch_pending()

    assert result == {"sent": 0, "failed": 1}
    db_session.expire_all()
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    assert message.status == "failed"
    assert message.last_error == "mailbox unavailable"
    assert message.attempts == 1


def test_failed_delivery_stops_after_max_attempts(db_session, monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_MAX_ATTEMPTS", 2)
    monkeypatch.setattr(
        notification_service,
        "send_email",
        lambda *args: {"success": False, "error": "bounce"},
    )
    monkeypatch.setattr(notification_service, "SessionLocal", TestingSessionLocal)
    event = create_event(db_session)
    register(db_session, event)

    assert notification_service.dispatch_pending()["failed"] == 1
    assert notification_service.dispatch_pending()["failed"] == 1
    assert notification_service.dispatch_pending() == {"sent": 0, "failed": 0}


def test_dispatch_only_given_ids(db_session, sent_emails):
    event = create_event(db_session)
    first = register(db_session, event, email="a@example.com", name="A")
    register(db_session, event, email="b@example.com", name="B")
    wanted = crud_notification_outbox.get_by_reference(db_session, reference_id=first.id)[0]

    result = notification_service.dispatch_pending(ids=[wanted.id])

    assert result["sent"] == 1
    assert [e["to"] for e in sent_emails] == ["a@example.com"]


def test_event_reminders_go_to_active_registrations(db_session, sent_emails):
    today = date.today()
    venue = create_venue(db_session)
    tomorrow = create_event(db_session, title="Tomorrow Cafe", days_ahead=1, venue=venue)
    create_event(db_session, title="Draft Cafe", days_ahead=1, status="draft")
    create_event(db_session, title="Later Cafe", days_ahead=3)
    register(db_session, tomorrow, email="a@example.com", name="A")
    gone = register(db_session, tomorrow, email="b@example.com", name="B")
    gone.status = "cancelled"
    db_session.commit()
    # confirmations are not part of this run
    notification_service.dispatch_pending()
    sent_emails.clear()

    result = send_event_reminders(today=today, session_factory=TestingSessionLocal)

    assert result == {"events": 1, "queued": 1, "sent": 1, "failed": 0}
    assert sent_emails[0]["to"] == "a@example.com"
    assert sent_emails[0]["subject"] == "Reminder: Tomorrow Cafe is tomorrow"


def test_event_reminder_a_week_ahead(db_session, sent_emails):
    today = date.today()
    week = create_event(db_session, title="Next Week Cafe", days_ahead=7)
    register(db_session, week)
    notification_service.dispatch_pending()
    sent_emails.clear()

    result = send_event_reminders(today=today, session_factory=TestingSessionLocal)

    assert result["queued"] == 1
    assert sent_emails[0]["subject"] == "Reminder: Next Week Cafe is in 7 days"
    assert week.date == today + timedelta(days=7)


def test_overlapping_dispatch_sends_once(db_session, monkeypatch):
    sent = []

    def send_while_scheduler_fires(to_email, subject, text, html):
        sent.append(to_email)
        # the scheduler job starts while this row is still being sent
        notification_service.dispatch_pending()
        return {"success": True, "id": f"email_{len(sent)}"}

    monkeypatch.setattr(notification_service, "send_email", send_while_scheduler_fires)
    monkeypatch.setattr(notification_service, "SessionLocal", TestingSessionLocal)
    event = create_event(db_session)
    reg = register(db_session, event)

    result = notification_service.dispatch_pending()

    assert result == {"sent": 1, "failed": 0}
    assert sent == ["alice@example.com"]
    db_session.expire_all()
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    assert message.status == "sent"
    assert message.attempts == 1


def test_claimed_row_is_not_deliverable(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    timeout = timedelta(minutes=10)

    assert crud_notification_outbox.claim(
        db_session, outbox_id=message.id, max_attempts=5, claim_timeout=timeout
    )
    assert not crud_notification_outbox.claim(
        db_session, outbox_id=message.id, max_attempts=5, claim_timeout=timeout
    )
    assert crud_notification_outbox.get_deliverable(
        db_session, max_attempts=5, claim_timeout=timeout
    ) == []


def test_abandoned_claim_is_retried(db_session, sent_emails):
    event = create_event(db_session)
    reg = register(db_session, event)
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    message.status = "sending"
    message.attempts = 1
    message.claimed_at = datetime.now(timezone.utc) - timedelta(hours=1)
    db_session.commit()

    result = notification_service.dispatch_pending()

    assert result == {"sent": 1, "failed": 0}
    db_session.expire_all()
    message = crud_notification_outbox.get_by_reference(db_session, reference_id=reg.id)[0]
    assert message.status == "sent"
    assert message.attempts == 2
