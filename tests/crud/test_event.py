# tests/crud/test_event.py

from datetime import date, datetime, timezone
from unittest.mock import MagicMock

from repair_cafe.core.config import settings
from repair_cafe.crud.crud_event import CRUDEvent, default_registration_opens_at, spots_left
from repair_cafe.models.event import Event
from repair_cafe.schemas.event import EventCreate, EventUpdate

from tests.utils.factories import create_event, register

event_crud = CRUDEvent(Event)


def test_create_applies_defaults():
    """
    Capacity and registration opening fall back to the configured defaults
    when the request leaves them out.
    """
    db_session = MagicMock()
    event_in = EventCreate(
        title="Repair Cafe",
        date=date(2026, 5, 20),
        start_time="10:00",
        end_time="14:00",
    )

    event_crud.create(db=db_session, obj_in=event_in)

    created_obj = db_session.add.call_args[0][0]
    assert created_obj.capacity == settings.DEFAULT_EVENT_CAPACITY
    assert created_obj.status == "draft"
    assert created_obj.registration_opens_at == default_registration_opens_at(
        date(2026, 5, 20)
    )
    db_session.commit.assert_called_once()


def test_default_registration_opens_at_is_midnight_utc():
    opens = default_registration_opens_at(date(2026, 5, 20))
    assert opens == datetime(2026, 5, 6, tzinfo=timezone.utc)


def test_spots_left_never_negative():
    assert spots_left(10, 3) == 7
    assert spots_left(10, 10) == 0
    assert spots_left(10, 12) == 0


def test_update_converts_status(db_session):
    event = create_event(db_session, status="draft")
    updated = event_crud.update(
        db_session, db_obj=event, obj_in=EventUpdate(status="published", capacity=5)
    )
    assert updated.status == "published"
    assert updated.capacity == 5


def test_count_active_registrations_ignores_cancelled(db_session):
    event = create_event(db_session)
    register(db_session, event, email="a@example.com", name="A")
    reg = register(db_session, event, email="b@example.com", name="B")
    reg.status = "cancelled"
    db_session.commit()

    assert event_crud.count_active_registrations(db_session, event_id=event.id) == 1


def test_published_upcoming_excludes_drafts_and_past(db_session):
    upcoming = create_event(db_session, title="Upcoming")
    create_event(db_session, title="Draft", status="draft")
    create_event(db_session, title="Past", days_ahead=-3)

    events = event_crud.get_published_upcoming(db_session, today=date.today())

    assert [e.id for e in events] == [upcoming.id]
