# tests/services/test_check_in_service.py

import pytest

from repair_cafe.core.exceptions import InvalidStateError, NotFoundError
from repair_cafe.services import check_in_service

from tests.utils.factories import create_event, register


def test_lookup_by_qr(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)

    found = check_in_service.lookup_by_qr(
        db_session, event_id=event.id, qr_code=f"  {reg.qr_code} "
    )

    assert found.id == reg.id


def test_lookup_by_qr_of_cancelled_registration_is_not_found(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)
    reg.status = "cancelled"
    db_session.commit()

    with pytest.raises(NotFoundError) as exc_info:
        check_in_service.lookup_by_qr(db_session, event_id=event.id, qr_code=reg.qr_code)
    assert exc_info.value.error_code == "QR_NOT_FOUND"


def test_short_search_returns_nothing(db_session):
    event = create_event(db_session)
    register(db_session, event, name="Al")

    assert check_in_service.search_attendees(db_session, event_id=event.id, query="A") == []
    assert len(check_in_service.search_attendees(db_session, event_id=event.id, query="Al")) == 1


def test_search_returns_at_most_twenty(db_session):
    event = create_event(db_session, capacity=50)
    for n in range(25):
        register(db_session, event, email=f"guest{n}@example.com", name=f"Guest {n:02d}")

    results = check_in_service.search_attendees(db_session, event_id=event.id, query="guest")

    assert len(results) == 20
    assert results[0].user.name == "Guest 00"


def test_search_treats_wildcards_literally(db_session):
    event = create_event(db_session)
    register(db_session, event, email="a@example.com", name="Ann")
    register(db_session, event, email="under_score@example.com", name="Ben")

    assert check_in_service.search_attendees(db_session, event_id=event.id, query="%%") == []
    assert check_in_service.search_attendees(db_session, event_id=event.id, query="__") == []
    found = check_in_service.search_attendees(db_session, event_id=event.id, query="r_s")
    assert [r.user.name for r in found] == ["Ben"]


def test_check_in_twice_is_rejected(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)

    checked = check_in_service.check_in(db_session, event_id=event.id, registration_id=reg.id)
    assert checked.status == "checked_in"
    assert checked.checked_in_at is not None

    with pytest.raises(InvalidStateError):
        check_in_service.check_in(db_session, event_id=event.id, registration_id=reg.id)


def test_check_in_counts(db_session):
    event = create_event(db_session)
    reg = register(db_session, event, email="a@example.com", name="A")
    register(db_session, event, email="b@example.com", name="B")
    gone = register(db_session, event, email="c@example.com", name="C")
    gone.status = "cancelled"
    db_session.commit()
    check_in_service.check_in(db_session, event_id=event.id, registration_id=reg.id)

    _, total, checked_in = check_in_service.get_check_in_counts(db_session, event_id=event.id)

    assert (total, checked_in) == (2, 1)
