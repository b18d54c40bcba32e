# tests/services/test_auth_service.py

from datetime import datetime, timedelta, timezone

import pytest

from repair_cafe import crud
from repair_cafe.core.config import settings
from repair_cafe.core.exceptions import UnauthorizedError, ValidationError
from repair_cafe.crud import crud_auth_token, crud_notification_outbox
from repair_cafe.schemas.notification_preference import NotificationPreferenceUpdate
from repair_cafe.services import auth_service
from repair_cafe.services.auth_service import (
    RegistrationTokenCredential,
    SessionCredential,
    resolve_principal,
)

from tests.utils.factories import create_event, create_user, register


def _issue_token(db_session, db_user, minutes=60):
    token = "a" * 64
    crud_auth_token.create_magic_link_token(
        db_session,
        user_id=db_user.id,
        token_hash=auth_service.hash_token(token),
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes),
    )
    return token


def test_session_token_round_trip(db_session):
    db_user = create_user(db_session, role="fixer")

    token = auth_service.create_session_token(db_user)
    payload = auth_service.decode_session_token(token)

    assert payload.sub == db_user.id
    assert payload.role == "fixer"


def test_expired_session_token_is_rejected(db_session):
    db_user = create_user(db_session)
    token = auth_service.create_session_token(
        db_user, now=datetime.now(timezone.utc) - timedelta(days=365)
    )

    with pytest.raises(UnauthorizedError):
        auth_service.decode_session_token(token)


def test_session_principal_reads_role_from_database(db_session):
    db_user = create_user(db_session)
    token = auth_service.create_session_token(db_user)
    db_user.role = "admin"
    db_session.commit()

    principal = resolve_principal(db_session, [SessionCredential(token)])

    assert principal.is_admin
    assert principal.via == "session"


def test_resolve_principal_falls_back_to_next_credential(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)
    session_token = auth_service.create_session_token(reg.user)

    principal = resolve_principal(
        db_session,
        [RegistrationTokenCredential(reg.id, "wrong"), SessionCredential(session_token)],
    )

    assert principal.via == "session"
    assert principal.user_id == reg.user_id


def test_resolve_principal_without_credentials(db_session):
    with pytest.raises(UnauthorizedError):
        resolve_principal(db_session, [])


def test_request_magic_link_creates_user_and_queues_email(db_session):
    db_user, notification_ids = auth_service.request_magic_link(
        db_session, email="New.Person@example.com", name="New Person"
    )

    assert db_user.email == "new.person@example.com"
    assert db_user.role == "attendee"
    messages = crud_notification_outbox.get_by_reference(
        db_session, reference_id=db_user.id, kind="magic_link"
    )
    assert [m.id for m in messages] == notification_ids
    assert "/auth/verify?token=" in messages[0].text_body


def test_magic_link_bypasses_notification_preferences(db_session):
    db_user = create_user(db_session)
    crud.notification_preference.upsert(
        db_session, user_id=db_user.id, obj_in=NotificationPreferenceUpdate(notify_events=False)
    )

    auth_service.request_magic_link(db_session, email=db_user.email)

    messages = crud_notification_outbox.get_by_reference(
        db_session, reference_id=db_user.id, kind="magic_link"
    )
    assert messages[0].status == "pending"


def test_verify_magic_link_is_single_use(db_session):
    db_user = create_user(db_session)
    token = _issue_token(db_session, db_user)

    verified_user, session_token = auth_service.verify_magic_link(db_session, token=token)

    assert verified_user.id == db_user.id
    assert verified_user.email_verified is True
    assert auth_service.decode_session_token(session_token).sub == db_user.id

    with pytest.raises(ValidationError):
        auth_service.verify_magic_link(db_session, token=token)


def test_expired_magic_link_is_rejected(db_session):
    db_user = create_user(db_session)
    token = _issue_token(db_session, db_user, minutes=-5)

    with pytest.raises(ValidationError):
        auth_service.verify_magic_link(db_session, token=token)


def test_empty_magic_link_token_is_rejected(db_session):
    with pytest.raises(ValidationError):
        auth_service.verify_magic_link(db_session, token="")


def test_admin_allow_list(db_session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", "boss@example.com, other@example.com")

    db_user, _ = auth_service.request_magic_link(db_session, email="Boss@example.com")

    assert db_user.role == "admin"
