# tests/services/test_volunteer_service.py

import pytest

from repair_cafe import crud
from repair_cafe.core.exceptions import NotFoundError
from repair_cafe.schemas.volunteer import (
    EventRsvp,
    FixerAction,
    FixerProfileUpdate,
    FixerRegister,
    HelperCreate,
)
from repair_cafe.services import item_service, volunteer_service
from repair_cafe.services.auth_service import Principal

from tests.utils.factories import create_event, create_fixer, create_skill, create_user, register


def _principal(db_user):
    return Principal(
        user_id=db_user.id,
        email=db_user.email,
        name=db_user.name,
        role=db_user.role,
        via="session",
    )


def test_register_fixer_creates_then_updates(db_session):
    event = create_event(db_session)
    obj_in = FixerRegister(
        name="Bob",
        email="Bob@Example.com",
        skills="Soldering",
        eventRsvps=[EventRsvp(eventId=event.id, response="yes")],
    )

    db_fixer, created = volunteer_service.register_fixer(db_session, obj_in=obj_in)
    assert created is True
    assert db_fixer.email == "bob@example.com"
    assert db_fixer.status == "pending"
    assert crud.fixer.count_yes_for_event(db_session, event_id=event.id) == 1

    again, created = volunteer_service.register_fixer(
        db_session, obj_in=FixerRegister(name="Robert", email="bob@example.com")
    )
    assert created is False
    assert again.id == db_fixer.id
    assert again.name == "Robert"
    # RSVPs are only replaced when new ones are sent
    assert crud.fixer.count_yes_for_event(db_session, event_id=event.id) == 1


def test_register_fixer_sets_skills_of_existing_user(db_session):
    db_user = create_user(db_session, email="bob@example.com", name="Bob")
    skill = create_skill(db_session, "Bicycles")

    volunteer_service.register_fixer(
        db_session,
        obj_in=FixerRegister(name="Bob", email="bob@example.com", skillIds=[skill.id]),
    )

    db_session.refresh(db_user)
    assert [s.name for s in db_user.skills] == ["Bicycles"]


def test_approve_promotes_user_and_remove_demotes(db_session):
    db_user = create_user(db_session, email="bob@example.com", name="Bob")
    db_fixer = create_fixer(db_session)

    approved = volunteer_service.decide_fixer(
        db_session, fixer_id=db_fixer.id, action=FixerAction.approve
    )
    db_session.refresh(db_user)
    assert approved.status == "active"
    assert approved.approved_at is not None
    assert db_user.role == "fixer"

    removed = volunteer_service.decide_fixer(
        db_session, fixer_id=db_fixer.id, action=FixerAction.remove
    )
    db_session.refresh(db_user)
    assert removed.status == "removed"
    assert removed.approved_at is None
    assert db_user.role == "attendee"


def test_decisions_never_change_admin_role(db_session):
    admin = create_user(db_session, email="bob@example.com", name="Bob", role="admin")
    db_fixer = create_fixer(db_session)

    volunteer_service.decide_fixer(db_session, fixer_id=db_fixer.id, action=FixerAction.approve)
    volunteer_service.decide_fixer(db_session, fixer_id=db_fixer.id, action=FixerAction.reject)

    db_session.refresh(admin)
    assert admin.role == "admin"


def test_decide_unknown_fixer(db_session):
    with pytest.raises(NotFoundError):
        volunteer_service.decide_fixer(
            db_session, fixer_id="fix_missing", action=FixerAction.approve
        )


def test_list_fixers_counts_upcoming_rsvps(db_session):
    upcoming = create_event(db_session)
    past = create_event(db_session, title="Past", days_ahead=-5)
    db_fixer = create_fixer(db_session)
    crud.fixer.replace_rsvps(
        db_session,
        db_obj=db_fixer,
        rsvps=[
            {"event_id": upcoming.id, "response": "maybe"},
            {"event_id": past.id, "response": "yes"},
        ],
    )
    db_session.commit()

    rows = volunteer_service.list_fixers(db_session)

    assert len(rows) == 1
    assert rows[0]["upcoming_events_count"] == 1
    assert rows[0]["user_skills"] == []


def test_profile_stats_and_recent_repairs(db_session):
    event = create_event(db_session)
    reg = register(
        db_session,
        event,
        items=[{"name": "Lamp", "problem": "Flickers"}, {"name": "Kettle", "problem": "Leaks"}],
    )
    fixer_user = create_user(db_session, email="bob@example.com", name="Bob", role="fixer")
    create_fixer(db_session, status="active")
    principal = _principal(fixer_user)
    for db_item, outcome in zip(reg.items, ["fixed", "not_repairable"]):
        item_service.claim_item(
            db_session, event_id=event.id, item_id=db_item.id, principal=principal
        )
        item_service.log_outcome(
            db_session,
            event_id=event.id,
            item_id=db_item.id,
            principal=principal,
            outcome=outcome,
        )

    profile = volunteer_service.get_profile(db_session, principal=principal)

    assert profile["fixer"].email == "bob@example.com"
    assert profile["stats"].total_repairs == 2
    assert profile["stats"].fixed_items == 1
    assert profile["stats"].not_repairable == 1
    assert {i.name for i in profile["recent_repairs"]} == {"Lamp", "Kettle"}


def test_update_profile_creates_missing_profile(db_session):
    db_user = create_user(db_session, email="carol@example.com", name="Carol")

    db_fixer = volunteer_service.update_profile(
        db_session,
        principal=_principal(db_user),
        obj_in=FixerProfileUpdate(bio="Fixes bikes"),
    )

    assert db_fixer.name == "Carol"
    assert db_fixer.bio == "Fixes bikes"
    assert db_fixer.status == "pending"


def test_helper_signup_and_status(db_session):
    db_helper = volunteer_service.create_helper(
        db_session,
        obj_in=HelperCreate(name="Dee", email="Dee@example.com", roles=["greeter"]),
    )
    assert db_helper.email == "dee@example.com"
    assert db_helper.status == "pending"

    updated = volunteer_service.update_helper_status(
        db_session, helper_id=db_helper.id, status="contacted"
    )
    assert updated.status == "contacted"

    with pytest.raises(NotFoundError):
        volunteer_service.update_helper_status(
            db_session, helper_id="hlp_missing", status="active"
        )
