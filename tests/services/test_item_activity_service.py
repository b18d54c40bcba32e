# tests/services/test_item_activity_service.py

import pytest

from repair_cafe import crud
from repair_cafe.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from repair_cafe.crud import crud_notification_outbox
from repair_cafe.schemas.demographics import DemographicsSubmit
from repair_cafe.schemas.item_activity import FeedbackCreate, InterestUpdate
from repair_cafe.schemas.notification_preference import NotificationPreferenceUpdate
from repair_cafe.services import item_activity_service, notification_service, registration_service
from repair_cafe.services.auth_service import Principal

from tests.utils.factories import create_event, create_fixer, create_user, register


def _principal(db_user):
    return Principal(
        user_id=db_user.id,
        email=db_user.email,
        name=db_user.name,
        role=db_user.role,
        via="session",
    )


@pytest.fixture
def owned_item(db_session):
    event = create_event(db_session)
    reg = register(db_session, event)
    return reg.user, reg.items[0]


def test_comment_emails_the_owner(db_session, sent_emails, owned_item):
    owner, db_item = owned_item
    fixer = create_user(db_session, email="fixer@example.com", name="Fran", role="fixer")

    result = item_activity_service.add_comment(
        db_session, item_id=db_item.id, principal=_principal(fixer), comment="  Bring the charger  "
    )

    assert result.comment.comment == "Bring the charger"
    assert len(result.notification_ids) == 1
    notification_service.dispatch_pending(result.notification_ids)
    assert sent_emails[-1]["to"] == owner.email
    assert sent_emails[-1]["subject"] == "New comment on your item: Toaster"
    assert "Fran" in sent_emails[-1]["text"]


def test_owner_comment_does_not_notify(db_session, owned_item):
    owner, db_item = owned_item

    result = item_activity_service.add_comment(
        db_session, item_id=db_item.id, principal=_principal(owner), comment="It also smells"
    )

    assert result.notification_ids == []
    assert crud_notification_outbox.get_by_reference(
        db_session, reference_id=db_item.id, kind="item_comment"
    ) == []


def test_comment_respects_notify_comments(db_session, sent_emails, owned_item):
    owner, db_item = owned_item
    crud.notification_preference.upsert(
        db_session, user_id=owner.id, obj_in=NotificationPreferenceUpdate(notify_comments=False)
    )
    fixer = create_user(db_session, email="fixer@example.com", name="Fran", role="fixer")

    result = item_activity_service.add_comment(
        db_session, item_id=db_item.id, principal=_principal(fixer), comment="Which model is it?"
    )
    notification_service.dispatch_pending(result.notification_ids)

    db_session.expire_all()
    message = crud_notification_outbox.get_by_reference(
        db_session, reference_id=db_item.id, kind="item_comment"
    )[0]
    assert message.status == "skipped"
    assert sent_emails == []


def test_blank_comment_is_rejected(db_session, owned_item):
    owner, db_item = owned_item

    with pytest.raises(ValidationError) as exc_info:
        item_activity_service.add_comment(
            db_session, item_id=db_item.id, principal=_principal(owner), comment="   "
        )
    assert exc_info.value.field == "comment"


def test_comments_on_unknown_item(db_session):
    with pytest.raises(NotFoundError):
        item_activity_service.list_comments(db_session, item_id="itm_missing")


def test_feedback_is_replaced_on_resubmit(db_session, owned_item):
    owner, db_item = owned_item
    principal = _principal(owner)

    item_activity_service.submit_feedback(
        db_session, item_id=db_item.id, principal=principal, obj_in=FeedbackCreate(rating=2)
    )
    feedback = item_activity_service.submit_feedback(
        db_session,
        item_id=db_item.id,
        principal=principal,
        obj_in=FeedbackCreate(rating=5, comment="Works like new"),
    )

    assert feedback.rating == 5
    assert feedback.comment == "Works like new"
    assert crud.item_feedback.ratings_by_items(db_session, item_ids=[db_item.id]) == {
        db_item.id: [5]
    }


def test_feedback_only_from_owner(db_session, owned_item):
    _, db_item = owned_item
    stranger = create_user(db_session, email="stranger@example.com", name="Sam")

    with pytest.raises(ForbiddenError):
        item_activity_service.submit_feedback(
            db_session,
            item_id=db_item.id,
            principal=_principal(stranger),
            obj_in=FeedbackCreate(rating=4),
        )


def test_interest_add_update_and_withdraw(db_session, owned_item):
    _, db_item = owned_item
    fixer = _principal(create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))

    first = item_activity_service.set_interest(
        db_session, item_id=db_item.id, principal=fixer, obj_in=InterestUpdate(notes="Seen this before")
    )
    second = item_activity_service.set_interest(
        db_session,
        item_id=db_item.id,
        principal=fixer,
        obj_in=InterestUpdate(suggested_parts="Thermal fuse"),
    )

    assert second.id == first.id
    assert second.notes == "Seen this before"
    assert second.suggested_parts == "Thermal fuse"

    withdrawn = item_activity_service.set_interest(
        db_session, item_id=db_item.id, principal=fixer, obj_in=InterestUpdate(interested=False)
    )

    assert withdrawn is None
    assert item_activity_service.get_interest(db_session, item_id=db_item.id, principal=fixer) is None


def test_interest_allowed_for_pending_fixer_profile(db_session, owned_item):
    _, db_item = owned_item
    create_fixer(db_session, email="newfixer@example.com", name="Nia")
    db_user = create_user(db_session, email="newfixer@example.com", name="Nia")

    interest = item_activity_service.set_interest(
        db_session, item_id=db_item.id, principal=_principal(db_user), obj_in=InterestUpdate()
    )

    assert interest.user_id == db_user.id


def test_interest_refused_for_non_fixer(db_session, owned_item):
    owner, db_item = owned_item

    with pytest.raises(ForbiddenError):
        item_activity_service.set_interest(
            db_session, item_id=db_item.id, principal=_principal(owner), obj_in=InterestUpdate()
        )


def test_demographics_created_then_overwritten(db_session, owned_item):
    owner, db_item = owned_item
    registration_id = db_item.registration_id

    row, created = registration_service.save_demographics(
        db_session,
        obj_in=DemographicsSubmit(registration_id=registration_id, age_group="25-34"),
    )
    assert created is True
    assert row.age_group == "25-34"

    row, created = registration_service.save_demographics(
        db_session,
        obj_in=DemographicsSubmit(registration_id=registration_id, newcomer_to_canada=True),
    )
    assert created is False
    assert row.age_group is None
    assert row.newcomer_to_canada is True


def test_demographics_for_unknown_registration(db_session):
    with pytest.raises(NotFoundError):
        registration_service.save_demographics(
            db_session, obj_in=DemographicsSubmit(registration_id="reg_missing")
        )


def test_demographics_for_fixer(db_session):
    db_fixer = create_fixer(db_session)

    row, created = registration_service.save_demographics(
        db_session, obj_in=DemographicsSubmit(fixer_id=db_fixer.id, gender="prefer_not_to_say")
    )

    assert created is True
    assert row.fixer_id == db_fixer.id
    assert row.registration_id is None
