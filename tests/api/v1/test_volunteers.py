# tests/api/v1/test_volunteers.py

from fastapi.testclient import TestClient

from tests.utils.auth import login
from tests.utils.factories import create_event, create_fixer, create_skill, create_user


def test_fixer_signup_options(client: TestClient, db_session):
    event = create_event(db_session)
    create_skill(db_session, "Sewing", category="textiles")

    response = client.get("/api/v1/fixers/register")

    assert response.status_code == 200
    data = response.json()
    assert [e["id"] for e in data["events"]] == [event.id]
    assert [s["name"] for s in data["skills"]] == ["Sewing"]


def test_fixer_signup_then_update(client: TestClient, db_session):
    event = create_event(db_session)
    payload = {
        "name": "Bob",
        "email": "bob@example.com",
        "skills": "Bikes",
        "eventRsvps": [{"eventId": event.id, "response": "yes"}],
    }

    first = client.post("/api/v1/fixers/register", json=payload)
    second = client.post("/api/v1/fixers/register", json=payload)

    assert first.json()["message"] == "Registration successful"
    assert second.json()["message"] == "Profile updated successfully"
    assert first.json()["fixer_id"] == second.json()["fixer_id"]


def test_admin_approves_fixer(client: TestClient, db_session):
    bob = create_user(db_session, email="bob@example.com", name="Bob")
    db_fixer = create_fixer(db_session)
    login(client, create_user(db_session, email="admin@example.com", role="admin"))

    listing = client.get("/api/v1/admin/fixers")
    assert [f["email"] for f in listing.json()["fixers"]] == ["bob@example.com"]

    response = client.patch(
        "/api/v1/admin/fixers", json={"fixerId": db_fixer.id, "action": "approve"}
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Fixer approved successfully"

    db_session.refresh(bob)
    assert bob.role == "fixer"

    bad = client.patch("/api/v1/admin/fixers", json={"fixerId": db_fixer.id, "action": "promote"})
    assert bad.status_code == 400


def test_fixer_profile(client: TestClient, db_session):
    bob = create_user(db_session, email="bob@example.com", name="Bob", role="fixer")
    create_fixer(db_session, status="active")
    login(client, bob)

    profile = client.get("/api/v1/fixer/profile")
    assert profile.status_code == 200
    assert profile.json()["fixer"]["name"] == "Bob"
    assert profile.json()["stats"]["total_repairs"] == 0

    updated = client.patch("/api/v1/fixer/profile", json={"bio": "Bike mechanic"})
    assert updated.status_code == 200
    assert updated.json()["fixer"]["bio"] == "Bike mechanic"


def test_fixer_profile_for_non_fixer(client: TestClient, db_session):
    login(client, create_user(db_session))

    profile = client.get("/api/v1/fixer/profile").json()

    assert profile["fixer"] is None
    assert profile["recent_repairs"] == []


def test_helper_signup_and_admin_review(client: TestClient, db_session):
    created = client.post(
        "/api/v1/helpers",
        json={"name": "Dee", "email": "dee@example.com", "roles": ["greeter"], "hasVolunteeredBefore": True},
    )
    assert created.status_code == 201
    helper_id = created.json()["helper"]["id"]
    assert created.json()["helper"]["has_volunteered_before"] is True

    login(client, create_user(db_session, email="admin@example.com", role="admin"))
    assert [h["id"] for h in client.get("/api/v1/admin/helpers").json()["helpers"]] == [helper_id]

    updated = client.patch(f"/api/v1/admin/helpers/{helper_id}", json={"status": "active"})
    assert updated.status_code == 200
    assert updated.json()["helper"]["status"] == "active"


def test_notification_preferences(client: TestClient, db_session):
    login(client, create_user(db_session))

    defaults = client.get("/api/v1/notifications/preferences").json()["preferences"]
    assert defaults == {
        "notify_comments": True,
        "notify_events": True,
        "notify_daily_digest": False,
        "notify_weekly_digest": False,
    }

    updated = client.patch(
        "/api/v1/notifications/preferences", json={"notify_events": False}
    ).json()["preferences"]
    assert updated["notify_events"] is False
    assert updated["notify_comments"] is True

    assert client.get("/api/v1/notifications/preferences").json()["preferences"] == updated


def test_notification_preferences_need_session(client: TestClient):
    assert client.get("/api/v1/notifications/preferences").status_code == 401
