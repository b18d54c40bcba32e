# tests/api/v1/test_fixer_queue.py

import pytest
from fastapi.testclient import TestClient

from tests.utils.auth import login
from tests.utils.factories import create_event, create_user, register


@pytest.fixture
def running_event(db_session):
    event = create_event(db_session, days_ahead=0)
    reg = register(
        db_session,
        event,
        items=[{"name": "Lamp", "problem": "Flickers"}, {"name": "Kettle", "problem": "Leaks"}],
    )
    return event, reg


def test_queue_requires_fixer_role(client: TestClient, db_session, running_event):
    event, _ = running_event
    login(client, create_user(db_session, email="someone@example.com", name="Someone"))

    response = client.get(f"/api/v1/fixer/events/{event.id}/queue")

    assert response.status_code == 403


def test_claim_and_log_outcome(client: TestClient, db_session, running_event, sent_emails):
    event, reg = running_event
    lamp = reg.items[0]
    login(client, create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))
    base = f"/api/v1/fixer/events/{event.id}"

    claimed = client.post(f"{base}/claim-item", json={"itemId": lamp.id})
    assert claimed.status_code == 200
    assert claimed.json()["item"]["status"] == "in-progress"
    assert sent_emails[-1]["subject"] == 'Your item "Lamp" is being repaired!'

    queue = client.get(f"{base}/queue", params={"filter": "in-progress"}).json()
    assert [(i["name"], i["fixer_name"], i["owner_name"]) for i in queue["items"]] == [
        ("Lamp", "Fran", "Alice")
    ]

    logged = client.post(
        f"{base}/items/{lamp.id}/outcome",
        json={"outcome": "fixed", "outcome_notes": "Replaced the switch"},
    )
    assert logged.status_code == 200
    assert logged.json()["item"]["outcome"] == "fixed"
    assert sent_emails[-1]["subject"] == 'Repair complete for "Lamp" - Fixed!'

    detail = client.get(f"{base}/items/{lamp.id}").json()["item"]
    assert detail["status"] == "completed"
    assert detail["fixer_name"] == "Fran"


def test_second_claim_is_conflict(client: TestClient, db_session, running_event):
    event, reg = running_event
    lamp = reg.items[0]
    base = f"/api/v1/fixer/events/{event.id}"
    first = create_user(db_session, email="first@example.com", name="First", role="fixer")
    second = create_user(db_session, email="second@example.com", name="Second", role="fixer")

    login(client, first)
    assert client.post(f"{base}/claim-item", json={"itemId": lamp.id}).status_code == 200

    login(client, second)
    response = client.post(f"{base}/claim-item", json={"itemId": lamp.id})
    assert response.status_code == 409
    assert response.json()["error_code"] == "ITEM_UNAVAILABLE"

    detail = client.get(f"{base}/items/{lamp.id}").json()["item"]
    assert detail["fixer_name"] == "First"


def test_invalid_outcome_is_bad_request(client: TestClient, db_session, running_event):
    event, reg = running_event
    lamp = reg.items[0]
    base = f"/api/v1/fixer/events/{event.id}"
    login(client, create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))
    client.post(f"{base}/claim-item", json={"itemId": lamp.id})

    response = client.post(f"{base}/items/{lamp.id}/outcome", json={"outcome": "melted"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    assert client.get(f"{base}/items/{lamp.id}").json()["item"]["status"] == "in-progress"


def test_update_item_back_to_queue(client: TestClient, db_session, running_event):
    event, reg = running_event
    lamp = reg.items[0]
    base = f"/api/v1/fixer/events/{event.id}"
    login(client, create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))
    client.post(f"{base}/claim-item", json={"itemId": lamp.id})

    response = client.post(f"{base}/update-item", json={"itemId": lamp.id, "status": "registered"})

    assert response.status_code == 200
    assert response.json()["item"]["status"] == "registered"
    assert response.json()["item"]["fixer_id"] is None


def test_admin_update_item_in_progress_keeps_fixer(
    client: TestClient, db_session, running_event
):
    event, reg = running_event
    lamp = reg.items[0]
    base = f"/api/v1/fixer/events/{event.id}"
    fixer = create_user(db_session, email="fixer@example.com", name="Fran", role="fixer")
    admin = create_user(db_session, email="admin@example.com", name="Admin", role="admin")
    login(client, fixer)
    client.post(f"{base}/claim-item", json={"itemId": lamp.id})

    login(client, admin)
    response = client.post(
        f"{base}/update-item", json={"itemId": lamp.id, "status": "in-progress"}
    )

    assert response.status_code == 200
    assert response.json()["item"]["fixer_id"] == fixer.id


def test_queue_rejects_unknown_filter(client: TestClient, db_session, running_event):
    event, _ = running_event
    login(client, create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))

    response = client.get(f"/api/v1/fixer/events/{event.id}/queue", params={"filter": "lost"})

    assert response.status_code == 400


def test_matched_items(client: TestClient, db_session, running_event):
    event, _ = running_event
    login(client, create_user(db_session, email="fixer@example.com", name="Fran", role="fixer"))

    response = client.get(f"/api/v1/fixer/events/{event.id}/items")

    assert response.status_code == 200
    data = response.json()
    assert data["is_fixer"] is True
    assert [i["name"] for i in data["items"]] == ["Lamp", "Kettle"]
