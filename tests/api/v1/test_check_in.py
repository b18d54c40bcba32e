# tests/api/v1/test_check_in.py

from fastapi.testclient import TestClient

from tests.utils.auth import login
from tests.utils.factories import create_event, create_user, register


def test_check_in_desk_flow(client: TestClient, db_session):
    event = create_event(db_session, days_ahead=0)
    reg = register(db_session, event, name="Alice Smith")
    register(db_session, event, email="bob@example.com", name="Bob")
    login(client, create_user(db_session, email="admin@example.com", role="admin"))
    base = f"/api/v1/admin/events/{event.id}"

    found = client.get(f"{base}/checkin-lookup", params={"qr": reg.qr_code})
    assert found.status_code == 200
    assert found.json()["attendee"]["name"] == "Alice Smith"
    assert [i["name"] for i in found.json()["attendee"]["items"]] == ["Toaster"]

    search = client.get(f"{base}/checkin-search", params={"q": "smi"})
    assert [a["id"] for a in search.json()["attendees"]] == [reg.id]
    assert client.get(f"{base}/checkin-search", params={"q": "s"}).json()["attendees"] == []

    checked = client.post(f"{base}/checkin", json={"registrationId": reg.id})
    assert checked.status_code == 200
    assert checked.json()["message"] == "Alice Smith checked in"

    again = client.post(f"{base}/checkin", json={"registrationId": reg.id})
    assert again.status_code == 409
    assert again.json()["error_code"] == "ALREADY_CHECKED_IN"

    data = client.get(f"{base}/checkin-data").json()
    assert (data["total_count"], data["checked_in_count"]) == (2, 1)


def test_unknown_qr_is_not_found(client: TestClient, db_session):
    event = create_event(db_session)
    login(client, create_user(db_session, email="admin@example.com", role="admin"))

    response = client.get(
        f"/api/v1/admin/events/{event.id}/checkin-lookup", params={"qr": "deadbeef"}
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "QR_NOT_FOUND"


def test_check_in_needs_admin(client: TestClient, db_session):
    event = create_event(db_session)
    login(client, create_user(db_session, role="fixer"))

    response = client.get(f"/api/v1/admin/events/{event.id}/checkin-data")

    assert response.status_code == 403
