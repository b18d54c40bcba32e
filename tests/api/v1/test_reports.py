# tests/api/v1/test_reports.py

from fastapi.testclient import TestClient

from repair_cafe import crud

from tests.utils.auth import login
from tests.utils.factories import create_event, create_user, register


def test_report_and_stats(client: TestClient, db_session):
    event = create_event(db_session)
    reg = register(
        db_session,
        event,
        items=[{"name": "Lamp", "problem": "Flickers"}, {"name": "Kettle", "problem": "Leaks"}],
    )
    crud.item.complete(db_session, db_obj=reg.items[0], outcome="fixed")
    db_session.commit()
    login(client, create_user(db_session, email="admin@example.com", role="admin"))

    report = client.get(f"/api/v1/admin/events/{event.id}/report")
    assert report.status_code == 200
    body = report.json()["report"]
    assert body["summary"]["total_items"] == 2
    assert body["summary"]["completed_items"] == 1
    assert body["success_rate"] == 100
    assert body["volunteer_hours"] == 2.0

    stats = client.get(f"/api/v1/admin/events/{event.id}/stats")
    assert stats.status_code == 200
    assert stats.json()["items"] == {"total": 2, "queued": 1, "in_progress": 0, "completed": 1}


def test_report_for_unknown_event(client: TestClient, db_session):
    login(client, create_user(db_session, email="admin@example.com", role="admin"))

    response = client.get("/api/v1/admin/events/evt_missing/report")

    assert response.status_code == 404


def test_empty_event_has_zero_success_rate(client: TestClient, db_session):
    event = create_event(db_session)
    login(client, create_user(db_session, email="admin@example.com", role="admin"))

    body = client.get(f"/api/v1/admin/events/{event.id}/report").json()["report"]

    assert body["success_rate"] == 0
    assert body["materials"]["total"] == 0.0
