# tests/services/test_report_service.py

from types import SimpleNamespace

import pytest

from repair_cafe import crud
from repair_cafe.models.fixer import FixerEventRsvp
from repair_cafe.services import report_service

from tests.utils.factories import create_event, create_fixer, create_user, create_venue, register


def _item(weight=None, **pcts):
    fields = {f"pct_{m}": pcts.get(m) for m in report_service.MATERIALS}
    return SimpleNamespace(weight_kg=weight, **fields)


def test_round_half_up_rounds_away_from_zero():
    assert report_service.round_half_up(2.5) == 3
    assert report_service.round_half_up(0.125, 2) == 0.13
    assert report_service.round_half_up(1.05, 1) == 1.1


def test_success_rate_is_zero_without_completed_items():
    assert report_service.success_rate({"fixed": 0}, 0) == 0


def test_success_rate_counts_fixed_and_partially_fixed():
    counts = {"fixed": 1, "partially_fixed": 1, "not_repairable": 1}
    # 2 of 3 -> 66.67 -> 67
    assert report_service.success_rate(counts, 3) == 67


def test_volunteer_hours():
    assert report_service.volunteer_hours(0) == 0
    assert report_service.volunteer_hours(7) == 7.0


def test_material_totals_skip_items_without_weight():
    items = [
        _item(2.0, electronic=50, metal=25, plastic=25),
        _item(1.5, textile=100),
        _item(None, metal=100),
    ]

    totals = report_service.material_totals(items)

    assert totals.electronic == 1.0
    assert totals.metal == 0.5
    assert totals.plastic == 0.5
    assert totals.textile == 1.5
    assert totals.other == 0.0
    assert totals.total == 3.5


def test_outcome_breakdown_normalizes_legacy_values():
    items = [
        SimpleNamespace(outcome="fixed"),
        SimpleNamespace(outcome="partial_fix"),
        SimpleNamespace(outcome="not_fixable"),
        SimpleNamespace(outcome=None),
    ]

    breakdown = report_service.outcome_breakdown(items)

    assert breakdown.fixed == 1
    assert breakdown.partially_fixed == 1
    assert breakdown.not_repairable == 1
    assert breakdown.not_attempted == 1


@pytest.fixture
def finished_event(db_session):
    """Three items: one fixed, one legacy partial fix, one still queued."""
    venue = create_venue(db_session)
    event = create_event(db_session, venue=venue)
    reg = register(
        db_session,
        event,
        items=[
            {"name": "Lamp", "problem": "Flickers"},
            {"name": "Kettle", "problem": "Leaks"},
            {"name": "Radio", "problem": "Silent"},
        ],
    )
    other = register(db_session, event, email="bob@example.com", name="Bob")
    fixer = create_user(db_session, email="fixer@example.com", name="Fran", role="fixer")

    lamp, kettle, _ = reg.items
    crud.item.complete(db_session, db_obj=lamp, outcome="fixed")
    lamp.fixer_id = fixer.id
    lamp.weight_kg = 2.0
    lamp.pct_metal = 100
    crud.item.complete(db_session, db_obj=kettle, outcome="partial_fix")
    kettle.fixer_id = fixer.id

    other.status = "checked_in"
    db_fixer = create_fixer(db_session, status="active")
    db_session.add(FixerEventRsvp(fixer_id=db_fixer.id, event_id=event.id, response="yes"))
    db_session.commit()
    return event


def test_build_report(db_session, finished_event):
    report = report_service.build_report(db_session, event_id=finished_event.id)

    assert report.event.venue_name == "Community Hall"
    assert report.summary.total_items == 4
    assert report.summary.completed_items == 2
    assert report.summary.registered_items == 2
    assert report.summary.total_registrations == 2
    assert report.summary.checked_in == 1
    assert report.summary.volunteer_count == 1
    assert report.outcomes.fixed == 1
    assert report.outcomes.partially_fixed == 1
    assert report.success_rate == 100
    assert report.volunteer_hours == 4.0
    assert report.materials.metal == 2.0


def test_build_stats_leaves_out_cancelled_registrations(db_session, finished_event):
    cancelled = register(db_session, finished_event, email="carol@example.com", name="Carol")
    cancelled.status = "cancelled"
    crud.item.cancel_for_registration(db_session, registration_id=cancelled.id)
    db_session.commit()

    stats = report_service.build_stats(db_session, event_id=finished_event.id)

    assert stats.registrations.total == 3
    assert stats.registrations.cancelled == 1
    assert stats.registrations.active == 2
    assert stats.items.total == 4
    assert stats.items.completed == 2
    assert stats.items.queued == 2
    assert stats.success_rate == 100
