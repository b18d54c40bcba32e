# repair_cafe/services/report_service.py
"""
Impact reporting for a single event.

Success rate is (fixed + partially fixed) over completed items, as a whole
percentage, and 0 when nothing has been completed yet. Volunteer hours
assume half an hour per item with two people on it.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.core.exceptions import NotFoundError
from repair_cafe.models.event import Event
from repair_cafe.models.item import Item
from repair_cafe.schemas.item import RepairOutcome
from repair_cafe.schemas.report import (
    EventReport,
    EventStats,
    ItemCounts,
    MaterialTotals,
    OutcomeBreakdown,
    RegistrationCounts,
    ReportEvent,
    ReportSummary,
)
from repair_cafe.services.item_service import LEGACY_OUTCOMES, SUCCESSFUL_OUTCOMES

logger = logging.getLogger(__name__)

HOURS_PER_ITEM = 0.5
VOLUNTEERS_PER_ITEM = 2

MATERIALS = ("electronic", "metal", "plastic", "textile", "other")


def round_half_up(value: float, places: int = 0) -> float:
    """Rounds .5 away from zero, unlike the built-in banker's rounding."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def success_rate(outcome_counts: Dict[str, int], completed: int) -> int:
    if completed <= 0:
        return 0
    successes = sum(outcome_counts.get(o, 0) for o in SUCCESSFUL_OUTCOMES)
    return int(round_half_up(successes / completed * 100))


def volunteer_hours(total_items: int) -> float:
    return round_half_up(total_items * HOURS_PER_ITEM * VOLUNTEERS_PER_ITEM, 1)


def material_totals(items: Iterable[Item]) -> MaterialTotals:
    """
    Diverted weight per material. Items without a recorded weight add
    nothing; a missing percentage counts as zero.
    """
    totals = {key: 0.0 for key in MATERIALS}
    totals["total"] = 0.0
    for db_item in items:
        if not db_item.weight_kg:
            continue
        for key in MATERIALS:
            pct = getattr(db_item, f"pct_{key}") or 0
            totals[key] += db_item.weight_kg * pct / 100
        totals["total"] += db_item.weight_kg
    return MaterialTotals(**{k: round_half_up(v, 2) for k, v in totals.items()})


def _canonical(outcome) -> str:
    return LEGACY_OUTCOMES.get(outcome, outcome)


def outcome_breakdown(items: Iterable[Item]) -> OutcomeBreakdown:
    counts = {o.value: 0 for o in RepairOutcome}
    not_attempted = 0
    for db_item in items:
        outcome = _canonical(db_item.outcome)
        if outcome in counts:
            counts[outcome] += 1
        elif not outcome:
            not_attempted += 1
    return OutcomeBreakdown(**counts, not_attempted=not_attempted)


def _report_event(event: Event) -> ReportEvent:
    venue = event.venue
    return ReportEvent(
        id=event.id,
        title=event.title,
        date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
        venue_name=venue.name if venue else None,
        venue_address=venue.address if venue else None,
        venue_city=venue.city if venue else None,
    )


def _get_event(db: Session, event_id: str) -> Event:
    event = crud.event.get(db, id=event_id)
    if not event:
        raise NotFoundError("Event not found")
    return event


def _count_status(items: List[Item], status: str) -> int:
    return sum(1 for i in items if i.status == status)


def build_report(db: Session, *, event_id: str) -> EventReport:
    event = _get_event(db, event_id)
    items = crud.item.get_by_event(db, event_id=event_id)
    completed = _count_status(items, "completed")
    outcomes = outcome_breakdown(items)

    counts = crud.registration.count_by_status(db, event_id=event_id)
    summary = ReportSummary(
        total_items=len(items),
        completed_items=completed,
        in_progress_items=_count_status(items, "in-progress"),
        registered_items=_count_status(items, "registered"),
        total_registrations=sum(n for s, n in counts.items() if s != "cancelled"),
        checked_in=counts.get("checked_in", 0),
        volunteer_count=crud.fixer.count_yes_for_event(db, event_id=event_id),
    )

    report = EventReport(
        event=_report_event(event),
        summary=summary,
        outcomes=outcomes,
        success_rate=success_rate(outcomes.model_dump(), completed),
        volunteer_hours=volunteer_hours(len(items)),
        materials=material_totals(items),
    )
    logger.info(f"Report built for event {event_id}: {len(items)} items")
    return report


def build_stats(db: Session, *, event_id: str) -> EventStats:
    """Live dashboard numbers. Items of cancelled registrations are left out."""
    event = _get_event(db, event_id)

    counts = crud.registration.count_by_status(db, event_id=event_id)
    total = sum(counts.values())
    registrations = RegistrationCounts(
        total=total,
        registered=counts.get("registered", 0),
        waitlisted=counts.get("waitlisted", 0),
        checked_in=counts.get("checked_in", 0),
        cancelled=counts.get("cancelled", 0),
        active=total - counts.get("cancelled", 0),
    )

    items = [
        i
        for i in crud.item.get_by_event(db, event_id=event_id)
        if i.registration.status != "cancelled"
    ]
    completed_items = [i for i in items if i.status == "completed"]
    item_counts = ItemCounts(
        total=len(items),
        queued=_count_status(items, "registered"),
        in_progress=_count_status(items, "in-progress"),
        completed=len(completed_items),
    )

    outcomes = outcome_breakdown(completed_items)
    with_outcome = len(completed_items) - outcomes.not_attempted
    return EventStats(
        event=_report_event(event),
        registrations=registrations,
        items=item_counts,
        outcomes=outcomes,
        success_rate=success_rate(outcomes.model_dump(), with_outcome),
    )
