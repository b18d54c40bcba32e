# repair_cafe/schemas/report.py
import datetime as dt
from datetime import time
from typing import Optional

from pydantic import BaseModel


class ReportEvent(BaseModel):
    id: str
    title: str
    date: dt.date
    start_time: time
    end_time: time
    venue_name: Optional[str] = None
    venue_address: Optional[str] = None
    venue_city: Optional[str] = None


class ReportSummary(BaseModel):
    total_items: int
    completed_items: int
    in_progress_items: int
    registered_items: int
    total_registrations: int
    checked_in: int
    volunteer_count: int


class OutcomeBreakdown(BaseModel):
    fixed: int = 0
    partially_fixed: int = 0
    not_repairable: int = 0
    needs_parts: int = 0
    referred: int = 0
    not_attempted: int = 0


class MaterialTotals(BaseModel):
    electronic: float = 0.0
    metal: float = 0.0
    plastic: float = 0.0
    textile: float = 0.0
    other: float = 0.0
    total: float = 0.0


class EventReport(BaseModel):
    event: ReportEvent
    summary: ReportSummary
    outcomes: OutcomeBreakdown
    success_rate: int
    volunteer_hours: float
    materials: MaterialTotals


class EventReportResponse(BaseModel):
    success: bool = True
    report: EventReport


class RegistrationCounts(BaseModel):
    total: int = 0
    registered: int = 0
    waitlisted: int = 0
    checked_in: int = 0
    cancelled: int = 0
    active: int = 0


class ItemCounts(BaseModel):
    total: int = 0
    queued: int = 0
    in_progress: int = 0
    completed: int = 0


class EventStats(BaseModel):
    success: bool = True
    event: ReportEvent
    registrations: RegistrationCounts
    items: ItemCounts
    outcomes: OutcomeBreakdown
    success_rate: int
