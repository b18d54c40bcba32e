# repair_cafe/api/v1/endpoints/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from repair_cafe.api import deps
from repair_cafe.db.session import get_db
from repair_cafe.schemas.report import EventReportResponse, EventStats
from repair_cafe.services import report_service

router = APIRouter(
    prefix="/admin/events/{event_id}",
    tags=["Reports"],
    dependencies=[Depends(deps.require_admin)],
)


@router.get("/report", response_model=EventReportResponse)
def get_event_report(event_id: str, db: Session = Depends(get_db)):
    """
    Impact report: item and outcome counts, success rate, estimated
    volunteer hours and diverted material weight.
    """
    return EventReportResponse(report=report_service.build_report(db, event_id=event_id))


@router.get("/stats", response_model=EventStats)
def get_event_stats(event_id: str, db: Session = Depends(get_db)):
    return report_service.build_stats(db, event_id=event_id)
