# repair_cafe/api/v1/endpoints/venues.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from repair_cafe import crud
from repair_cafe.db.session import get_db
from repair_cafe.schemas.venue import VenueList

router = APIRouter(tags=["Venues"])


@router.get("/venues", response_model=VenueList)
def list_venues(db: Session = Depends(get_db)):
    return VenueList(venues=crud.venue.get_all_ordered(db))
