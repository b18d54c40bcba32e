# repair_cafe/crud/crud_venue.py
from typing import List

from sqlalchemy.orm import Session

from repair_cafe.models.venue import Venue
from repair_cafe.schemas.venue import VenueCreate
from .base import CRUDBase


class CRUDVenue(CRUDBase[Venue, VenueCreate, VenueCreate]):
    def get_all_ordered(self, db: Session) -> List[Venue]:
        return db.query(self.model).order_by(self.model.name.asc()).all()


venue = CRUDVenue(Venue)
