# repair_cafe/schemas/venue.py
from typing import List, Optional
from pydantic import BaseModel


class VenueCreate(BaseModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None


class Venue(VenueCreate):
    id: str

    model_config = {"from_attributes": True}


class VenueList(BaseModel):
    success: bool = True
    venues: List[Venue]
