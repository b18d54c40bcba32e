# repair_cafe/models/venue.py
import uuid
from sqlalchemy import Column, String
from repair_cafe.db.base_class import Base


class Venue(Base):
    __tablename__ = "venues"

    id = Column(
        String, primary_key=True, default=lambda: f"ven_{uuid.uuid4().hex[:12]}"
    )
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
