# repair_cafe/models/event.py
import uuid
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    venue_id = Column(String, ForeignKey("venues.id"), nullable=True)
    capacity = Column(Integer, nullable=False, default=40, server_default=text("40"))
    # draft | published | cancelled | completed
    status = Column(String, nullable=False, default="draft", server_default="draft")
    waitlist_enabled = Column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    registration_opens_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    venue = relationship("Venue", lazy="joined")
    registrations = relationship(
        "Registration", back_populates="event", cascade="all, delete-orphan"
    )
