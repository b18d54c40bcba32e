# repair_cafe/models/fixer.py
"""
Fixer volunteer profiles.

A profile is linked to a user account by email, not by foreign key: people
usually sign up as fixers before they have ever signed in.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class Fixer(Base):
    __tablename__ = "fixers"

    id = Column(
        String, primary_key=True, default=lambda: f"fix_{uuid.uuid4().hex[:12]}"
    )
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    phone = Column(String, nullable=True)
    # Free-text skills as typed on the sign-up form
    skills = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    availability = Column(Text, nullable=True)
    comments = Column(Text, nullable=True)
    photo_url = Column(String, nullable=True)
    # pending | active | rejected | removed
    status = Column(String, nullable=False, default="pending", server_default="pending")
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    rsvps = relationship(
        "FixerEventRsvp", back_populates="fixer", cascade="all, delete-orphan"
    )


class FixerEventRsvp(Base):
    __tablename__ = "fixer_event_rsvps"

    id = Column(
        String, primary_key=True, default=lambda: f"rsvp_{uuid.uuid4().hex[:12]}"
    )
    fixer_id = Column(
        String, ForeignKey("fixers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # yes | no | maybe
    response = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    fixer = relationship("Fixer", back_populates="rsvps")

    __table_args__ = (
        UniqueConstraint("fixer_id", "event_id", name="uq_fixer_event_rsvp"),
    )
