# repair_cafe/models/registration_demographics.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class RegistrationDemographics(Base):
    """
    Optional survey answers collected after an attendee registers or a
    fixer signs up. Exactly one of `registration_id` and `fixer_id` is set.
    """

    __tablename__ = "registration_demographics"

    id = Column(
        String, primary_key=True, default=lambda: f"dem_{uuid.uuid4().hex[:12]}"
    )
    registration_id = Column(
        String,
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )
    fixer_id = Column(
        String, ForeignKey("fixers.id", ondelete="CASCADE"), nullable=True, unique=True
    )
    age_group = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    gender_self_describe = Column(String, nullable=True)
    newcomer_to_canada = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
