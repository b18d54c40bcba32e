# repair_cafe/models/registration.py
import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"reg_{uuid.uuid4().hex[:12]}"
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(
        Enum(
            "registered",
            "waitlisted",
            "checked_in",
            "cancelled",
            name="registration_status_enum",
        ),
        nullable=False,
        default="registered",
        server_default="registered",
    )
    # Arrival order within the event, assigned once at creation
    position = Column(Integer, nullable=False)

    # Opaque hex token printed as the check-in QR code
    qr_code = Column(String, nullable=False, unique=True, index=True)
    # Capability token for the emailed self-service link
    management_token = Column(String, nullable=True, unique=True, index=True)

    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    event = relationship("Event", back_populates="registrations")
    user = relationship("User", back_populates="registrations", lazy="joined")
    items = relationship(
        "Item",
        back_populates="registration",
        order_by="Item.queue_position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_registrations_event_status", "event_id", "status"),
        Index("idx_registrations_event_user", "event_id", "user_id"),
    )
