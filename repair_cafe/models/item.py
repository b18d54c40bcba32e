# repair_cafe/models/item.py
import uuid
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(
        String, primary_key=True, default=lambda: f"itm_{uuid.uuid4().hex[:12]}"
    )
    registration_id = Column(
        String,
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Owner
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    problem = Column(Text, nullable=False)
    item_type = Column(String, nullable=True)
    # Skill names a fixer should have, used for matching
    suggested_skills = Column(JSON, nullable=True)

    status = Column(
        Enum(
            "registered",
            "in-progress",
            "completed",
            "cancelled",
            name="item_status_enum",
        ),
        nullable=False,
        default="registered",
        server_default="registered",
    )
    fixer_id = Column(String, ForeignKey("users.id"), nullable=True, index=True)
    queue_position = Column(Integer, nullable=True)

    outcome = Column(String, nullable=True)
    outcome_notes = Column(Text, nullable=True)
    repair_method = Column(Text, nullable=True)
    parts_used = Column(Text, nullable=True)
    repair_started_at = Column(DateTime(timezone=True), nullable=True)
    repair_completed_at = Column(DateTime(timezone=True), nullable=True)

    # Material diversion, reporting only
    weight_kg = Column(Float, nullable=True)
    pct_electronic = Column(Float, nullable=True)
    pct_metal = Column(Float, nullable=True)
    pct_plastic = Column(Float, nullable=True)
    pct_textile = Column(Float, nullable=True)
    pct_other = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    registration = relationship("Registration", back_populates="items")
    owner = relationship("User", foreign_keys=[user_id], lazy="joined")
    fixer = relationship("User", foreign_keys=[fixer_id], lazy="joined")

    __table_args__ = (Index("idx_items_event_status", "event_id", "status"),)
