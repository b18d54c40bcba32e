# repair_cafe/models/item_feedback.py
import uuid
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from repair_cafe.db.base_class import Base


class ItemFeedback(Base):
    """The owner's 1-5 rating of how a repair went. One per owner and item."""

    __tablename__ = "item_feedback"

    id = Column(
        String, primary_key=True, default=lambda: f"ifb_{uuid.uuid4().hex[:12]}"
    )
    item_id = Column(
        String, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_item_feedback_item_user"),
    )
